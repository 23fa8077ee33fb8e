import logging
import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from recipe_extractor.app.api.routes import api_router
from recipe_extractor.app.core.config import get_settings
from recipe_extractor.app.db import models  # noqa: F401
from recipe_extractor.app.db.base import Base
from recipe_extractor.app.db.session import engine
from recipe_extractor.app.services.errors import PersistenceError

logger = logging.getLogger(__name__)


async def validation_exception_handler(request, exc: RequestValidationError):
    job_id = str(uuid.uuid4())
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "validation_error",
            "message": "Invalid request payload.",
            "details": details,
            "job_id": job_id,
        },
    )


async def persistence_exception_handler(request, exc: PersistenceError):
    logger.error("Persistence failure: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error_code": "persistence_error", "message": "Recipe storage is unavailable."},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    app = FastAPI(title="Recipe Extractor", version="0.1.0")
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PersistenceError, persistence_exception_handler)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.on_event("startup")
    async def startup_event() -> None:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")

    return app


app = create_app()
