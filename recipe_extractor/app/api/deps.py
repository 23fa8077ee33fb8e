from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from recipe_extractor.app.core.config import get_settings
from recipe_extractor.app.db.session import get_db
from recipe_extractor.app.schemas.auth import CurrentUser
from recipe_extractor.app.schemas.recipe import DeviceVariant
from recipe_extractor.app.services.extraction_service import (
    RecipeExtractionService,
    get_extraction_service as _get_extraction_service,
)

security = HTTPBearer(auto_error=True)

MOBILE_UA_MARKERS = ("mobi", "android", "iphone", "ipad", "ipod", "windows phone")


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    settings = get_settings()
    try:
        payload = jwt.decode(credentials.credentials, settings.auth_secret_key, algorithms=[settings.auth_algorithm])
        sub = payload.get("sub")
        if sub is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
        email = payload.get("email")
        return CurrentUser(id=str(sub), email=email)
    except (JWTError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")


def get_db_session(db: Session = Depends(get_db)) -> Session:
    return db


def get_extraction_service() -> RecipeExtractionService:
    return _get_extraction_service()


def detect_device_variant(user_agent: Optional[str] = Header(None)) -> DeviceVariant:
    lowered = (user_agent or "").lower()
    if any(marker in lowered for marker in MOBILE_UA_MARKERS):
        return DeviceVariant.MOBILE
    return DeviceVariant.DESKTOP
