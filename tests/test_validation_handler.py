import json

import pytest
from fastapi.exceptions import RequestValidationError

from recipe_extractor.app.main import persistence_exception_handler, validation_exception_handler
from recipe_extractor.app.services.errors import PersistenceError


@pytest.mark.asyncio
async def test_validation_handler_formats_errors():
    exc = RequestValidationError(
        errors=[
            {"loc": ("body", "url"), "msg": "field required"},
            {"loc": ("query", "mode"), "msg": "value is not a valid enumeration member"},
        ]
    )
    response = await validation_exception_handler(None, exc)
    assert response.status_code == 422
    body = json.loads(response.body)
    assert body["error_code"] == "validation_error"
    assert body["message"] == "Invalid request payload."
    assert "job_id" in body and body["job_id"]
    assert {"field": "body.url", "message": "field required"} in body["details"]
    assert {"field": "query.mode", "message": "value is not a valid enumeration member"} in body["details"]


@pytest.mark.asyncio
async def test_persistence_errors_map_to_503():
    response = await persistence_exception_handler(None, PersistenceError("disk full"))
    assert response.status_code == 503
    assert json.loads(response.body)["error_code"] == "persistence_error"
