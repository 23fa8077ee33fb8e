import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from recipe_extractor.app.api.deps import (
    detect_device_variant,
    get_current_user,
    get_db_session,
    get_extraction_service,
)
from recipe_extractor.app.schemas.auth import CurrentUser
from recipe_extractor.app.schemas.recipe import (
    DeviceVariant,
    ExtractRequest,
    ExtractResponse,
    SaveRecipeRequest,
    SaveRecipeResponse,
    StoredRecipe,
)
from recipe_extractor.app.services import recipes_service
from recipe_extractor.app.services.errors import InvalidUrlError
from recipe_extractor.app.services.extraction_service import RecipeExtractionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/extract", response_model=ExtractResponse)
async def extract_recipe(
    payload: ExtractRequest,
    detected_variant: DeviceVariant = Depends(detect_device_variant),
    service: RecipeExtractionService = Depends(get_extraction_service),
):
    variant = payload.device_variant or detected_variant
    try:
        recipe = await service.extract(payload.url, variant, payload.strategy)
    except InvalidUrlError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.reason)
    return ExtractResponse(recipe=recipe, device_variant=variant, is_degraded=recipe.is_degraded)


@router.get("", response_model=List[StoredRecipe])
def list_recipes(
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return recipes_service.list_recipes(db, current_user.id)


@router.post("", response_model=SaveRecipeResponse, status_code=status.HTTP_201_CREATED)
def save_recipe(
    payload: SaveRecipeRequest,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipe_id = recipes_service.save_recipe(db, current_user.id, payload.recipe)
    return SaveRecipeResponse(id=recipe_id)


@router.get("/{recipe_id}", response_model=StoredRecipe)
def get_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return recipes_service.get_recipe(db, current_user.id, recipe_id)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipes_service.delete_recipe(db, current_user.id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
