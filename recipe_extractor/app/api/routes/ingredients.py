from fastapi import APIRouter

from recipe_extractor.app.schemas.recipe import CategorizeRequest, CategorizeResponse
from recipe_extractor.app.services.url_parsing.classifier import categorize

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.post("/categorize", response_model=CategorizeResponse)
def categorize_ingredients(payload: CategorizeRequest):
    return CategorizeResponse(categories=categorize(payload.ingredients))
