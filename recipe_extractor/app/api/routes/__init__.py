from fastapi import APIRouter

from recipe_extractor.app.api.routes import grocery, ingredients, recipes

api_router = APIRouter()
api_router.include_router(recipes.router)
api_router.include_router(grocery.router)
api_router.include_router(ingredients.router)
