from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from recipe_extractor.app.api.deps import get_current_user, get_db_session
from recipe_extractor.app.schemas.auth import CurrentUser
from recipe_extractor.app.schemas.grocery import (
    AddRecipeResponse,
    AggregateRequest,
    CustomItemInput,
    GroceryItem,
    GroceryListView,
    GroceryViewMode,
    RecipeIngredients,
)
from recipe_extractor.app.services import grocery_service
from recipe_extractor.app.services.errors import NotFoundError

router = APIRouter(prefix="/grocery-list", tags=["grocery-list"])


def _aggregator_for(db: Session, user: CurrentUser) -> grocery_service.GroceryListAggregator:
    aggregator = grocery_service.GroceryListAggregator(grocery_service.load_grocery_list(db, user.id))
    aggregator.subscribe(lambda state: grocery_service.save_grocery_list(db, user.id, state))
    return aggregator


def _view(aggregator: grocery_service.GroceryListAggregator, mode: GroceryViewMode) -> GroceryListView:
    state = aggregator.state
    return GroceryListView(
        mode=mode, sections=aggregator.view(mode), recipes=state.recipes, version=state.version
    )


@router.post("/aggregate", response_model=GroceryListView)
def aggregate(payload: AggregateRequest):
    sections = grocery_service.aggregate_grocery_list(payload.recipes, payload.custom_items)
    return GroceryListView(mode=GroceryViewMode.ALL, sections=sections)


@router.get("", response_model=GroceryListView)
def get_grocery_list(
    mode: GroceryViewMode = GroceryViewMode.ALL,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _view(_aggregator_for(db, current_user), mode)


@router.post("/recipes", response_model=AddRecipeResponse)
def add_recipe(
    payload: RecipeIngredients,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    aggregator = _aggregator_for(db, current_user)
    added = aggregator.add_recipe(payload.recipe_id, payload.recipe_name, payload.ingredients)
    return AddRecipeResponse(added=added, state=aggregator.state)


@router.post("/items", response_model=GroceryItem, status_code=status.HTTP_201_CREATED)
def add_custom_item(
    payload: CustomItemInput,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _aggregator_for(db, current_user).add_custom_item(payload.name, payload.quantity)


@router.post("/items/{item_id}/toggle", response_model=GroceryItem)
def toggle_item(
    item_id: str,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        return _aggregator_for(db, current_user).toggle_checked(item_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Grocery item not found")


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    item_id: str,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        _aggregator_for(db, current_user).remove(item_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Grocery item not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/checked")
def remove_checked(
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return {"removed": _aggregator_for(db, current_user).remove_checked()}


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_grocery_list(
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    _aggregator_for(db, current_user).clear_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
