"""
Grocery list aggregation.

Items keep their per-recipe identity in the stored state; merging across
recipes happens only when the list is viewed in "all" mode.
"""

import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_extractor.app.db import models
from recipe_extractor.app.schemas.grocery import (
    CUSTOM_SOURCE,
    CustomItemInput,
    GroceryItem,
    GroceryListState,
    GroceryRecipeGroup,
    GroceryViewMode,
    RecipeIngredients,
)
from recipe_extractor.app.services.errors import NotFoundError, PersistenceError
from recipe_extractor.app.services.url_parsing.classifier import classify
from recipe_extractor.app.services.url_parsing.constants import SECTION_ORDER
from recipe_extractor.app.services.url_parsing.normalizer import standardize
from recipe_extractor.app.services.url_parsing.parsing_utils import clean_text
from recipe_extractor.app.services.url_parsing.quantity import (
    merge_key,
    merge_quantities,
    split_ingredient,
)

logger = logging.getLogger(__name__)

Listener = Callable[[GroceryListState], None]


def _new_id() -> str:
    return uuid.uuid4().hex


def group_by_section(items: Iterable[GroceryItem]) -> Dict[str, List[GroceryItem]]:
    """Group items by section in display order, omitting empty sections."""
    sections: Dict[str, List[GroceryItem]] = {section: [] for section in SECTION_ORDER}
    for item in items:
        sections.setdefault(item.section, []).append(item)
    return {section: entries for section, entries in sections.items() if entries}


class GroceryListAggregator:
    def __init__(self, state: Optional[GroceryListState] = None, id_factory: Callable[[], str] = _new_id):
        self._state = state.model_copy(deep=True) if state else GroceryListState()
        self._new_id = id_factory
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GroceryListState:
        return self._state.model_copy(deep=True)

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Call `callback` with the new state after every mutation; returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _changed(self) -> None:
        self._state.version += 1
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    def _make_item(self, line: str, source: str, recipe_id: Optional[str]) -> Optional[GroceryItem]:
        text = clean_text(line)
        if not text or text.endswith(":"):
            return None
        quantity, name = split_ingredient(text)
        display_name = standardize(name) or standardize(text)
        return GroceryItem(
            id=self._new_id(),
            name=display_name,
            quantity=quantity,
            section=classify(name or text),
            source=source,
            recipe_id=recipe_id,
        )

    def _find(self, item_id: str) -> GroceryItem:
        for item in self._state.items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Grocery item {item_id} not found")

    def _drop_empty_groups(self) -> None:
        used = {item.recipe_id for item in self._state.items if item.recipe_id}
        self._state.recipes = [group for group in self._state.recipes if group.id in used]

    def add_recipe(self, recipe_id: Optional[str], recipe_name: str, ingredients: Iterable[str]) -> bool:
        """Add a recipe's ingredients; a recipe name already on the list is a no-op."""
        name = clean_text(recipe_name)
        if any(group.name == name for group in self._state.recipes):
            logger.debug("Recipe %s already on grocery list", name)
            return False
        group_id = recipe_id or self._new_id()
        items = [item for item in (self._make_item(line, name, group_id) for line in ingredients) if item]
        if not items:
            return False
        self._state.recipes.append(GroceryRecipeGroup(id=group_id, name=name))
        self._state.items.extend(items)
        self._changed()
        return True

    def add_custom_item(self, name: str, quantity: str = "") -> GroceryItem:
        text = clean_text(name)
        qty = clean_text(quantity)
        if not qty:
            qty, text = split_ingredient(text)
        item = GroceryItem(
            id=self._new_id(),
            name=standardize(text) or text,
            quantity=qty,
            section=classify(text),
            source=CUSTOM_SOURCE,
        )
        self._state.items.append(item)
        self._changed()
        return item

    def toggle_checked(self, item_id: str) -> GroceryItem:
        item = self._find(item_id)
        item.is_checked = not item.is_checked
        self._changed()
        return item.model_copy()

    def remove(self, item_id: str) -> None:
        item = self._find(item_id)
        self._state.items = [existing for existing in self._state.items if existing.id != item.id]
        self._drop_empty_groups()
        self._changed()

    def remove_checked(self) -> int:
        remaining = [item for item in self._state.items if not item.is_checked]
        removed = len(self._state.items) - len(remaining)
        if removed:
            self._state.items = remaining
            self._drop_empty_groups()
            self._changed()
        return removed

    def clear_all(self) -> None:
        self._state.items = []
        self._state.recipes = []
        self._changed()

    def view(self, mode: GroceryViewMode = GroceryViewMode.ALL) -> Dict[str, List[GroceryItem]]:
        """
        Section -> items.

        "all" merges items sharing a merge key: the first occurrence fixes the
        section and position, later ones add their quantities, and the merged
        item is checked only when every merged item is. "byRecipe" shows every
        item as stored.
        """
        items = [item.model_copy() for item in self._state.items]
        if GroceryViewMode(mode) == GroceryViewMode.BY_RECIPE:
            return group_by_section(items)

        merged: Dict[str, GroceryItem] = {}
        for item in items:
            key = merge_key(item.name) or item.name.lower()
            existing = merged.get(key)
            if existing is None:
                merged[key] = item
                continue
            merged[key] = existing.model_copy(
                update={
                    "quantity": merge_quantities(existing.quantity, item.quantity),
                    "is_checked": existing.is_checked and item.is_checked,
                }
            )
        return group_by_section(merged.values())


def aggregate_grocery_list(
    recipes: Iterable, custom_items: Iterable = ()
) -> Dict[str, List[GroceryItem]]:
    """Stateless aggregation: merged, section-grouped items for the given recipes and custom items."""
    aggregator = GroceryListAggregator()
    for entry in recipes:
        recipe = RecipeIngredients.model_validate(entry)
        aggregator.add_recipe(recipe.recipe_id, recipe.recipe_name, recipe.ingredients)
    for entry in custom_items:
        custom = CustomItemInput.model_validate(entry)
        aggregator.add_custom_item(custom.name, custom.quantity)
    return aggregator.view(GroceryViewMode.ALL)


def load_grocery_list(db: Session, user_id: str) -> GroceryListState:
    try:
        row = db.scalars(select(models.GroceryList).where(models.GroceryList.user_id == user_id)).first()
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to load grocery list: {exc}") from exc
    if row is None or not row.state:
        return GroceryListState()
    return GroceryListState.model_validate(row.state)


def save_grocery_list(db: Session, user_id: str, state: GroceryListState) -> None:
    try:
        row = db.get(models.GroceryList, user_id)
        if row is None:
            row = models.GroceryList(user_id=user_id)
            db.add(row)
        row.state = state.model_dump(mode="json")
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Failed to save grocery list: {exc}") from exc
