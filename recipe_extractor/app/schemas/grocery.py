import enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

CUSTOM_SOURCE = "custom"


class GroceryViewMode(str, enum.Enum):
    ALL = "all"
    BY_RECIPE = "byRecipe"


class GroceryItem(BaseModel):
    id: str
    name: str
    quantity: str = ""
    section: str
    is_checked: bool = False
    source: str = CUSTOM_SOURCE
    recipe_id: Optional[str] = None


class GroceryRecipeGroup(BaseModel):
    id: str
    name: str


class GroceryListState(BaseModel):
    recipes: List[GroceryRecipeGroup] = Field(default_factory=list)
    items: List[GroceryItem] = Field(default_factory=list)
    version: int = 0


class RecipeIngredients(BaseModel):
    recipe_name: str
    ingredients: List[str] = Field(default_factory=list)
    recipe_id: Optional[str] = None


class CustomItemInput(BaseModel):
    name: str = Field(min_length=1)
    quantity: str = ""


class AggregateRequest(BaseModel):
    recipes: List[RecipeIngredients] = Field(default_factory=list)
    custom_items: List[CustomItemInput] = Field(default_factory=list)


class GroceryListView(BaseModel):
    mode: GroceryViewMode
    sections: Dict[str, List[GroceryItem]]
    recipes: List[GroceryRecipeGroup] = Field(default_factory=list)
    version: int = 0


class AddRecipeResponse(BaseModel):
    added: bool
    state: GroceryListState
