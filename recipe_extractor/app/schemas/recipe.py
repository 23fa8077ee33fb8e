from datetime import datetime
import enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from recipe_extractor.app.services.url_parsing.parsing_utils import (
    coerce_text,
    extract_ingredient_text,
    extract_instruction_text,
)


class RecipeMethod(str, enum.Enum):
    SIMPLE = "simple"
    DEEPSEEK = "deepseek"
    DEEPSEEK_MOBILE = "deepseek-mobile"
    DEEPSEEK_OPTIMIZED = "deepseek-optimized"
    ERROR_FALLBACK = "error-fallback"
    TIMEOUT_FALLBACK = "timeout-fallback"


DEGRADED_METHODS = {RecipeMethod.ERROR_FALLBACK, RecipeMethod.TIMEOUT_FALLBACK}


class DeviceVariant(str, enum.Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"


class ExtractionStrategy(str, enum.Enum):
    AUTO = "auto"
    SIMPLE = "simple"


class StructuredRecipeFields(BaseModel):
    """Recipe fields as returned by a JSON-speaking extractor."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: Optional[str] = Field(default=None, validation_alias=AliasChoices("title", "name"))
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("instructions", "steps")
    )
    prep_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("prep_time", "prepTime"))
    cook_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("cook_time", "cookTime"))
    total_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("total_time", "totalTime"))
    servings: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("servings", "recipeYield", "yield")
    )

    @field_validator("ingredients", mode="before")
    @classmethod
    def coerce_ingredients(cls, value):
        return extract_ingredient_text(value) if value is not None else []

    @field_validator("instructions", mode="before")
    @classmethod
    def coerce_instructions(cls, value):
        return extract_instruction_text(value) if value is not None else []

    @field_validator("title", "description", "prep_time", "cook_time", "total_time", "servings", mode="before")
    @classmethod
    def coerce_scalar_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return coerce_text(value) or None


class MarkdownSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["markdown"] = "markdown"
    markdown: str


class StructuredSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    fields: StructuredRecipeFields


RecipeSource = Annotated[Union[MarkdownSource, StructuredSource], Field(discriminator="kind")]


class Recipe(BaseModel):
    """Normalized extraction result. Immutable; a refresh replaces the whole value."""

    model_config = ConfigDict(frozen=True)

    source: RecipeSource
    title: str = Field(min_length=1)
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    ingredient_categories: Optional[Dict[str, List[str]]] = None
    instructions: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    markdown: str
    method: RecipeMethod
    url: Optional[str] = None
    cooking_time: Optional[str] = None
    servings: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        return self.method in DEGRADED_METHODS


class StoredRecipe(BaseModel):
    id: int
    user_id: str
    recipe: Recipe
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExtractRequest(BaseModel):
    url: str
    device_variant: Optional[DeviceVariant] = None
    strategy: ExtractionStrategy = ExtractionStrategy.AUTO

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url is required")
        return value


class ExtractResponse(BaseModel):
    recipe: Recipe
    device_variant: DeviceVariant
    is_degraded: bool


class SaveRecipeRequest(BaseModel):
    recipe: Recipe


class SaveRecipeResponse(BaseModel):
    id: int


class CategorizeRequest(BaseModel):
    ingredients: List[str]


class CategorizeResponse(BaseModel):
    categories: Dict[str, List[str]]
