"""Device profiles and LLM prompt templates for recipe extraction."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from recipe_extractor.app.core.config import Settings
from recipe_extractor.app.schemas.recipe import DeviceVariant, RecipeMethod

DESKTOP_SYSTEM_PROMPT = """You are a helpful assistant that extracts recipe information from web page content.

IMPORTANT FORMATTING INSTRUCTIONS:
1. Preserve any subcategories within the ingredients list (e.g., "Cheese Filling:", "Sauce:") as "### Subcategory" lines.
2. Include chef tips and storage/reheating instructions in a separate section called "## Tips" after the instructions.
3. If the recipe has no subcategories or tips, just extract what is available.
{avoid_rule}
Respond in markdown using exactly this layout:
# Recipe Title
Prep Time: ... / Cook Time: ... / Total Time: ... / Servings: ... (one per line, only when known)
## Ingredients
- ingredient
## Instructions
1. step
## Tips
- tip"""

MOBILE_SYSTEM_PROMPT = """Extract the recipe from the page content in a simple format with title, ingredients, and instructions.
{avoid_rule}
Respond in markdown only, without code blocks:
# Recipe Title
## Ingredients
- ingredient
## Instructions
1. step"""

USER_PROMPT = "Extract the recipe from this page ({url}).\n\n{content}"
CONDENSED_USER_PROMPT = (
    "Extract the recipe from this page ({url}). The ingredient and instruction "
    "candidates below were pre-extracted from the page; clean them up and keep their order.\n\n{content}"
)


class DeviceProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    variant: DeviceVariant
    user_agent: str
    system_prompt: str
    temperature: float
    max_tokens: int
    content_chars: int
    fetch_timeout_seconds: float
    llm_timeout_seconds: float

    def method_for(self, condensed: bool) -> RecipeMethod:
        if self.variant == DeviceVariant.MOBILE:
            return RecipeMethod.DEEPSEEK_MOBILE
        return RecipeMethod.DEEPSEEK_OPTIMIZED if condensed else RecipeMethod.DEEPSEEK


def avoid_rule(phrases: List[str]) -> str:
    if not phrases:
        return ""
    quoted = ", ".join(f'"{phrase}"' for phrase in phrases)
    return f"Ignore website navigation and interface text such as {quoted}; never include it in the recipe.\n"


def get_device_profile(settings: Settings, variant: DeviceVariant) -> DeviceProfile:
    rule = avoid_rule(settings.llm_avoid_phrases)
    if variant == DeviceVariant.MOBILE:
        return DeviceProfile(
            variant=variant,
            user_agent=settings.mobile_user_agent,
            system_prompt=MOBILE_SYSTEM_PROMPT.format(avoid_rule=rule),
            temperature=settings.mobile_llm_temperature,
            max_tokens=settings.mobile_llm_max_tokens,
            content_chars=settings.mobile_content_chars,
            fetch_timeout_seconds=settings.mobile_fetch_timeout_seconds,
            llm_timeout_seconds=settings.mobile_llm_timeout_seconds,
        )
    return DeviceProfile(
        variant=DeviceVariant.DESKTOP,
        user_agent=settings.desktop_user_agent,
        system_prompt=DESKTOP_SYSTEM_PROMPT.format(avoid_rule=rule),
        temperature=settings.desktop_llm_temperature,
        max_tokens=settings.desktop_llm_max_tokens,
        content_chars=settings.desktop_content_chars,
        fetch_timeout_seconds=settings.desktop_fetch_timeout_seconds,
        llm_timeout_seconds=settings.desktop_llm_timeout_seconds,
    )


def build_user_prompt(url: str, content: str, condensed: bool, title: Optional[str] = None) -> str:
    header = f"Page title: {title}\n" if title else ""
    template = CONDENSED_USER_PROMPT if condensed else USER_PROMPT
    return template.format(url=url, content=header + content)
