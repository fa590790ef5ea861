"""Recipe generation for a user, one-shot or through a guided conversation."""

import enum
import logging
from dataclasses import dataclass

from .errors import RecipeGenerationError
from .llm_service import RecipeGenerator
from .prompts import build_recipe_prompt, get_text, resolve_language
from .ratings import RatingService
from .stores import DietaryPreferenceStore

logger = logging.getLogger(__name__)


class ChatState(str, enum.Enum):
    """Steps of the guided conversation."""

    INITIAL = "initial"
    CUISINE_TYPE = "cuisine_type"
    COOKING_TIME = "cooking_time"
    TASTE_PREFERENCE = "taste_preference"


@dataclass(frozen=True)
class ChatOption:
    value: str
    labels: dict
    keywords: tuple = ()

    def to_dict(self, language: str) -> dict:
        return {"value": self.value, "label": self.labels[language]}


ANY_LABELS = {"zh": "都可以", "en": "Any"}

CUISINE_OPTIONS = [
    ChatOption("chinese", {"zh": "中餐", "en": "Chinese"}, ("中", "chinese")),
    ChatOption("western", {"zh": "西餐", "en": "Western"}, ("西", "western")),
    ChatOption("japanese", {"zh": "日料", "en": "Japanese"}, ("日", "japanese")),
    ChatOption("korean", {"zh": "韩料", "en": "Korean"}, ("韩", "korean")),
    ChatOption("thai", {"zh": "泰餐", "en": "Thai"}, ("泰", "thai")),
    ChatOption("italian", {"zh": "意餐", "en": "Italian"}, ("意", "italian")),
    ChatOption("any", ANY_LABELS),
]

COOKING_TIME_OPTIONS = [
    ChatOption("quick", {"zh": "快手菜（15分钟内）", "en": "Quick (15 min)"}, ("快", "quick")),
    ChatOption("slow", {"zh": "精致慢炖（1小时以上）", "en": "Slow (1+ hour)"}, ("慢", "slow")),
    ChatOption("medium", {"zh": "中等时间（30分钟内）", "en": "Medium (30 min)"}, ("中", "medium")),
    ChatOption("any", ANY_LABELS),
]

TASTE_OPTIONS = [
    ChatOption("light", {"zh": "清淡", "en": "Light"}, ("清", "light")),
    ChatOption("spicy", {"zh": "辣味", "en": "Spicy"}, ("辣", "spicy")),
    ChatOption("sweet", {"zh": "甜味", "en": "Sweet"}, ("甜", "sweet")),
    ChatOption("sour", {"zh": "酸味", "en": "Sour"}, ("酸", "sour")),
    ChatOption("rich", {"zh": "重口味", "en": "Rich"}, ("重", "rich")),
    ChatOption("any", ANY_LABELS),
]

OPTION_TABLES = {
    "cuisine": CUISINE_OPTIONS,
    "cooking_time": COOKING_TIME_OPTIONS,
    "taste": TASTE_OPTIONS,
}


def get_options(option_type: str, language: str) -> list[dict] | None:
    """Localized options for a question, or None for an unknown type."""
    table = OPTION_TABLES.get(option_type)
    if table is None:
        return None
    language = resolve_language(language)
    return [option.to_dict(language) for option in table]


def parse_selection(message: str, options: list[ChatOption]) -> str:
    """First option whose keyword appears in the message, else "any"."""
    text = message.lower()
    for option in options:
        if any(keyword in text for keyword in option.keywords):
            return option.value
    return "any"


class RecipeChatService:
    """Generates recipes and re-ranks them by the user's ratings."""

    def __init__(
        self,
        generator: RecipeGenerator | None,
        rating_service: RatingService,
        dietary_store: DietaryPreferenceStore,
        default_language: str = "zh",
    ):
        self.generator = generator
        self.rating_service = rating_service
        self.dietary_store = dietary_store
        self.default_language = default_language

    @property
    def available(self) -> bool:
        return self.generator is not None

    def generate_for_user(
        self,
        user_id: str,
        ingredients: str,
        language: str | None = None,
        scene: str | None = None,
        budget: str | None = None,
        extra: dict | None = None,
    ) -> list[dict]:
        """Generate recipes from ingredients and the user's dietary settings.

        Raises:
            RecipeGenerationError: If generation is disabled or the reply is unusable.
        """
        if self.generator is None:
            raise RecipeGenerationError("Recipe generation is not configured")

        language = resolve_language(language, self.default_language)
        prompt = build_recipe_prompt(
            language,
            ingredients,
            dietary=self.dietary_store.get_preference(user_id),
            scene=scene,
            budget=budget,
            extra=extra,
        )
        logger.info(f"Generating recipes for {user_id} ({language}) from: {ingredients}")
        recipes = self.generator.generate(prompt)
        return self.rating_service.adjust_recommendations_by_rating(user_id, recipes)

    def _question(self, language: str, text_key: str, option_type: str, state: ChatState, data: dict) -> dict:
        return {
            "type": "question",
            "message": get_text(language, text_key),
            "options": get_options(option_type, language),
            "state": state.value,
            "data": data,
        }

    def handle_message(self, user_id: str, message: str, language: str | None, state: str, data: dict | None = None) -> dict:
        """Advance the guided conversation by one user message.

        initial -> cuisine_type -> cooking_time -> taste_preference -> recipes.
        Unknown states restart the conversation.
        """
        language = resolve_language(language, self.default_language)
        data = dict(data or {})
        try:
            state = ChatState(state)
        except ValueError:
            state = ChatState.INITIAL

        logger.info(f"Chat message from {user_id} in state {state.value}")

        if state == ChatState.INITIAL:
            return self._question(
                language, "askCuisineType", "cuisine", ChatState.CUISINE_TYPE,
                {"ingredients": message},
            )

        if state == ChatState.CUISINE_TYPE:
            data["cuisine_type"] = parse_selection(message, CUISINE_OPTIONS)
            return self._question(
                language, "askCookingTime", "cooking_time", ChatState.COOKING_TIME, data
            )

        if state == ChatState.COOKING_TIME:
            data["cooking_time"] = parse_selection(message, COOKING_TIME_OPTIONS)
            return self._question(
                language, "askTastePreference", "taste", ChatState.TASTE_PREFERENCE, data
            )

        data["taste_preference"] = parse_selection(message, TASTE_OPTIONS)
        ingredients = data.get("ingredients", "")
        extra = {
            key: data.get(key)
            for key in ("cuisine_type", "cooking_time", "taste_preference")
            if data.get(key) and data.get(key) != "any"
        }
        try:
            recipes = self.generate_for_user(user_id, ingredients, language, extra=extra)
        except Exception as e:
            logger.exception(f"Guided recipe generation failed for {user_id}: {e}")
            return {
                "type": "error",
                "message": get_text(language, "recipeGenerationFailed"),
                "state": ChatState.INITIAL.value,
                "data": {},
            }

        return {
            "type": "recipes",
            "message": get_text(language, "recipesGenerated"),
            "recipes": recipes,
            "state": ChatState.INITIAL.value,
            "data": data,
        }
