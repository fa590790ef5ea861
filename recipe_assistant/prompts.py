"""Localized prompt templates and UI strings for recipe generation."""

from .stores import DietaryRecord

SUPPORTED_LANGUAGES = ("zh", "en")

_RECIPE_SCHEMA = """[
  {
    "name": "...",
    "description": "...",
    "cookingTime": "...",
    "difficulty": "...",
    "servings": "...",
    "ingredients": [{"name": "...", "amount": "...", "notes": "..."}],
    "steps": [{"step": 1, "instruction": "...", "time": "..."}],
    "nutrition": {"calories": "xxx kcal", "protein": "x g", "fat": "x g", "carbs": "x g", "fiber": "x g"},
    "tips": ["..."],
    "tags": ["..."]
  }
]"""

PROMPTS = {
    "zh": {
        "template": (
            "根据以下条件推荐3个不同的菜谱：\n"
            "食材：{ingredients}\n"
            "{preferences}\n"
            "{context}\n\n"
            "难度只能是 简单/中等/困难 之一。\n"
            "只返回 JSON 数组，结构如下：\n{schema}\n\n"
            "注意：请确保所有内容都使用中文。"
        ),
        "preferences": {
            "prefix": "用户偏好：",
            "separator": "、",
            "low_salt": "少盐",
            "low_oil": "少油",
            "spicy": "偏辣",
            "vegetarian": "素食",
            "cuisine": "喜欢{cuisine}",
        },
        "context": {"scene": "场景：{value}。", "budget": "预算：{value}。"},
        "extra": {
            "cuisine_type": "菜系：{value}。",
            "cooking_time": "烹饪时间：{value}。",
            "taste_preference": "口味：{value}。",
        },
    },
    "en": {
        "template": (
            "Recommend 3 different recipes based on the following conditions:\n"
            "Ingredients: {ingredients}\n"
            "{preferences}\n"
            "{context}\n\n"
            "Difficulty must be one of Easy/Medium/Hard.\n"
            "Reply with a JSON array only, structured as follows:\n{schema}\n\n"
            "Note: write every field in English."
        ),
        "preferences": {
            "prefix": "User preferences: ",
            "separator": ", ",
            "low_salt": "low salt",
            "low_oil": "low oil",
            "spicy": "spicy",
            "vegetarian": "vegetarian",
            "cuisine": "likes {cuisine}",
        },
        "context": {"scene": "Occasion: {value}. ", "budget": "Budget: {value}. "},
        "extra": {
            "cuisine_type": "Cuisine: {value}. ",
            "cooking_time": "Cooking time: {value}. ",
            "taste_preference": "Taste: {value}. ",
        },
    },
}

TEXTS = {
    "zh": {
        "askCuisineType": "您想做哪种菜系？",
        "askCookingTime": "您希望烹饪时间多长？",
        "askTastePreference": "您喜欢什么口味？",
        "recipesGenerated": "为您生成了以下食谱：",
        "recipeGenerationFailed": "食谱生成失败，请稍后再试。",
        "chatError": "对话处理失败，请重新开始。",
    },
    "en": {
        "askCuisineType": "Which cuisine would you like?",
        "askCookingTime": "How much time do you have to cook?",
        "askTastePreference": "What flavours do you like?",
        "recipesGenerated": "Here are your recipes:",
        "recipeGenerationFailed": "Recipe generation failed, please try again later.",
        "chatError": "Something went wrong, let's start over.",
    },
}


def resolve_language(language: str | None, default: str = "zh") -> str:
    if language in SUPPORTED_LANGUAGES:
        return language
    return default


def get_text(language: str, key: str) -> str:
    return TEXTS[resolve_language(language)].get(key, key)


def format_preferences(language: str, dietary: DietaryRecord | None) -> str:
    """Render explicit dietary settings as one prompt line ("" if none apply)."""
    if dietary is None:
        return ""
    table = PROMPTS[resolve_language(language)]["preferences"]

    parts = [
        table[flag]
        for flag in ("low_salt", "low_oil", "spicy", "vegetarian")
        if getattr(dietary, flag)
    ]
    if dietary.cuisine:
        parts.append(table["cuisine"].format(cuisine=dietary.cuisine))

    if not parts:
        return ""
    return table["prefix"] + table["separator"].join(parts)


def build_recipe_prompt(
    language: str,
    ingredients: str,
    dietary: DietaryRecord | None = None,
    scene: str | None = None,
    budget: str | None = None,
    extra: dict | None = None,
) -> str:
    """Build the recipe generation prompt.

    extra carries the interactive chat answers (cuisine_type, cooking_time,
    taste_preference).
    """
    language = resolve_language(language)
    table = PROMPTS[language]

    context = ""
    if scene:
        context += table["context"]["scene"].format(value=scene)
    if budget:
        context += table["context"]["budget"].format(value=budget)
    for key, value in (extra or {}).items():
        if value and key in table["extra"]:
            context += table["extra"][key].format(value=value)

    return table["template"].format(
        ingredients=ingredients,
        preferences=format_preferences(language, dietary),
        context=context.strip(),
        schema=_RECIPE_SCHEMA,
    )
