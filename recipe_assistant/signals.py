"""Signal extraction from normalized recipes.

Pure functions; nothing here touches a store.
"""

import json
import re

from .recipes import Nutrition, Recipe

# Canonical method label -> keywords that indicate it (Chinese and English)
COOKING_METHOD_KEYWORDS = {
    "stir_fry": ["炒", "stir-fry", "sauté"],
    "boil": ["煮", "boil", "simmer"],
    "roast": ["烤", "roast", "bake", "grill"],
    "steam": ["蒸", "steam"],
    "pan_fry": ["煎", "pan-fry", "fry"],
    "stew": ["炖", "stew", "braise"],
}

LOW_CALORIE_THRESHOLD = 300
HIGH_CALORIE_THRESHOLD = 500
HIGH_PROTEIN_THRESHOLD = 20

_DIGITS = re.compile(r"\d+")


def first_int(text: str | None) -> int:
    """Return the first run of digits in text, or 0 if there is none."""
    if text is None:
        return 0
    match = _DIGITS.search(str(text))
    return int(match.group()) if match else 0


def extract_ingredients(recipe: Recipe) -> list[str]:
    return recipe.ingredient_names


def extract_cooking_methods(recipe: Recipe) -> list[str]:
    """Match the serialized recipe against COOKING_METHOD_KEYWORDS.

    Each method is reported once no matter how often it is mentioned.
    """
    text = json.dumps(recipe.raw, ensure_ascii=False, default=str).lower()
    return [
        method
        for method, keywords in COOKING_METHOD_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    ]


def categorize_cooking_time(cooking_time: str | None) -> str:
    """Bucket a cooking time string by its first number of minutes."""
    minutes = first_int(cooking_time)
    if minutes <= 15:
        return "quick"
    if minutes <= 30:
        return "medium"
    if minutes <= 60:
        return "long"
    return "very_long"


def nutrition_signals(nutrition: Nutrition | None) -> list[str]:
    """Nutrition labels implied by calories and protein.

    A missing field yields nothing for that field; a field without digits
    parses as 0.
    """
    if nutrition is None:
        return []

    labels = []
    if nutrition.calories is not None:
        calories = first_int(nutrition.calories)
        if calories < LOW_CALORIE_THRESHOLD:
            labels.append("low_calorie")
        elif calories > HIGH_CALORIE_THRESHOLD:
            labels.append("high_calorie")

    if nutrition.protein is not None:
        if first_int(nutrition.protein) > HIGH_PROTEIN_THRESHOLD:
            labels.append("high_protein")

    return labels


def ingredient_frequency(ingredient: str, candidates: list[Recipe]) -> int:
    """Count candidates having an ingredient whose name contains this one.

    Case-insensitive substring match, so "tomato" also counts "cherry tomatoes".
    """
    needle = ingredient.lower()
    return sum(
        1
        for candidate in candidates
        if any(needle in name.lower() for name in candidate.ingredient_names)
    )
