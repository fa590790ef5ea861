"""Normalized recipe representation.

Recipes arrive as loosely shaped dicts (LLM output, request bodies, stored
snapshots). normalize_recipe is the single adapter that turns them into a
Recipe; the learner, scorer and rating service only work with Recipe.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Ingredient:
    """One ingredient line, whether it arrived as a string or an object."""

    name: str
    amount: str | None = None
    notes: str | None = None

    def to_dict(self) -> dict:
        data = {"name": self.name}
        if self.amount is not None:
            data["amount"] = self.amount
        if self.notes is not None:
            data["notes"] = self.notes
        return data


@dataclass
class Nutrition:
    """Nutrition facts as free text, e.g. calories="250 kcal"."""

    calories: str | None = None
    protein: str | None = None
    fat: str | None = None
    carbs: str | None = None
    fiber: str | None = None


@dataclass
class Recipe:
    """A recipe as seen by the learning and scoring code."""

    name: str
    ingredients: list[Ingredient] = field(default_factory=list)
    steps: list[Any] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    difficulty: str | None = None
    cooking_time: str | None = None
    nutrition: Nutrition | None = None
    recipe_id: str | None = None
    raw: dict = field(default_factory=dict)

    @property
    def ingredient_names(self) -> list[str]:
        return [ing.name for ing in self.ingredients]


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_list(value: Any) -> list:
    """Items of a list or tuple field; anything else, a bare string included, is empty."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def normalize_ingredient(item: Any) -> Ingredient | None:
    """Turn a string or {"name", "amount", "notes"} mapping into an Ingredient."""
    if isinstance(item, str):
        name = item.strip()
        return Ingredient(name=name) if name else None
    if isinstance(item, dict):
        name = _text(item.get("name"))
        if not name:
            return None
        return Ingredient(
            name=name,
            amount=_text(item.get("amount")),
            notes=_text(item.get("notes")),
        )
    return None


def normalize_nutrition(data: Any) -> Nutrition | None:
    """Read a nutrition mapping; anything that is not a mapping is ignored."""
    if not isinstance(data, dict):
        return None
    return Nutrition(
        calories=_text(data.get("calories")),
        protein=_text(data.get("protein")),
        fat=_text(data.get("fat")),
        carbs=_text(data.get("carbs")),
        fiber=_text(data.get("fiber")),
    )


def normalize_recipe(record: dict) -> Recipe:
    """Normalize a raw recipe dict.

    Accepts either "nutrition" or "nutrients" for the nutrition block
    ("nutrition" wins when both are present) and either camelCase
    "cookingTime" or snake_case "cooking_time".
    """
    ingredients = []
    for item in as_list(record.get("ingredients")):
        ingredient = normalize_ingredient(item)
        if ingredient:
            ingredients.append(ingredient)

    tags = [str(tag) for tag in as_list(record.get("tags")) if tag is not None and str(tag)]

    nutrition_data = record.get("nutrition") or record.get("nutrients")
    cooking_time = record.get("cookingTime", record.get("cooking_time"))
    recipe_id = record.get("id")

    return Recipe(
        name=_text(record.get("name")) or "",
        ingredients=ingredients,
        steps=as_list(record.get("steps")),
        tags=tags,
        difficulty=_text(record.get("difficulty")),
        cooking_time=_text(cooking_time),
        nutrition=normalize_nutrition(nutrition_data),
        recipe_id=str(recipe_id) if recipe_id is not None else None,
        raw=record,
    )


def recipe_key(name: str, recipe_id: str | None = None) -> str:
    """Key a rating is stored under.

    Recipes with a stable id get "#<id>"; everything else falls back to the
    name, so distinct recipes that share a name also share ratings.
    """
    if recipe_id:
        return f"#{recipe_id}"
    return name
