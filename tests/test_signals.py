import pytest

from recipe_assistant.recipes import Nutrition, normalize_recipe
from recipe_assistant.signals import (
    categorize_cooking_time,
    extract_cooking_methods,
    first_int,
    ingredient_frequency,
    nutrition_signals,
)

from .samples import BRAISED_BEEF, PASTA, TOMATO_EGG


@pytest.mark.parametrize(
    "cooking_time, bucket",
    [
        ("12分钟", "quick"),
        ("15 minutes", "quick"),
        ("30分钟", "medium"),
        ("45 minutes", "long"),
        ("90分钟", "very_long"),
        ("about half an hour", "quick"),
        (None, "quick"),
    ],
)
def test_categorize_cooking_time(cooking_time, bucket):
    assert categorize_cooking_time(cooking_time) == bucket


def test_first_int():
    assert first_int("约 350 kcal，含 12 g") == 350
    assert first_int("none") == 0
    assert first_int(None) == 0


def test_nutrition_signals():
    assert nutrition_signals(Nutrition(calories="250 kcal")) == ["low_calorie"]
    assert nutrition_signals(Nutrition(calories="600 kcal")) == ["high_calorie"]
    assert nutrition_signals(Nutrition(calories="400 kcal")) == []
    assert nutrition_signals(Nutrition(calories="400", protein="25 g")) == ["high_protein"]
    assert nutrition_signals(Nutrition(protein="20 g")) == []


def test_nutrition_signals_missing_or_unparseable():
    assert nutrition_signals(None) == []
    assert nutrition_signals(Nutrition()) == []
    # No digits parses as zero calories
    assert nutrition_signals(Nutrition(calories="unknown")) == ["low_calorie"]


def test_extract_cooking_methods_chinese():
    assert extract_cooking_methods(normalize_recipe(TOMATO_EGG)) == ["stir_fry"]
    assert extract_cooking_methods(normalize_recipe(BRAISED_BEEF)) == ["stew"]


def test_extract_cooking_methods_english_reports_each_method_once():
    recipe = normalize_recipe(
        {"name": "Sheet pan chicken", "steps": ["Bake 20 min", "Grill to finish", "Roast the veg"]}
    )
    assert extract_cooking_methods(recipe) == ["roast"]


def test_extract_cooking_methods_is_case_insensitive():
    recipe = normalize_recipe(PASTA | {"steps": ["BOIL the pasta"]})
    assert extract_cooking_methods(recipe) == ["boil"]


def test_ingredient_frequency_uses_substring_match():
    candidates = [normalize_recipe(r) for r in (TOMATO_EGG, BRAISED_BEEF, PASTA)]

    assert ingredient_frequency("tomato", candidates) == 1
    assert ingredient_frequency("番茄", candidates) == 1
    assert ingredient_frequency("牛", candidates) == 1
    assert ingredient_frequency("garlic", candidates) == 0
