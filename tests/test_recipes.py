from recipe_assistant.recipes import normalize_ingredient, normalize_recipe, recipe_key

from .samples import PASTA, TOMATO_EGG


def test_normalize_recipe_with_object_ingredients():
    recipe = normalize_recipe(TOMATO_EGG)

    assert recipe.name == "番茄炒蛋"
    assert recipe.ingredient_names == ["番茄", "鸡蛋"]
    assert recipe.ingredients[0].amount == "2个"
    assert recipe.cooking_time == "15分钟"
    assert recipe.nutrition.calories == "250 kcal"
    assert recipe.recipe_id is None
    assert recipe.raw is TOMATO_EGG


def test_normalize_recipe_with_string_ingredients_and_aliases():
    recipe = normalize_recipe(PASTA)

    assert recipe.ingredient_names == ["Cherry tomatoes", "Spaghetti", "Basil"]
    assert recipe.cooking_time == "25 minutes"
    assert recipe.nutrition.calories == "480 kcal"
    assert recipe.recipe_id == "7"


def test_nutrition_wins_over_nutrients():
    recipe = normalize_recipe(
        {"name": "x", "nutrition": {"calories": "100"}, "nutrients": {"calories": "900"}}
    )
    assert recipe.nutrition.calories == "100"


def test_blank_and_malformed_ingredients_are_dropped():
    recipe = normalize_recipe({"name": "x", "ingredients": ["", "  ", {"amount": "1"}, 42, "salt"]})
    assert recipe.ingredient_names == ["salt"]


def test_missing_fields_default_to_empty():
    recipe = normalize_recipe({})

    assert recipe.name == ""
    assert recipe.ingredients == []
    assert recipe.tags == []
    assert recipe.difficulty is None
    assert recipe.nutrition is None


def test_normalize_ingredient_strips_text():
    ingredient = normalize_ingredient({"name": " egg ", "amount": 2, "notes": ""})

    assert ingredient.name == "egg"
    assert ingredient.amount == "2"
    assert ingredient.notes is None
    assert ingredient.to_dict() == {"name": "egg", "amount": "2"}


def test_recipe_key_prefers_id():
    assert recipe_key("Soup", "12") == "#12"
    assert recipe_key("Soup") == "Soup"


def test_non_list_sequence_fields_are_treated_as_empty():
    recipe = normalize_recipe(
        {"name": "Soup", "ingredients": "tomato, egg", "tags": "soup", "steps": "boil it"}
    )

    assert recipe.ingredients == []
    assert recipe.tags == []
    assert recipe.steps == []
