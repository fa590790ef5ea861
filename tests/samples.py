"""Sample recipes in the shapes the model and the clients send."""

TOMATO_EGG = {
    "name": "番茄炒蛋",
    "cookingTime": "15分钟",
    "difficulty": "简单",
    "ingredients": [
        {"name": "番茄", "amount": "2个"},
        {"name": "鸡蛋", "amount": "3个"},
    ],
    "steps": [{"step": 1, "instruction": "先炒鸡蛋，再炒番茄"}],
    "nutrition": {"calories": "250 kcal", "protein": "12 g"},
    "tags": ["家常菜", "快手菜"],
}

BRAISED_BEEF = {
    "name": "红烧牛肉",
    "cookingTime": "90分钟",
    "difficulty": "困难",
    "ingredients": ["牛肉", "土豆"],
    "steps": ["炖90分钟"],
    "nutrition": {"calories": "650 kcal", "protein": "35 g"},
    "tags": ["硬菜"],
}

PASTA = {
    "id": 7,
    "name": "Tomato Basil Pasta",
    "cooking_time": "25 minutes",
    "difficulty": "Easy",
    "ingredients": ["Cherry tomatoes", "Spaghetti", "Basil"],
    "steps": ["Boil the pasta", "Toss with tomatoes and basil"],
    "nutrients": {"calories": "480 kcal", "protein": "14 g"},
    "tags": ["italian", "vegetarian"],
}
