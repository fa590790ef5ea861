import pytest

from recipe_assistant.config import Settings
from recipe_assistant.errors import RecipeGenerationError
from recipe_assistant.llm_service import RecipeGenerator, create_generator, parse_recipes

from .conftest import FakeClaude, UnreachableClaude


def test_parse_plain_array():
    assert parse_recipes('[{"name": "Soup"}]') == [{"name": "Soup"}]


def test_parse_fenced_reply_with_prose():
    reply = 'Here you go:\n```json\n[{"name": "Soup"}, {"name": "Salad"}]\n```\nEnjoy!'
    assert [r["name"] for r in parse_recipes(reply)] == ["Soup", "Salad"]


@pytest.mark.parametrize(
    "reply",
    [
        "Sorry, I cannot help with that.",
        '[{"name": "Soup",]',
        '["Soup", "Salad"]',
    ],
)
def test_parse_rejects_unusable_replies(reply):
    with pytest.raises(RecipeGenerationError):
        parse_recipes(reply)


def test_generator_sends_prompt_and_parses_reply():
    client = FakeClaude('[{"name": "Soup"}]')
    generator = RecipeGenerator(client, model="test-model", max_tokens=100, timeout=5)

    assert generator.generate("make soup") == [{"name": "Soup"}]

    call = client.messages.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 100
    assert call["messages"] == [{"role": "user", "content": "make soup"}]


def test_create_generator_needs_api_key():
    assert create_generator(Settings(database_url="sqlite://", anthropic_api_key="")) is None

    generator = create_generator(Settings(database_url="sqlite://", anthropic_api_key="sk-test"))
    assert isinstance(generator, RecipeGenerator)
    assert generator.model == Settings(database_url="sqlite://").llm_model


def test_client_errors_become_generation_errors():
    generator = RecipeGenerator(UnreachableClaude(), model="test-model")

    with pytest.raises(RecipeGenerationError) as excinfo:
        generator.generate("make soup")

    assert isinstance(excinfo.value.__cause__, ConnectionError)
