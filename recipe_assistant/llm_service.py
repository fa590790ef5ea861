"""Claude API integration for recipe generation.

The model is used as an opaque "send prompt, receive text" capability; this
module only knows how to call it and how to pull a JSON recipe array out of
the reply.
"""

import json
import logging
import re

from anthropic import Anthropic

from .config import Settings
from .errors import RecipeGenerationError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def _extract_text_from_response(response) -> str:
    """Extract text content from Claude response."""
    for block in response.content:
        if hasattr(block, "text"):
            return block.text
    block_types = [type(b).__name__ for b in response.content]
    logger.warning(f"No text in response, block types: {block_types}")
    return ""


def parse_recipes(text: str) -> list[dict]:
    """Pull the recipe array out of a model reply.

    Tolerates code fences and prose around the array.

    Raises:
        RecipeGenerationError: If no JSON array of objects can be found.
    """
    fenced = _CODE_FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end <= start:
        raise RecipeGenerationError("No JSON array in model reply")

    try:
        recipes = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise RecipeGenerationError(f"Invalid JSON in model reply: {e}") from e

    if not isinstance(recipes, list) or not all(isinstance(r, dict) for r in recipes):
        raise RecipeGenerationError("Model reply is not a list of recipes")
    return recipes


class RecipeGenerator:
    """Sends recipe prompts to Claude and parses the replies."""

    def __init__(self, client, model: str, max_tokens: int = 4096, timeout: float = 60.0):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        """Send one prompt and return the reply text.

        Raises:
            RecipeGenerationError: If the Claude API call fails.
        """
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.exception(f"Claude API error: {e}")
            raise RecipeGenerationError(f"Recipe generation failed: {e}") from e

        logger.info(
            f"Claude reply: stop_reason={response.stop_reason}, "
            f"{response.usage.input_tokens} in, {response.usage.output_tokens} out"
        )
        return _extract_text_from_response(response)

    def generate(self, prompt: str) -> list[dict]:
        """Generate recipes for a prompt.

        Raises:
            RecipeGenerationError: If the reply holds no usable recipes.
        """
        recipes = parse_recipes(self.complete(prompt))
        logger.info(f"Generated {len(recipes)} recipes")
        return recipes


def create_generator(settings: Settings) -> RecipeGenerator | None:
    """Build a generator, or None when no API key is configured."""
    if not settings.llm_enabled:
        logger.warning("ANTHROPIC_API_KEY not set, recipe generation disabled")
        return None
    client = Anthropic(api_key=settings.anthropic_api_key)
    return RecipeGenerator(
        client,
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
    )
