"""Exceptions raised by the service layer."""


class ValidationError(Exception):
    """Raised when input is rejected before any store mutation."""

    pass


class NotFoundError(Exception):
    """Raised when a requested record does not exist."""

    pass


class RecipeGenerationError(Exception):
    """Raised when the LLM reply cannot be turned into recipes."""

    pass
