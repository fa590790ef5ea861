"""Request bodies for the HTTP API.

Field names are camelCase on the wire and snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(CamelModel):
    user_id: str
    message: str
    language: str | None = None
    scene: str | None = None
    budget: str | None = None


class ConversationState(CamelModel):
    state: str = "initial"
    data: dict = Field(default_factory=dict)


class InteractiveChatRequest(CamelModel):
    user_id: str
    message: str
    language: str | None = None
    conversation_state: ConversationState = Field(default_factory=ConversationState)


class DietaryPreferenceUpdate(CamelModel):
    low_salt: bool | None = None
    low_oil: bool | None = None
    spicy: bool | None = None
    vegetarian: bool | None = None
    cuisine: str | None = None


class SelectionRequest(CamelModel):
    user_id: str
    selected_recipe: dict
    all_recipes: list[dict] = Field(default_factory=list)


class RatingData(CamelModel):
    rating: int | None = None
    comment: str | None = None
    tried: bool = False
    difficulty_rating: int | None = None
    taste_rating: int | None = None
    health_rating: int | None = None


class AddRatingRequest(CamelModel):
    user_id: str
    recipe_data: dict
    rating_data: RatingData


class AdjustRecommendationsRequest(CamelModel):
    user_id: str
    recipes: list[dict]


class AuthorRating(CamelModel):
    rating: int | None = None
    comment: str | None = None


class ShareRecipeRequest(CamelModel):
    author_id: str
    recipe_data: dict
    author_rating: AuthorRating | None = None


class InteractionRequest(CamelModel):
    user_id: str
    interaction_type: str
    is_active: bool = True


class CommunityRatingRequest(CamelModel):
    user_id: str
    rating_data: RatingData
