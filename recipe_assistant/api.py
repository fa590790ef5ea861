"""HTTP routes. Each handler is a thin wrapper over a service call."""

import logging
from typing import Generator

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from . import community
from .chat import RecipeChatService, get_options
from .database import session_scope
from .learner import PreferenceLearner
from .ratings import RatingService, rating_to_dict
from .schemas import (
    AddRatingRequest,
    AdjustRecommendationsRequest,
    ChatRequest,
    CommunityRatingRequest,
    DietaryPreferenceUpdate,
    InteractionRequest,
    InteractiveChatRequest,
    SelectionRequest,
    ShareRecipeRequest,
)
from .stores import DietaryPreferenceStore, DietaryRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Dependencies
# =============================================================================


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency for endpoints that need a database session."""
    with session_scope(request.app.state.session_factory) as db:
        yield db


def get_learner(request: Request) -> PreferenceLearner:
    return request.app.state.learner


def get_rating_service(request: Request) -> RatingService:
    return request.app.state.rating_service


def get_chat_service(request: Request) -> RecipeChatService:
    return request.app.state.chat_service


def get_dietary_store(request: Request) -> DietaryPreferenceStore:
    return request.app.state.stores.dietary


def _tag_list(tags: str | None) -> list[str]:
    return [tag for tag in (tags or "").split(",") if tag]


def _dietary_to_dict(record: DietaryRecord) -> dict:
    return {
        "userId": record.user_id,
        "lowSalt": record.low_salt,
        "lowOil": record.low_oil,
        "spicy": record.spicy,
        "vegetarian": record.vegetarian,
        "cuisine": record.cuisine,
    }


# =============================================================================
# Recipe generation
# =============================================================================

chat_router = APIRouter(tags=["chat"])


@chat_router.post("/chat")
def generate_recipes(body: ChatRequest, chat_service: RecipeChatService = Depends(get_chat_service)):
    """Generate recipes from ingredients, re-ranked by the user's ratings."""
    if not chat_service.available:
        raise HTTPException(status_code=503, detail="Recipe generation is not configured")

    recipes = chat_service.generate_for_user(
        body.user_id, body.message, body.language, scene=body.scene, budget=body.budget
    )
    return {"recipes": recipes}


@chat_router.post("/interactive/chat")
def interactive_chat(
    body: InteractiveChatRequest, chat_service: RecipeChatService = Depends(get_chat_service)
):
    return chat_service.handle_message(
        body.user_id,
        body.message,
        body.language,
        body.conversation_state.state,
        body.conversation_state.data,
    )


@chat_router.get("/interactive/options/{option_type}/{language}")
def interactive_options(option_type: str, language: str):
    options = get_options(option_type, language)
    if options is None:
        raise HTTPException(status_code=400, detail=f"Unknown option type: {option_type}")
    return {"success": True, "options": options}


# =============================================================================
# Preferences (explicit settings and learned signals)
# =============================================================================

preference_router = APIRouter(prefix="/preference", tags=["preference"])


@preference_router.post("/select")
def select_recipe(body: SelectionRequest, learner: PreferenceLearner = Depends(get_learner)):
    """Learn from the recipe a user picked out of a candidate set."""
    applied = learner.learn_from_selection(body.user_id, body.selected_recipe, body.all_recipes)
    return {
        "success": True,
        "message": "Preferences updated",
        "signals": [{"category": c, "value": v} for c, v in applied],
    }


@preference_router.get("/user/{user_id}")
def learned_preferences(user_id: str, learner: PreferenceLearner = Depends(get_learner)):
    return {"success": True, "preferences": learner.get_user_preferences(user_id)}


@preference_router.get("/stats/{user_id}")
def preference_stats(user_id: str, learner: PreferenceLearner = Depends(get_learner)):
    return {"success": True, "stats": learner.get_preference_stats(user_id)}


@preference_router.get("/{user_id}")
def get_dietary_preference(
    user_id: str, store: DietaryPreferenceStore = Depends(get_dietary_store)
):
    record = store.get_preference(user_id)
    return _dietary_to_dict(record) if record else {}


@preference_router.post("/{user_id}")
def update_dietary_preference(
    user_id: str,
    body: DietaryPreferenceUpdate,
    store: DietaryPreferenceStore = Depends(get_dietary_store),
):
    record = store.set_preference(user_id, body.model_dump(exclude_none=True))
    logger.info(f"Updated dietary preferences for {user_id}")
    return {"message": "Preferences updated", "preference": _dietary_to_dict(record)}


# =============================================================================
# Ratings
# =============================================================================

rating_router = APIRouter(prefix="/rating", tags=["rating"])


@rating_router.post("/add")
def add_rating(body: AddRatingRequest, rating_service: RatingService = Depends(get_rating_service)):
    record, created = rating_service.add_rating(
        body.user_id, body.recipe_data, body.rating_data.model_dump()
    )
    return {
        "success": True,
        "rating": rating_to_dict(record),
        "message": "Rating added" if created else "Rating updated",
    }


@rating_router.get("/user/{user_id}/recipe/{recipe_name}")
def get_user_rating(
    user_id: str, recipe_name: str, rating_service: RatingService = Depends(get_rating_service)
):
    record = rating_service.get_user_rating(user_id, recipe_name)
    return {"success": True, "rating": rating_to_dict(record) if record else None}


@rating_router.get("/recipe/{recipe_name}/average")
def recipe_average_rating(
    recipe_name: str, rating_service: RatingService = Depends(get_rating_service)
):
    return {"success": True, "averageRating": rating_service.get_recipe_average_rating(recipe_name)}


@rating_router.get("/user/{user_id}/history")
def rating_history(
    user_id: str,
    request: Request,
    limit: int | None = Query(None, ge=1),
    rating_service: RatingService = Depends(get_rating_service),
):
    limit = limit or request.app.state.settings.rating_history_limit
    history = rating_service.get_user_rating_history(user_id, limit)
    return {"success": True, "history": [rating_to_dict(r) for r in history]}


@rating_router.get("/user/{user_id}/stats")
def rating_stats(user_id: str, rating_service: RatingService = Depends(get_rating_service)):
    return {"success": True, "stats": rating_service.get_user_rating_stats(user_id)}


@rating_router.post("/adjust-recommendations")
def adjust_recommendations(
    body: AdjustRecommendationsRequest,
    rating_service: RatingService = Depends(get_rating_service),
):
    recipes = rating_service.adjust_recommendations_by_rating(body.user_id, body.recipes)
    return {"success": True, "recipes": recipes}


# =============================================================================
# Community
# =============================================================================

community_router = APIRouter(prefix="/community", tags=["community"])


@community_router.post("/share")
def share_recipe(body: ShareRecipeRequest, db: Session = Depends(get_db)):
    author_rating = body.author_rating.model_dump() if body.author_rating else None
    recipe = community.share_recipe(db, body.author_id, body.recipe_data, author_rating)
    return {
        "success": True,
        "recipe": community.community_recipe_to_dict(recipe),
        "message": "Recipe shared",
    }


@community_router.get("/recipes")
def list_recipes(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("DESC", alias="sortOrder"),
    search: str = "",
    tags: str | None = None,
    difficulty: str | None = None,
    author_id: str | None = Query(None, alias="authorId"),
    db: Session = Depends(get_db),
):
    result = community.list_community_recipes(
        db,
        page=page,
        limit=limit or request.app.state.settings.community_page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        tags=_tag_list(tags),
        difficulty=difficulty,
        author_id=author_id,
    )
    return {"success": True, **result}


@community_router.get("/recipes/{recipe_id}")
def recipe_detail(
    recipe_id: int,
    user_id: str | None = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    rating_service: RatingService = Depends(get_rating_service),
):
    recipe = community.get_recipe_detail(db, rating_service, recipe_id, user_id)
    return {"success": True, "recipe": recipe}


@community_router.post("/recipes/{recipe_id}/interact")
def interact(recipe_id: int, body: InteractionRequest, db: Session = Depends(get_db)):
    interaction = community.toggle_interaction(
        db, body.user_id, recipe_id, body.interaction_type, body.is_active
    )
    return {"success": True, "interaction": interaction}


@community_router.post("/recipes/{recipe_id}/rate")
def rate_recipe(
    recipe_id: int,
    body: CommunityRatingRequest,
    db: Session = Depends(get_db),
    rating_service: RatingService = Depends(get_rating_service),
):
    record = community.rate_community_recipe(
        db, rating_service, body.user_id, recipe_id, body.rating_data.model_dump()
    )
    return {"success": True, "rating": rating_to_dict(record), "message": "Rating saved"}


@community_router.get("/popular")
def popular_recipes(limit: int = Query(10, ge=1), db: Session = Depends(get_db)):
    return {"success": True, "recipes": community.get_popular_recipes(db, limit)}


@community_router.get("/latest")
def latest_recipes(limit: int = Query(10, ge=1), db: Session = Depends(get_db)):
    return {"success": True, "recipes": community.get_latest_recipes(db, limit)}


@community_router.get("/search")
def search(
    request: Request,
    q: str = "",
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    tags: str | None = None,
    difficulty: str | None = None,
    db: Session = Depends(get_db),
):
    if not q:
        raise HTTPException(status_code=400, detail="Missing search query")
    result = community.search_recipes(
        db,
        q,
        page=page,
        limit=limit or request.app.state.settings.community_page_size,
        tags=_tag_list(tags),
        difficulty=difficulty,
    )
    return {"success": True, **result}


@community_router.get("/user/{user_id}/recipes")
def user_recipes(
    user_id: str,
    request: Request,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    result = community.list_community_recipes(
        db,
        page=page,
        limit=limit or request.app.state.settings.community_page_size,
        author_id=user_id,
    )
    return {"success": True, **result}


ROUTERS = [chat_router, preference_router, rating_router, community_router]
