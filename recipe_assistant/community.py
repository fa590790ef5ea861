"""Community recipe sharing: publish, browse, interact and rate.

All functions take the request's database session; the caller commits.
"""

import logging
import math

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from .errors import NotFoundError, ValidationError
from .models import (
    CommunityRecipe,
    InteractionType,
    RecipeStatus,
    UserInteraction,
)
from .ratings import RatingService
from .recipes import as_list, recipe_key

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "createdAt": CommunityRecipe.created_at,
    "likes": CommunityRecipe.likes,
    "favorites": CommunityRecipe.favorites,
    "averageRating": CommunityRecipe.average_rating,
    "ratingCount": CommunityRecipe.rating_count,
    "name": CommunityRecipe.name,
}

COUNTER_COLUMNS = {
    InteractionType.LIKE: "likes",
    InteractionType.FAVORITE: "favorites",
    InteractionType.TRY: "try_count",
}


def community_recipe_to_dict(recipe: CommunityRecipe) -> dict:
    """Serialize a shared recipe in the same shape generated recipes use."""
    return {
        "id": recipe.id,
        "authorId": recipe.author_id,
        "name": recipe.name,
        "description": recipe.description,
        "cookingTime": recipe.cooking_time,
        "difficulty": recipe.difficulty,
        "servings": recipe.servings,
        "ingredients": recipe.ingredients or [],
        "steps": recipe.steps or [],
        "nutrition": recipe.nutrition or {},
        "tips": recipe.tips or [],
        "tags": recipe.tags or [],
        "imageUrl": recipe.image_url,
        "authorRating": recipe.author_rating,
        "authorComment": recipe.author_comment,
        "likes": recipe.likes,
        "favorites": recipe.favorites,
        "tryCount": recipe.try_count,
        "averageRating": recipe.average_rating,
        "ratingCount": recipe.rating_count,
        "status": recipe.status.value,
        "createdAt": recipe.created_at.isoformat() if recipe.created_at else None,
    }


def _published():
    return (
        CommunityRecipe.is_public.is_(True),
        CommunityRecipe.status == RecipeStatus.PUBLISHED,
    )


def _get_published(db_session: Session, recipe_id: int) -> CommunityRecipe:
    recipe = db_session.execute(
        select(CommunityRecipe).where(CommunityRecipe.id == recipe_id, *_published())
    ).scalar_one_or_none()
    if recipe is None:
        raise NotFoundError(f"Community recipe {recipe_id} not found")
    return recipe


def _has_any_tag(recipe: CommunityRecipe, tags: list[str]) -> bool:
    return bool(set(recipe.tags or []) & set(tags))


def _paginate(db_session: Session, query, page: int, limit: int, tags: list[str] | None) -> dict:
    """Run a recipe query with pagination.

    Tags live in a JSON column, so the tag overlap filter runs in Python
    and pagination follows it.
    """
    page = max(page, 1)
    limit = max(limit, 1)
    offset = (page - 1) * limit

    if tags:
        matching = [r for r in db_session.execute(query).scalars() if _has_any_tag(r, tags)]
        total = len(matching)
        rows = matching[offset : offset + limit]
    else:
        total = db_session.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        ).scalar_one()
        rows = list(db_session.execute(query.offset(offset).limit(limit)).scalars())

    return {
        "recipes": [community_recipe_to_dict(r) for r in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
    }


def share_recipe(
    db_session: Session, author_id: str, recipe_data: dict, author_rating: dict | None = None
) -> CommunityRecipe:
    """Publish a recipe to the community.

    Raises:
        ValidationError: If the recipe has no name or the author rating is out of range.
    """
    name = (recipe_data.get("name") or "").strip()
    if not name:
        raise ValidationError("recipe name is required")

    author_rating = author_rating or {}
    stars = author_rating.get("rating")
    if stars is not None and not (isinstance(stars, int) and 1 <= stars <= 5):
        raise ValidationError("rating must be between 1 and 5")

    recipe = CommunityRecipe(
        author_id=author_id,
        name=name,
        description=recipe_data.get("description"),
        cooking_time=recipe_data.get("cookingTime"),
        difficulty=recipe_data.get("difficulty"),
        servings=recipe_data.get("servings"),
        ingredients=as_list(recipe_data.get("ingredients")),
        steps=as_list(recipe_data.get("steps")),
        nutrition=recipe_data.get("nutrition") or recipe_data.get("nutrients") or {},
        tips=as_list(recipe_data.get("tips")),
        tags=as_list(recipe_data.get("tags")),
        image_url=recipe_data.get("imageUrl"),
        author_rating=stars,
        author_comment=author_rating.get("comment"),
        is_public=True,
        status=RecipeStatus.PUBLISHED,
        likes=0,
        favorites=0,
        try_count=0,
        average_rating=0.0,
        rating_count=0,
    )
    db_session.add(recipe)
    db_session.flush()
    logger.info(f"User {author_id} shared recipe '{name}' as #{recipe.id}")
    return recipe


def list_community_recipes(
    db_session: Session,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "createdAt",
    sort_order: str = "DESC",
    search: str = "",
    tags: list[str] | None = None,
    difficulty: str | None = None,
    author_id: str | None = None,
) -> dict:
    column = SORTABLE_COLUMNS.get(sort_by, CommunityRecipe.created_at)
    ordering = column.asc() if sort_order.upper() == "ASC" else column.desc()

    query = select(CommunityRecipe).where(*_published())
    if search:
        query = query.where(CommunityRecipe.name.ilike(f"%{search}%"))
    if author_id:
        query = query.where(CommunityRecipe.author_id == author_id)
    if difficulty:
        query = query.where(CommunityRecipe.difficulty == difficulty)
    query = query.order_by(ordering, CommunityRecipe.id.desc())

    return _paginate(db_session, query, page, limit, tags)


def search_recipes(
    db_session: Session,
    text: str,
    page: int = 1,
    limit: int = 10,
    tags: list[str] | None = None,
    difficulty: str | None = None,
) -> dict:
    """Match text against recipe names and descriptions."""
    pattern = f"%{text}%"
    query = select(CommunityRecipe).where(
        *_published(),
        or_(CommunityRecipe.name.ilike(pattern), CommunityRecipe.description.ilike(pattern)),
    )
    if difficulty:
        query = query.where(CommunityRecipe.difficulty == difficulty)
    query = query.order_by(CommunityRecipe.created_at.desc(), CommunityRecipe.id.desc())

    return _paginate(db_session, query, page, limit, tags)


def get_popular_recipes(db_session: Session, limit: int = 10) -> list[dict]:
    rows = db_session.execute(
        select(CommunityRecipe)
        .where(*_published())
        .order_by(
            CommunityRecipe.likes.desc(),
            CommunityRecipe.average_rating.desc(),
            CommunityRecipe.created_at.desc(),
        )
        .limit(limit)
    ).scalars()
    return [community_recipe_to_dict(r) for r in rows]


def get_latest_recipes(db_session: Session, limit: int = 10) -> list[dict]:
    rows = db_session.execute(
        select(CommunityRecipe)
        .where(*_published())
        .order_by(CommunityRecipe.created_at.desc(), CommunityRecipe.id.desc())
        .limit(limit)
    ).scalars()
    return [community_recipe_to_dict(r) for r in rows]


def get_recipe_detail(
    db_session: Session,
    rating_service: RatingService,
    recipe_id: int,
    user_id: str | None = None,
) -> dict:
    """A recipe with its rating stats and, given a viewer, their active interactions.

    Raises:
        NotFoundError: If the recipe does not exist or is not published.
    """
    recipe = _get_published(db_session, recipe_id)

    user_interactions = {}
    if user_id:
        interactions = db_session.execute(
            select(UserInteraction).where(
                UserInteraction.user_id == user_id,
                UserInteraction.recipe_id == recipe_id,
                UserInteraction.is_active.is_(True),
            )
        ).scalars()
        user_interactions = {i.interaction_type.value: True for i in interactions}

    ratings = rating_service.rating_store.list_ratings_for_recipe(
        recipe_key=recipe_key(recipe.name, str(recipe.id))
    )
    summary = rating_service.summarize(ratings)

    data = community_recipe_to_dict(recipe)
    data["userInteractions"] = user_interactions
    data["ratingStats"] = {
        "totalRatings": summary["totalRatings"],
        "averageRating": summary["averageRating"],
        "triedCount": summary["triedCount"],
    }
    return data


def toggle_interaction(
    db_session: Session, user_id: str, recipe_id: int, interaction_type: str, is_active: bool
) -> dict:
    """Set a like/favorite/try on or off and refresh the recipe's counter.

    Raises:
        ValidationError: If the interaction type is unknown.
        NotFoundError: If the recipe does not exist.
    """
    try:
        kind = InteractionType(interaction_type)
    except ValueError:
        raise ValidationError(f"Invalid interaction type: {interaction_type}")

    recipe = _get_published(db_session, recipe_id)

    interaction = db_session.execute(
        select(UserInteraction).where(
            UserInteraction.user_id == user_id,
            UserInteraction.recipe_id == recipe_id,
            UserInteraction.interaction_type == kind,
        )
    ).scalar_one_or_none()
    if interaction is None:
        interaction = UserInteraction(
            user_id=user_id, recipe_id=recipe_id, interaction_type=kind, is_active=is_active
        )
        db_session.add(interaction)
    else:
        interaction.is_active = is_active
    db_session.flush()

    active_count = db_session.execute(
        select(func.count(UserInteraction.id)).where(
            UserInteraction.recipe_id == recipe_id,
            UserInteraction.interaction_type == kind,
            UserInteraction.is_active.is_(True),
        )
    ).scalar_one()
    setattr(recipe, COUNTER_COLUMNS[kind], active_count)
    db_session.flush()

    logger.info(
        f"User {user_id} {'set' if is_active else 'cleared'} {kind.value} on recipe #{recipe_id}"
    )
    return {"type": kind.value, "isActive": is_active, "count": active_count}


def rate_community_recipe(
    db_session: Session,
    rating_service: RatingService,
    user_id: str,
    recipe_id: int,
    rating_data: dict,
):
    """Rate a community recipe and refresh its average.

    The rating is keyed on the recipe id, not its name.

    Raises:
        NotFoundError: If the recipe does not exist.
        ValidationError: If the rating is out of range.
    """
    recipe = _get_published(db_session, recipe_id)

    record, _ = rating_service.add_rating(
        user_id,
        {
            "id": recipe.id,
            "name": recipe.name,
            "ingredients": recipe.ingredients or [],
            "tags": recipe.tags or [],
        },
        rating_data,
    )

    ratings = rating_service.rating_store.list_ratings_for_recipe(
        recipe_key=recipe_key(recipe.name, str(recipe.id))
    )
    if ratings:
        recipe.average_rating = round(sum(r.rating for r in ratings) / len(ratings), 2)
        recipe.rating_count = len(ratings)
        db_session.flush()

    return record
