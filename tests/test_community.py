import pytest

from recipe_assistant import community
from recipe_assistant.errors import NotFoundError, ValidationError
from recipe_assistant.models import RecipeStatus

from .samples import BRAISED_BEEF, PASTA, TOMATO_EGG


@pytest.fixture
def shared(db_session):
    """Three published recipes from two authors."""
    return [
        community.share_recipe(db_session, "alice", TOMATO_EGG, {"rating": 5, "comment": "家常"}),
        community.share_recipe(db_session, "alice", BRAISED_BEEF),
        community.share_recipe(db_session, "bob", PASTA),
    ]


def test_share_recipe_sets_defaults(db_session):
    recipe = community.share_recipe(db_session, "alice", PASTA, {"rating": 4})

    assert recipe.id is not None
    assert recipe.status == RecipeStatus.PUBLISHED
    assert recipe.likes == 0
    assert recipe.average_rating == 0.0
    # "nutrients" is accepted as an alias
    assert recipe.nutrition == {"calories": "480 kcal", "protein": "14 g"}
    assert recipe.author_rating == 4


@pytest.mark.parametrize(
    "recipe_data, author_rating",
    [({"name": "  "}, None), ({"name": "Soup"}, {"rating": 9})],
)
def test_share_recipe_validation(db_session, recipe_data, author_rating):
    with pytest.raises(ValidationError):
        community.share_recipe(db_session, "alice", recipe_data, author_rating)


def test_list_paginates_and_filters(db_session, shared):
    page = community.list_community_recipes(db_session, page=1, limit=2)
    assert len(page["recipes"]) == 2
    assert page["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    by_author = community.list_community_recipes(db_session, author_id="bob")
    assert [r["name"] for r in by_author["recipes"]] == ["Tomato Basil Pasta"]

    by_tag = community.list_community_recipes(db_session, tags=["硬菜", "italian"])
    assert {r["name"] for r in by_tag["recipes"]} == {"红烧牛肉", "Tomato Basil Pasta"}
    assert by_tag["pagination"]["total"] == 2

    by_difficulty = community.list_community_recipes(db_session, difficulty="简单")
    assert [r["name"] for r in by_difficulty["recipes"]] == ["番茄炒蛋"]


def test_list_sorts_by_requested_column(db_session, shared):
    shared[1].likes = 5
    db_session.flush()

    result = community.list_community_recipes(db_session, sort_by="likes", sort_order="DESC")
    assert result["recipes"][0]["name"] == "红烧牛肉"

    result = community.list_community_recipes(db_session, sort_by="name", sort_order="ASC")
    assert result["recipes"][0]["name"] == "Tomato Basil Pasta"


def test_unpublished_recipes_are_hidden(db_session, shared):
    shared[0].status = RecipeStatus.ARCHIVED
    db_session.flush()

    result = community.list_community_recipes(db_session)
    assert result["pagination"]["total"] == 2
    with pytest.raises(NotFoundError):
        community.get_recipe_detail(db_session, None, shared[0].id)


def test_search_matches_name(db_session, shared):
    result = community.search_recipes(db_session, "pasta")
    assert [r["name"] for r in result["recipes"]] == ["Tomato Basil Pasta"]
    assert community.search_recipes(db_session, "pizza")["recipes"] == []


def test_popular_and_latest(db_session, shared):
    shared[2].likes = 3
    db_session.flush()

    popular = community.get_popular_recipes(db_session, limit=2)
    assert popular[0]["name"] == "Tomato Basil Pasta"
    assert len(popular) == 2

    latest = community.get_latest_recipes(db_session)
    assert len(latest) == 3


def test_interactions_toggle_counters(db_session, shared):
    recipe_id = shared[0].id

    assert community.toggle_interaction(db_session, "u1", recipe_id, "like", True) == {
        "type": "like",
        "isActive": True,
        "count": 1,
    }
    community.toggle_interaction(db_session, "u2", recipe_id, "like", True)
    # Repeating an active like does not count twice
    community.toggle_interaction(db_session, "u2", recipe_id, "like", True)
    assert shared[0].likes == 2

    result = community.toggle_interaction(db_session, "u1", recipe_id, "like", False)
    assert result["count"] == 1
    assert shared[0].likes == 1

    community.toggle_interaction(db_session, "u1", recipe_id, "favorite", True)
    assert shared[0].favorites == 1


def test_interaction_errors(db_session, shared):
    with pytest.raises(ValidationError):
        community.toggle_interaction(db_session, "u1", shared[0].id, "share", True)
    with pytest.raises(NotFoundError):
        community.toggle_interaction(db_session, "u1", 9999, "like", True)


def test_rating_updates_average_and_detail(db_session, rating_service, shared):
    recipe = shared[2]

    community.rate_community_recipe(db_session, rating_service, "u1", recipe.id, {"rating": 5})
    community.rate_community_recipe(
        db_session, rating_service, "u2", recipe.id, {"rating": 4, "tried": True}
    )
    # Overwriting keeps one rating per user
    community.rate_community_recipe(db_session, rating_service, "u2", recipe.id, {"rating": 2})

    assert recipe.rating_count == 2
    assert recipe.average_rating == 3.5

    community.toggle_interaction(db_session, "u1", recipe.id, "favorite", True)
    detail = community.get_recipe_detail(db_session, rating_service, recipe.id, user_id="u1")

    assert detail["userInteractions"] == {"favorite": True}
    assert detail["ratingStats"] == {"totalRatings": 2, "averageRating": 3.5, "triedCount": 0}
    assert rating_service.get_user_rating("u1", recipe.name, str(recipe.id)).rating == 5


def test_ratings_for_same_named_recipes_stay_separate(db_session, rating_service):
    first = community.share_recipe(db_session, "alice", {"name": "Soup"})
    second = community.share_recipe(db_session, "bob", {"name": "Soup"})

    community.rate_community_recipe(db_session, rating_service, "u1", first.id, {"rating": 5})
    community.rate_community_recipe(db_session, rating_service, "u1", second.id, {"rating": 1})

    assert first.average_rating == 5.0
    assert second.average_rating == 1.0


def test_rating_validation_happens_before_any_write(db_session, rating_service, shared):
    with pytest.raises(ValidationError):
        community.rate_community_recipe(
            db_session, rating_service, "u1", shared[0].id, {"rating": 0}
        )
    assert shared[0].rating_count == 0
