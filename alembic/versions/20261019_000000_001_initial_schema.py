"""Initial schema: learned signals, ratings, dietary preferences, community.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

signal_category = sa.Enum(
    "ingredient",
    "cuisine",
    "cooking_method",
    "difficulty",
    "cooking_time",
    "nutrition",
    name="signalcategory",
)
recipe_status = sa.Enum("DRAFT", "PUBLISHED", "ARCHIVED", name="recipestatus")
interaction_type = sa.Enum("like", "favorite", "try", name="interactiontype")


def upgrade() -> None:
    # Learned preference signals, one row per (user, category, value)
    op.create_table(
        "preference_signals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=50), nullable=False),
        sa.Column("category", signal_category, nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.Column("strength", sa.Integer(), nullable=False),
        sa.Column("usage_count", sa.Integer(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "category", "value", name="uq_preference_signal"),
    )
    op.create_index("ix_preference_signals_user_id", "preference_signals", ["user_id"])

    # Recipe ratings, keyed by recipe id when known, name otherwise
    op.create_table(
        "recipe_ratings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=50), nullable=False),
        sa.Column("recipe_key", sa.String(length=255), nullable=False),
        sa.Column("recipe_name", sa.String(length=255), nullable=False),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("tried", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("tried_date", sa.DateTime(), nullable=True),
        sa.Column("difficulty_rating", sa.Integer(), nullable=True),
        sa.Column("taste_rating", sa.Integer(), nullable=True),
        sa.Column("health_rating", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "recipe_key", name="uq_recipe_rating"),
    )
    op.create_index("ix_recipe_ratings_user_id", "recipe_ratings", ["user_id"])
    op.create_index("ix_recipe_ratings_recipe_name", "recipe_ratings", ["recipe_name"])

    # Explicit dietary settings
    op.create_table(
        "dietary_preferences",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=50), nullable=False),
        sa.Column("low_salt", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("low_oil", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("spicy", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("vegetarian", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("cuisine", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    # Shared community recipes
    op.create_table(
        "community_recipes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cooking_time", sa.String(length=100), nullable=True),
        sa.Column("difficulty", sa.String(length=50), nullable=True),
        sa.Column("servings", sa.String(length=100), nullable=True),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("steps", sa.JSON(), nullable=False),
        sa.Column("nutrition", sa.JSON(), nullable=True),
        sa.Column("tips", sa.JSON(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("author_rating", sa.Integer(), nullable=True),
        sa.Column("author_comment", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorites", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("try_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", recipe_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_community_recipes_author_id", "community_recipes", ["author_id"])

    # Likes, favorites and tries
    op.create_table(
        "user_interactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=50), nullable=False),
        sa.Column("recipe_id", sa.Integer(), nullable=False),
        sa.Column("interaction_type", interaction_type, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["recipe_id"], ["community_recipes.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "recipe_id", "interaction_type", name="uq_user_interaction"
        ),
    )


def downgrade() -> None:
    op.drop_table("user_interactions")
    op.drop_index("ix_community_recipes_author_id", table_name="community_recipes")
    op.drop_table("community_recipes")
    op.drop_table("dietary_preferences")
    op.drop_index("ix_recipe_ratings_recipe_name", table_name="recipe_ratings")
    op.drop_index("ix_recipe_ratings_user_id", table_name="recipe_ratings")
    op.drop_table("recipe_ratings")
    op.drop_index("ix_preference_signals_user_id", table_name="preference_signals")
    op.drop_table("preference_signals")

    interaction_type.drop(op.get_bind(), checkfirst=True)
    recipe_status.drop(op.get_bind(), checkfirst=True)
    signal_category.drop(op.get_bind(), checkfirst=True)
