"""Recipe models: stored recipe definitions and their API schemas."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import JSON, Column, Field, SQLModel

from .base import utcnow


class RecipeBase(SQLModel):
    """Shared fields for recipes.

    Args:
        name: Recipe name; together with ``version`` a natural key.
        version: Free-form version label.
        definition: Raw definition ``{"recipe": [step, ...]}``.
    """

    name: str = Field(min_length=1, max_length=200)
    version: str = Field(min_length=1, max_length=100)
    definition: dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))


class Recipe(RecipeBase, table=True):
    """Stored, immutable recipe."""

    __tablename__ = "recipe"
    __table_args__ = (UniqueConstraint("name", "version", name="uq_recipe_name_version"),)

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )


class RecipeCreate(RecipeBase):
    """Request body for creating a recipe.

    ``definition`` is accepted as any JSON value; its shape is checked by the
    recipe validator so that errors name the offending step.
    """

    definition: Any


class RecipeRead(RecipeBase):
    """API response schema for recipes."""

    id: int
    created_at: datetime


class RecipeValidateRequest(SQLModel):
    """Request body for validating a recipe definition without storing it."""

    definition: Any = None


class RecipeValidateResult(SQLModel):
    """Verdict of a standalone validation."""

    valid: bool
    error: str | None = None
