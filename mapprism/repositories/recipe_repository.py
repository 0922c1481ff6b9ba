"""Repository for recipe database operations."""

from sqlalchemy.exc import IntegrityError

from mapprism.exceptions.domain import RecipeAlreadyExistsError, RecipeNotFoundError
from mapprism.models.recipe import Recipe
from mapprism.repositories.base import BaseRepository


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for Recipe model operations. Recipes are never updated."""

    model = Recipe
    not_found = RecipeNotFoundError

    async def get_by_name_version(self, name: str, version: str) -> Recipe | None:
        """Find a recipe by its natural key."""
        return await self.get_by(name=name, version=version)

    async def create(self, entity: Recipe) -> Recipe:
        """Insert a recipe.

        Raises:
            RecipeAlreadyExistsError: If ``(name, version)`` is already taken,
                including when a concurrent request inserted it first.
        """
        try:
            return await super().create(entity)
        except IntegrityError as e:
            await self.session.rollback()
            raise RecipeAlreadyExistsError(entity.name, entity.version) from e
