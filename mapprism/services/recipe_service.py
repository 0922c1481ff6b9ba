"""Service layer for recipe business logic."""

from typing import Any

from mapprism.exceptions.domain import RecipeAlreadyExistsError, ValidationError
from mapprism.models.recipe import Recipe, RecipeValidateResult
from mapprism.repositories.recipe_repository import RecipeRepository
from mapprism.services.recipe import RecipeValidator, ValidatedRecipe
from mapprism.utils.logger import logger


class RecipeService:
    """Service for recipe validation, creation and lookup."""

    def __init__(self, recipe_repo: RecipeRepository, validator: RecipeValidator):
        """Initialize recipe service.

        Args:
            recipe_repo: Recipe repository instance
            validator: Validator bound to the capability registry
        """
        self.recipe_repo = recipe_repo
        self.validator = validator

    async def validate(self, definition: Any) -> ValidatedRecipe:
        """Validate a definition standalone.

        No external inputs are allowed up front: initial inputs are bound
        when a job is created.

        Raises:
            ValidationError: On the first violation.
        """
        return await self.validator.validate(definition, external_inputs=())

    async def check_definition(self, definition: Any) -> RecipeValidateResult:
        """Validate a definition and report the verdict instead of raising."""
        try:
            await self.validate(definition)
        except ValidationError as e:
            logger.info(f"Recipe definition rejected: {e}")
            return RecipeValidateResult(valid=False, error=str(e))
        return RecipeValidateResult(valid=True)

    async def get_recipe(self, recipe_id: int) -> Recipe:
        """Get recipe by ID.

        Raises:
            RecipeNotFoundError: If recipe doesn't exist
        """
        return await self.recipe_repo.get(recipe_id)

    async def create_recipe(self, name: str, version: str, definition: Any) -> Recipe:
        """Validate and store a new recipe.

        Raises:
            ValidationError: If the definition is invalid
            RecipeAlreadyExistsError: If ``(name, version)`` is taken
        """
        await self.validate(definition)
        recipe = await self.recipe_repo.create(
            Recipe(name=name, version=version, definition=definition)
        )
        logger.info(f"Recipe {recipe.id} created: {name} {version}")
        return recipe

    async def find_or_create(self, name: str, version: str, definition: Any) -> Recipe:
        """Return the recipe with this name and version, creating it if absent.

        An existing recipe is reused as stored, without re-validating or
        comparing definitions. If a concurrent request inserts the same
        ``(name, version)`` first, its row is used.
        """
        existing = await self.recipe_repo.get_by_name_version(name, version)
        if existing is not None:
            logger.debug(f"Reusing recipe {existing.id}: {name} {version}")
            return existing

        try:
            return await self.create_recipe(name, version, definition)
        except RecipeAlreadyExistsError:
            logger.info(f"Recipe {name} {version} created concurrently, re-fetching")
            existing = await self.recipe_repo.get_by_name_version(name, version)
            if existing is None:
                raise
            return existing
