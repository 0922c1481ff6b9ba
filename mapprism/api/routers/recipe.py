"""Recipe API router: create, validate and read recipes."""

from fastapi import APIRouter, status

from mapprism.api.dependencies import RecipeServiceDep, parse_numeric_id
from mapprism.models.job import CreatedResponse
from mapprism.models.recipe import (
    Recipe,
    RecipeCreate,
    RecipeRead,
    RecipeValidateRequest,
    RecipeValidateResult,
)

router = APIRouter(
    responses={
        400: {"description": "Invalid recipe"},
        401: {"description": "Unauthorized"},
    },
)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(recipe: RecipeCreate, service: RecipeServiceDep) -> CreatedResponse:
    """Validate and store a new recipe.

    Raises:
        ValidationError: If the definition is invalid (→ 400).
        RecipeAlreadyExistsError: If name and version are taken (→ 409).
    """
    created = await service.create_recipe(recipe.name, recipe.version, recipe.definition)
    return CreatedResponse.model_validate(created)


@router.post("/validate", response_model=RecipeValidateResult)
async def validate_recipe(
    request: RecipeValidateRequest, service: RecipeServiceDep
) -> RecipeValidateResult:
    """Validate a definition without storing it.

    Validation failures are reported in the body, not as an error status.
    """
    return await service.check_definition(request.definition)


@router.get("/{recipe_id}", response_model=RecipeRead)
async def get_recipe(recipe_id: str, service: RecipeServiceDep) -> Recipe:
    """Get a stored recipe by ID."""
    return await service.get_recipe(parse_numeric_id(recipe_id, "recipe"))
