"""Service layer for job creation and job status."""

from collections.abc import Mapping
from typing import Any

import pydantic

from mapprism.exceptions.domain import ValidationError
from mapprism.models.job import (
    ArtifactInput,
    Job,
    JobArtifactRead,
    JobCreate,
    JobRead,
    JobStatusRead,
    JobStepRead,
    OutputRequest,
)
from mapprism.models.recipe import Recipe
from mapprism.repositories.base import persisted_id
from mapprism.repositories.job_repository import JobRepository
from mapprism.services.recipe import ArtifactSets, derive_artifacts, parse_definition
from mapprism.services.recipe_service import RecipeService


def parse_artifact_inputs(raw_inputs: Mapping[str, Any]) -> dict[str, ArtifactInput]:
    """Parse the ``inputs`` of a job request.

    Raises:
        ValidationError: Naming the first artifact with a bad shape.
    """
    inputs: dict[str, ArtifactInput] = {}
    for name, raw in raw_inputs.items():
        try:
            inputs[name] = ArtifactInput.model_validate(raw)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f'Invalid artifact "{name}": must have type, uri, and hash as strings'
            ) from e
    return inputs


def check_job_bindings(
    artifacts: ArtifactSets,
    inputs: Mapping[str, Any],
    outputs: Mapping[str, Any] | None,
) -> None:
    """Check supplied inputs and requested outputs against a recipe's artifacts.

    Inputs must match the initial inputs exactly; every requested output must
    be produced by some step.

    Raises:
        ValidationError: On the first mismatch.
    """
    required = artifacts.initial_inputs

    missing = sorted(required - set(inputs))
    if missing:
        raise ValidationError(f"Missing required initial input artifact: {missing[0]}")

    unexpected = sorted(set(inputs) - required)
    if unexpected:
        raise ValidationError(
            f'Unexpected input artifact "{unexpected[0]}": not required by recipe. '
            f"Required inputs: {', '.join(sorted(required))}"
        )

    unproducible = sorted(set(outputs or {}) - artifacts.outputs)
    if unproducible:
        raise ValidationError(
            f'Invalid job output "{unproducible[0]}": artifact is not producible by recipe. '
            f"Producible artifacts: {', '.join(sorted(artifacts.outputs))}"
        )


class JobService:
    """Service for materializing jobs and reading their status."""

    def __init__(self, recipe_service: RecipeService, job_repo: JobRepository):
        """Initialize job service.

        Args:
            recipe_service: Recipe service used to resolve the job's recipe
            job_repo: Job repository instance
        """
        self.recipe_service = recipe_service
        self.job_repo = job_repo

    async def resolve_recipe(self, request: JobCreate) -> Recipe:
        """Find the recipe a job request refers to.

        Raises:
            ValidationError: Unless exactly one of ``recipe_id``/``recipe`` is set
            RecipeNotFoundError: If ``recipe_id`` does not exist
        """
        if request.recipe_id is not None and request.recipe is not None:
            raise ValidationError("Provide either recipe_id or recipe, not both")

        if request.recipe_id is not None:
            return await self.recipe_service.get_recipe(request.recipe_id)

        if request.recipe is not None:
            return await self.recipe_service.find_or_create(
                request.recipe.name, request.recipe.version, request.recipe.definition
            )

        raise ValidationError(
            "Either recipe_id or recipe (name, version, definition) must be provided"
        )

    async def create_job(self, request: JobCreate) -> Job:
        """Create a job for a recipe bound to concrete input artifacts.

        All checks run before the write transaction; the job, its initial
        artifacts, its steps and its outputs are then inserted atomically.

        Raises:
            ValidationError: Bad request shape or input/output mismatch
            RecipeNotFoundError: If ``recipe_id`` does not exist
        """
        inputs = parse_artifact_inputs(request.inputs)
        outputs: dict[str, OutputRequest] = dict(request.outputs or {})

        recipe = await self.resolve_recipe(request)

        steps = parse_definition(recipe.definition)
        check_job_bindings(derive_artifacts(steps), inputs, outputs)

        return await self.job_repo.materialize(persisted_id(recipe), steps, inputs, outputs)

    async def get_job_status(self, job_id: int) -> JobStatusRead:
        """Get a job together with its steps and artifacts.

        Raises:
            JobNotFoundError: If the job doesn't exist
        """
        job = await self.job_repo.get(job_id)
        steps = await self.job_repo.get_steps(job_id)
        artifacts = await self.job_repo.get_artifacts(job_id)
        return JobStatusRead(
            job=JobRead.model_validate(job),
            steps=[JobStepRead.model_validate(step) for step in steps],
            artifacts=[JobArtifactRead.from_row(artifact) for artifact in artifacts],
        )
