"""Job API router: create jobs and read their status."""

from fastapi import APIRouter, status

from mapprism.api.dependencies import JobServiceDep, parse_numeric_id
from mapprism.models.job import CreatedResponse, JobCreate, JobStatusRead

router = APIRouter(
    responses={
        400: {"description": "Invalid request"},
        401: {"description": "Unauthorized"},
        404: {"description": "Not found"},
    },
)


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_job(request: JobCreate, service: JobServiceDep) -> CreatedResponse:
    """Create a job from a stored or inline recipe and its input artifacts.

    Raises:
        ValidationError: Malformed artifacts or input/output mismatch (→ 400).
        RecipeNotFoundError: Unknown ``recipe_id`` (→ 404).
    """
    job = await service.create_job(request)
    return CreatedResponse.model_validate(job)


@router.get("/{job_id}", response_model=JobStatusRead)
async def get_job_status(job_id: str, service: JobServiceDep) -> JobStatusRead:
    """Get a job with its steps and artifacts."""
    return await service.get_job_status(parse_numeric_id(job_id, "job"))
