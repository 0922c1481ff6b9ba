"""
Common dependencies for MapPrism API endpoints.

This module provides reusable dependency functions for FastAPI endpoints:
settings, database sessions, repositories, services and path parsing.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.http import BAD_REQUEST
from ..repositories import JobRepository, RecipeRepository, StepExecutorRepository
from ..services.job_service import JobService
from ..services.recipe import RecipeValidator
from ..services.recipe_service import RecipeService
from ..settings import Settings, get_settings
from ..utils.database import get_async_session


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
SessionDep = Annotated[AsyncSession, Depends(get_async_session)]


def parse_numeric_id(value: str, label: str) -> int:
    """Parse a numeric path identifier.

    Raises:
        HTTPException: 400 ``Invalid <label> ID`` if ``value`` is not numeric.
    """
    try:
        return int(value)
    except ValueError:
        raise BAD_REQUEST.with_context(f"Invalid {label} ID") from None


# Repositories


def get_recipe_repository(session: SessionDep) -> RecipeRepository:
    return RecipeRepository(session)


def get_step_executor_repository(session: SessionDep) -> StepExecutorRepository:
    return StepExecutorRepository(session)


def get_job_repository(session: SessionDep) -> JobRepository:
    return JobRepository(session)


RecipeRepositoryDep = Annotated[RecipeRepository, Depends(get_recipe_repository)]
StepExecutorRepositoryDep = Annotated[
    StepExecutorRepository, Depends(get_step_executor_repository)
]
JobRepositoryDep = Annotated[JobRepository, Depends(get_job_repository)]


# Services


def get_recipe_service(
    recipe_repo: RecipeRepositoryDep, executor_repo: StepExecutorRepositoryDep
) -> RecipeService:
    """Recipe service validating against the step executor registry."""
    return RecipeService(recipe_repo, RecipeValidator(executor_repo))


RecipeServiceDep = Annotated[RecipeService, Depends(get_recipe_service)]


def get_job_service(recipe_service: RecipeServiceDep, job_repo: JobRepositoryDep) -> JobService:
    return JobService(recipe_service, job_repo)


JobServiceDep = Annotated[JobService, Depends(get_job_service)]
