"""Repository layer for data access operations."""

from mapprism.repositories.base import BaseRepository
from mapprism.repositories.job_repository import JobRepository
from mapprism.repositories.recipe_repository import RecipeRepository
from mapprism.repositories.step_executor_repository import StepExecutorRepository

__all__ = ["BaseRepository", "JobRepository", "RecipeRepository", "StepExecutorRepository"]
