"""
MapPrism data models.

This package contains the SQLModel-based models that define the database schema
and the request/response schemas of the API.
"""

from .base import (
    JOB_STEP_TRANSITIONS,
    JOB_TRANSITIONS,
    JobStatus,
    JobStepStatus,
    can_transition_job,
    can_transition_step,
)
from .job import (
    ArtifactInput,
    CreatedResponse,
    InlineRecipe,
    Job,
    JobArtifact,
    JobArtifactRead,
    JobCreate,
    JobOutput,
    JobRead,
    JobStatusRead,
    JobStep,
    JobStepRead,
    OutputRequest,
)
from .recipe import (
    Recipe,
    RecipeBase,
    RecipeCreate,
    RecipeRead,
    RecipeValidateRequest,
    RecipeValidateResult,
)
from .step_executor import StepExecutor, StepExecutorBase, StepExecutorCreate

__all__ = [
    "JOB_STEP_TRANSITIONS",
    "JOB_TRANSITIONS",
    # Job
    "ArtifactInput",
    "CreatedResponse",
    "InlineRecipe",
    "Job",
    "JobArtifact",
    "JobArtifactRead",
    "JobCreate",
    "JobOutput",
    "JobRead",
    "JobStatus",
    "JobStatusRead",
    "JobStep",
    "JobStepRead",
    "JobStepStatus",
    "OutputRequest",
    # Recipe
    "Recipe",
    "RecipeBase",
    "RecipeCreate",
    "RecipeRead",
    "RecipeValidateRequest",
    "RecipeValidateResult",
    # Step executor
    "StepExecutor",
    "StepExecutorBase",
    "StepExecutorCreate",
    "can_transition_job",
    "can_transition_step",
]
