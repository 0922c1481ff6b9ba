"""
Job models for MapPrism.

A job is one execution of a recipe. It owns one ``JobStep`` row per recipe
step, one ``JobArtifact`` row per artifact that exists in the job and
optionally ``JobOutput`` rows naming artifacts to export. The engine creates
these rows in their initial state; execution workers mutate them afterwards.
"""

from datetime import datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, StrictInt, model_validator
from sqlalchemy import DateTime, ForeignKey, Integer
from sqlmodel import JSON, Column, Field, SQLModel

from .base import JobStatus, JobStepStatus, utcnow


class Job(SQLModel, table=True):
    """One execution instance of a recipe."""

    __tablename__ = "job"

    id: int | None = Field(default=None, primary_key=True)
    recipe_id: int = Field(foreign_key="recipe.id", index=True)
    status: JobStatus = Field(default=JobStatus.pending)
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )
    started_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    finished_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    error: str | None = None


class JobStep(SQLModel, table=True):
    """Tracked state of one recipe step within a job.

    ``claimed_by``/``claimed_at`` are plain columns; claim exclusivity is
    enforced by the workers (e.g. ``SELECT ... FOR UPDATE SKIP LOCKED``).
    """

    __tablename__ = "job_step"

    job_id: int = Field(
        sa_column=Column(Integer, ForeignKey("job.id", ondelete="CASCADE"), primary_key=True)
    )
    step_id: str = Field(primary_key=True)
    step_type: str
    status: JobStepStatus = Field(default=JobStepStatus.pending, index=True)
    attempt: int = Field(default=0, ge=0)
    claimed_by: str | None = None
    claimed_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    started_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    finished_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    error: str | None = None


class JobArtifact(SQLModel, table=True):
    """An artifact that exists within a job.

    Initial inputs have ``producer_step = None``; step outputs are inserted by
    the execution workers with the producing step id.
    """

    __tablename__ = "job_artifact"

    job_id: int = Field(
        sa_column=Column(Integer, ForeignKey("job.id", ondelete="CASCADE"), primary_key=True)
    )
    name: str = Field(primary_key=True)
    type: str
    uri: str
    hash: str
    producer_step: str | None = None
    # "metadata" is reserved on SQLModel classes
    artifact_metadata: dict[str, Any] | None = Field(
        default=None, sa_column=Column("metadata", JSON, nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )


class JobOutput(SQLModel, table=True):
    """A request to export a producible artifact to an external path."""

    __tablename__ = "job_output"

    job_id: int = Field(
        sa_column=Column(Integer, ForeignKey("job.id", ondelete="CASCADE"), primary_key=True)
    )
    artifact_name: str = Field(primary_key=True)
    path: str


# Request schemas


class ArtifactInput(BaseModel):
    """A concrete artifact supplied when creating a job."""

    type: str
    uri: str
    hash: str
    metadata: dict[str, Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def require_string_fields(cls, data: Any) -> Any:
        """Reject missing, empty or non-string ``type``/``uri``/``hash``."""
        if not isinstance(data, dict):
            raise ValueError("artifact must be an object")
        for key in ("type", "uri", "hash"):
            value = data.get(key)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{key} must be a non-empty string")
        return data


class OutputRequest(BaseModel):
    """Destination for an exported artifact."""

    path: str


class InlineRecipe(BaseModel):
    """Recipe supplied inline with a job request (find-or-create)."""

    name: str
    version: str
    definition: Any

    @model_validator(mode="after")
    def require_fields(self) -> Self:
        """Name, version and definition must all be non-empty."""
        if not self.name or not self.version or not self.definition:
            raise ValueError("recipe must have name, version, and definition")
        return self


class JobCreate(BaseModel):
    """Request body for ``POST /jobs``.

    ``inputs`` is kept raw here so that artifact shape errors can be reported
    by artifact name; see :func:`mapprism.services.job_service.parse_artifact_inputs`.
    """

    model_config = ConfigDict(extra="ignore")

    recipe_id: StrictInt | None = None
    recipe: InlineRecipe | None = None
    inputs: dict[str, Any]
    outputs: dict[str, OutputRequest] | None = None


# Response schemas


class JobRead(BaseModel):
    """Job row as returned by the status endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipe_id: int
    status: JobStatus
    created_at: datetime
    started_at: datetime | None
    finished_at: datetime | None
    error: str | None


class JobStepRead(BaseModel):
    """Job step row as returned by the status endpoint."""

    model_config = ConfigDict(from_attributes=True)

    job_id: int
    step_id: str
    step_type: str
    status: JobStepStatus
    attempt: int
    claimed_by: str | None
    claimed_at: datetime | None
    started_at: datetime | None
    finished_at: datetime | None
    error: str | None


class JobArtifactRead(BaseModel):
    """Job artifact row as returned by the status endpoint."""

    job_id: int
    name: str
    type: str
    uri: str
    hash: str
    producer_step: str | None
    metadata: dict[str, Any] | None
    created_at: datetime

    @classmethod
    def from_row(cls, artifact: JobArtifact) -> "JobArtifactRead":
        """Build the read model from a table row."""
        return cls(
            job_id=artifact.job_id,
            name=artifact.name,
            type=artifact.type,
            uri=artifact.uri,
            hash=artifact.hash,
            producer_step=artifact.producer_step,
            metadata=artifact.artifact_metadata,
            created_at=artifact.created_at,
        )


class JobStatusRead(BaseModel):
    """Full status of a job: the job row, its steps and its artifacts."""

    job: JobRead
    steps: list[JobStepRead]
    artifacts: list[JobArtifactRead]


class CreatedResponse(BaseModel):
    """Identifier of a newly created entity."""

    model_config = ConfigDict(from_attributes=True)

    id: int
