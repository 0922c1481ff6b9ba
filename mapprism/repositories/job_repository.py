"""Repository for job materialization and job status reads."""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import col, select

from mapprism.exceptions.domain import DatabaseError, JobNotFoundError
from mapprism.models.base import JobStatus, JobStepStatus, utcnow
from mapprism.models.job import ArtifactInput, Job, JobArtifact, JobOutput, JobStep, OutputRequest
from mapprism.repositories.base import BaseRepository, persisted_id
from mapprism.services.recipe.definition import StepDefinition
from mapprism.utils.logger import logger


class JobRepository(BaseRepository[Job]):
    """Repository for Job and its step, artifact and output rows."""

    model = Job
    not_found = JobNotFoundError

    def _artifact_insert(self, values: dict[str, Any]) -> Insert:
        """``INSERT ... ON CONFLICT (job_id, name) DO NOTHING`` for the bound dialect."""
        dialect = self.session.get_bind().dialect.name
        table = JobArtifact.__table__
        if dialect == "postgresql":
            return (
                postgresql.insert(table)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["job_id", "name"])
            )
        if dialect == "sqlite":
            return (
                sqlite.insert(table)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["job_id", "name"])
            )
        raise DatabaseError(f"Unsupported database dialect for artifact insert: {dialect}")

    async def add_initial_artifact(self, job_id: int, name: str, artifact: ArtifactInput) -> None:
        """Insert an externally supplied artifact; an existing ``(job_id, name)`` is kept."""
        await self.session.execute(
            self._artifact_insert(
                {
                    "job_id": job_id,
                    "name": name,
                    "type": artifact.type,
                    "uri": artifact.uri,
                    "hash": artifact.hash,
                    "producer_step": None,
                    "metadata": artifact.metadata,
                    "created_at": utcnow(),
                }
            )
        )

    async def materialize(
        self,
        recipe_id: int,
        steps: Sequence[StepDefinition],
        inputs: Mapping[str, ArtifactInput],
        outputs: Mapping[str, OutputRequest] | None = None,
    ) -> Job:
        """Create a job with its initial artifacts, steps and outputs atomically.

        Either every row is committed or none is.

        Args:
            recipe_id: Recipe the job instantiates.
            steps: Recipe steps; one pending JobStep is created per step.
            inputs: Initial input artifacts by name.
            outputs: Requested job outputs by artifact name.

        Returns:
            The created job.
        """
        # Close the read transaction left open by earlier lookups so the
        # write transaction below spans only the inserts.
        if self.session.in_transaction():
            await self.session.commit()

        job = Job(recipe_id=recipe_id, status=JobStatus.pending)
        async with self.session.begin():
            self.session.add(job)
            await self.session.flush()
            job_id = persisted_id(job)

            for name, artifact in inputs.items():
                await self.add_initial_artifact(job_id, name, artifact)

            self.session.add_all(
                JobStep(
                    job_id=job_id,
                    step_id=step.id,
                    step_type=step.type,
                    status=JobStepStatus.pending,
                    attempt=0,
                )
                for step in steps
            )
            self.session.add_all(
                JobOutput(job_id=job_id, artifact_name=name, path=output.path)
                for name, output in (outputs or {}).items()
            )

        logger.info(
            f"Job {job_id} materialized for recipe {recipe_id}: "
            f"{len(steps)} step(s), {len(inputs)} input(s), {len(outputs or {})} output(s)"
        )
        return job

    async def get_steps(self, job_id: int) -> Sequence[JobStep]:
        """Steps of a job ordered by step id."""
        statement = (
            select(JobStep).where(JobStep.job_id == job_id).order_by(col(JobStep.step_id))
        )
        result = await self.session.execute(statement)
        return result.scalars().all()

    async def get_artifacts(self, job_id: int) -> Sequence[JobArtifact]:
        """Artifacts of a job ordered by name."""
        statement = (
            select(JobArtifact).where(JobArtifact.job_id == job_id).order_by(col(JobArtifact.name))
        )
        result = await self.session.execute(statement)
        return result.scalars().all()
