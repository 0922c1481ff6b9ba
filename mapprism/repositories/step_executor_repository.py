"""Repository for the step executor (capability) registry."""

from collections.abc import Collection

from sqlmodel import col, select

from mapprism.models.step_executor import StepExecutor
from mapprism.repositories.base import BaseRepository


class StepExecutorRepository(BaseRepository[StepExecutor]):
    """Capability registry backed by the ``step_executor`` table."""

    model = StepExecutor

    async def get_many(self, step_types: Collection[str]) -> dict[str, StepExecutor]:
        """Fetch contracts for several step types in one query.

        Args:
            step_types: Step type names.

        Returns:
            Mapping of step type to executor; unregistered types are absent.
        """
        if not step_types:
            return {}
        statement = select(StepExecutor).where(col(StepExecutor.step_type).in_(list(step_types)))
        result = await self.session.execute(statement)
        return {executor.step_type: executor for executor in result.scalars().all()}

    async def upsert(self, executor: StepExecutor) -> StepExecutor:
        """Register a step executor, replacing an existing one of the same type."""
        existing = await self.get_optional(executor.step_type)
        if existing is None:
            return await self.create(executor)

        existing.workflow = executor.workflow
        existing.accepts = dict(executor.accepts)
        existing.produces = dict(executor.produces)
        await self.session.commit()
        await self.session.refresh(existing)
        return existing
