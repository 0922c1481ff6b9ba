"""Shared table access for MapPrism repositories."""

from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from mapprism.exceptions.domain import DatabaseError, EntityNotFoundError

ModelT = TypeVar("ModelT", bound=SQLModel)


def persisted_id(entity: SQLModel) -> int:
    """Primary key of a flushed or committed row.

    Raises:
        DatabaseError: If the store assigned no id.
    """
    entity_id = getattr(entity, "id", None)
    if entity_id is None:
        raise DatabaseError(f"{type(entity).__name__} has no id after insert")
    return entity_id


class BaseRepository(Generic[ModelT]):
    """Primary-key and natural-key lookups plus inserts for one table.

    Subclasses set ``model`` and may set ``not_found`` to the exception
    raised by :meth:`get` for a missing row.
    """

    model: ClassVar[type[SQLModel]]
    not_found: ClassVar[type[EntityNotFoundError] | None] = None

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, id: Any) -> ModelT:
        """Row by primary key.

        Raises:
            EntityNotFoundError: The subclass' ``not_found`` error when set.
        """
        entity = await self.get_optional(id)
        if entity is None:
            if self.not_found is not None:
                raise self.not_found(id)
            raise EntityNotFoundError(f"{self.model.__name__} with id {id} not found")
        return entity

    async def get_optional(self, id: Any) -> ModelT | None:
        return await self.session.get(self.model, id)  # type: ignore[return-value]

    async def get_by(self, **filters: str | int) -> ModelT | None:
        """First row whose columns equal ``filters``."""
        statement = select(self.model).filter_by(**filters)
        result = await self.session.execute(statement)
        return result.scalars().first()  # type: ignore[return-value]

    async def create(self, entity: ModelT) -> ModelT:
        """Insert and commit ``entity``, returning it with generated columns loaded."""
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity
