"""
Base CRUD operations for SQLAlchemy models.

Provides generic primary-key operations that model-specific CRUD classes
inherit. Keys are accepted as strings or UUIDs and returned as strings.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Generic, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import Delete, any_, bindparam, delete, select
from sqlalchemy.dialects.postgresql import ARRAY, UUID as PG_UUID
from sqlalchemy.ext.asyncio import AsyncSession

from persona_rag.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def to_uuid(value: str | UUID) -> UUID:
    """Coerce a string key to UUID (ValueError on malformed input)."""
    return value if isinstance(value, UUID) else UUID(str(value))


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for primary-key operations.

    Type Parameters:
        ModelT: SQLAlchemy model class with a UUID `id` primary key

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def list_ids(self, session: AsyncSession) -> set[str]:
        """
        Full scan of primary keys.

        Args:
            session: Async database session

        Returns:
            Set of primary keys as strings
        """
        result = await session.execute(select(self.model.id))
        return {str(row_id) for row_id in result.scalars().all()}

    async def delete_by_ids(self, session: AsyncSession, ids: Iterable[str | UUID]) -> int:
        """
        Delete every record whose key is in `ids`.

        Unknown keys are ignored; an empty collection issues no statement.

        Args:
            session: Async database session
            ids: Primary keys to delete

        Returns:
            Number of rows deleted
        """
        keys = [to_uuid(i) for i in ids]
        if not keys:
            return 0
        result = await session.execute(self.build_delete(keys))
        return result.rowcount or 0

    def build_delete(self, keys: list[UUID]) -> Delete:
        """
        Build DELETE ... WHERE id = ANY(:ids) with the keys bound as one array.

        A single array parameter keeps the statement under the protocol's
        bind-parameter limit however many keys are passed.
        """
        ids = bindparam("ids", value=keys, type_=ARRAY(PG_UUID(as_uuid=True)))
        return delete(self.model).where(self.model.id == any_(ids))

