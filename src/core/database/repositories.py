from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.base import Base as SQLAlchemyBase

logger = get_logger(__name__)

T = TypeVar("T", bound=SQLAlchemyBase)


class BaseRepository(Generic[T]):
    """Base repository with common SQLAlchemy operations on a caller-owned session."""

    model: type[T]

    def __init__(self) -> None:
        if not hasattr(self, "model"):
            raise NotImplementedError("Subclasses must define class variable 'model'")

    async def create(
        self, session: AsyncSession, data: dict[str, Any], commit: bool = False
    ) -> T:
        """Create a new record using the provided session."""
        try:
            instance = self.model(**data)
            session.add(instance)
            if commit:
                await session.commit()
                await session.refresh(instance)
                logger.info("%s created successfully [Committed].", self.model.__name__)
            else:
                logger.debug(
                    "%s created [Staged, pending commit].", self.model.__name__
                )
            return instance
        except (IntegrityError, SQLAlchemyError):
            if commit:
                await session.rollback()
            raise

    async def exists(self, session: AsyncSession, **filters: Any) -> bool:
        """Check whether at least one record matches the provided filters."""
        subquery = select(1).select_from(self.model).filter_by(**filters).limit(1)
        query = select(subquery.exists())
        return bool(await session.scalar(query))

    async def get_single(
        self, session: AsyncSession, for_update: bool = False, **filters: Any
    ) -> T | None:
        """Retrieve a single record using the provided session."""
        query = select(self.model).filter_by(**filters).limit(1)
        if for_update:
            query = query.with_for_update()

        result = await session.execute(query)
        return result.scalars().first()

    async def get_list(self, session: AsyncSession, **filters: Any) -> list[T]:
        """Retrieve every record matching the filters, newest first."""
        query = select(self.model).filter_by(**filters)

        order_by = getattr(self.model, "created_at", None)
        if order_by is not None:
            query = query.order_by(order_by.desc())

        result = await session.execute(query)
        return list(result.scalars().all())

    async def update(
        self,
        session: AsyncSession,
        data: dict[str, Any],
        commit: bool = False,
        **filters: Any,
    ) -> T | None:
        """Update a record using the provided session."""
        self._ensure_filters_present(filters)
        try:
            query = select(self.model).filter_by(**filters)
            result = await session.execute(query)
            instance = result.scalars().first()
            if instance is None:
                logger.debug(
                    "%s update skipped [NotFound]. filters=%s",
                    self.model.__name__,
                    sorted(filters),
                )
                return None

            for key, value in data.items():
                setattr(instance, key, value)
            if commit:
                await session.commit()
                await session.refresh(instance)
                logger.info("%s updated successfully [Committed].", self.model.__name__)
            else:
                logger.debug(
                    "%s updated [Staged, pending commit].", self.model.__name__
                )
            return instance
        except (IntegrityError, SQLAlchemyError):
            if commit:
                await session.rollback()
            raise

    async def delete(
        self, session: AsyncSession, commit: bool = False, **filters: Any
    ) -> T | None:
        """Delete a single record using the provided session."""
        self._ensure_filters_present(filters)
        try:
            query = select(self.model).filter_by(**filters)
            result = await session.execute(query)
            instance = result.scalars().first()
            if instance is None:
                return None

            await session.delete(instance)
            if commit:
                await session.commit()
                logger.info("%s deleted successfully [Committed].", self.model.__name__)
            else:
                logger.debug(
                    "%s deleted [Staged, pending commit].", self.model.__name__
                )
            return instance
        except (IntegrityError, SQLAlchemyError):
            if commit:
                await session.rollback()
            raise

    async def delete_where(
        self, session: AsyncSession, *conditions: ColumnElement[bool]
    ) -> int:
        """Bulk delete every row matching the conditions. Returns the row count."""
        if not conditions:
            raise ValueError("At least one condition must be provided for delete")
        result = await session.execute(delete(self.model).where(*conditions))
        deleted = int(getattr(result, "rowcount", 0) or 0)
        logger.debug("%s bulk delete removed %s rows.", self.model.__name__, deleted)
        return deleted

    @staticmethod
    def _ensure_filters_present(filters: dict[str, Any]) -> None:
        if not filters:
            raise ValueError("At least one filter must be provided for update/delete")
