from abc import ABC, abstractmethod
from contextlib import AsyncExitStack
from typing import Any, Self, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.repositories import BaseRepository
from src.core.database.transactions import safe_begin
from src.user.auth.repositories import OtpTokenRepository
from src.user.repositories import UserRepository

RepositoryInstance = TypeVar("RepositoryInstance", bound=BaseRepository[Any])


class UnitOfWork(ABC):
    """Transaction boundary shared by all repositories of one business operation."""

    @abstractmethod
    async def __aenter__(self) -> Self:
        pass

    @abstractmethod
    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass

    @property
    @abstractmethod
    def completed(self) -> bool:
        """True once the unit has been committed or rolled back."""


class SQLAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self._session = session
        self._exit_stack = AsyncExitStack()
        self._is_completed = False

    async def __aenter__(self) -> Self:
        await self._exit_stack.__aenter__()
        await self._exit_stack.enter_async_context(safe_begin(self._session))
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None and not self._is_completed:
            await self.rollback()

        await self._exit_stack.__aexit__(exc_type, exc_val, exc_tb)

    def _ensure_not_completed(self) -> None:
        if self._is_completed:
            raise RuntimeError("This unit of work has already been completed")

    async def commit(self) -> None:
        """
        Commit the transaction.

        Raises:
            RuntimeError: If the unit of work has already been completed
        """
        self._ensure_not_completed()
        await self._session.commit()
        self._is_completed = True

    async def rollback(self) -> None:
        """
        Rollback the transaction.

        Raises:
            RuntimeError: If the unit of work has already been completed
        """
        self._ensure_not_completed()
        await self._session.rollback()
        self._is_completed = True

    async def flush(self) -> None:
        self._ensure_not_completed()
        await self._session.flush()

    async def refresh(self, instance: Any) -> None:
        self._ensure_not_completed()
        await self._session.refresh(instance)

    @property
    def completed(self) -> bool:
        return self._is_completed

    @property
    def session(self) -> AsyncSession:
        return self._session


class ApplicationUnitOfWork(SQLAlchemyUnitOfWork):
    """
    Unit of Work exposing the application repositories.

    Repositories are stateless, so one instance per type is created lazily and
    reused for the lifetime of the unit.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._repositories: dict[type[BaseRepository[Any]], BaseRepository[Any]] = {}

    def _get_repository(
        self, repository_type: type[RepositoryInstance]
    ) -> RepositoryInstance:
        if repository_type not in self._repositories:
            self._repositories[repository_type] = repository_type()

        return cast(RepositoryInstance, self._repositories[repository_type])

    @property
    def users(self) -> UserRepository:
        return self._get_repository(UserRepository)

    @property
    def otp_tokens(self) -> OtpTokenRepository:
        return self._get_repository(OtpTokenRepository)


async def get_uow(session: AsyncSession) -> ApplicationUnitOfWork:
    return ApplicationUnitOfWork(session)
