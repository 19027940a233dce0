from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def safe_begin(session: AsyncSession) -> AsyncGenerator[None]:
    """
    Open a transactional scope for ORM operations.

    A fresh session gets a regular BEGIN...COMMIT/ROLLBACK. A session that is
    already inside a transaction gets a SAVEPOINT instead, so the inner block
    can roll back without touching the outer transaction.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield
