from __future__ import annotations

from uuid import uuid4

import pytest

from src.core.cache.coder.json_coder import JsonCoder
from src.core.cache.core import build_cache_key
from src.core.errors.exceptions import InstanceNotFoundException
from src.main.config import config
from src.user.schemas import UserExistsRequestModel
from src.user.usecases.check_exists import CheckUserExistsUseCase
from src.user.usecases.get_profile import GetUserProfileUseCase
from tests.factories.user_factory import build_user
from tests.fakes.cache import FakeCacheBackend
from tests.fakes.db import FakeUnitOfWork
from tests.fakes.repositories import FakeUsersRepository


def _profile_key(user_id: object) -> str:
    return build_cache_key(config.cache, "user-profile", user_id)


@pytest.mark.asyncio
async def test_get_profile_loads_user_and_caches_it() -> None:
    user = build_user()
    users_repo = FakeUsersRepository([user])
    backend = FakeCacheBackend()
    use_case = GetUserProfileUseCase(
        uow=FakeUnitOfWork(repositories={"users": users_repo}),
        cache_backend=backend,
        ttl_seconds=30,
    )

    profile = await use_case.execute(user_id=str(user.id))

    assert profile.id == user.id
    assert profile.email == user.email
    assert backend.set_calls == [(_profile_key(user.id), 30)]
    cached = JsonCoder.decode(backend.peek(_profile_key(user.id)))
    assert cached["id"] == user.id
    assert cached["created_at"] == user.created_at


@pytest.mark.asyncio
async def test_get_profile_cache_hit_skips_database() -> None:
    user = build_user()
    users_repo = FakeUsersRepository([user])
    backend = FakeCacheBackend()
    use_case = GetUserProfileUseCase(
        uow=FakeUnitOfWork(repositories={"users": users_repo}),
        cache_backend=backend,
    )

    await use_case.execute(user_id=str(user.id))
    profile = await use_case.execute(user_id=str(user.id))

    assert profile.email == user.email
    assert users_repo.get_single.await_count == 1


@pytest.mark.asyncio
async def test_get_profile_rejects_malformed_user_id() -> None:
    users_repo = FakeUsersRepository()
    use_case = GetUserProfileUseCase(
        uow=FakeUnitOfWork(repositories={"users": users_repo}),
        cache_backend=FakeCacheBackend(),
    )

    with pytest.raises(InstanceNotFoundException, match="User not found"):
        await use_case.execute(user_id="not-a-uuid")

    users_repo.get_single.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_profile_missing_user() -> None:
    backend = FakeCacheBackend()
    use_case = GetUserProfileUseCase(
        uow=FakeUnitOfWork(repositories={"users": FakeUsersRepository()}),
        cache_backend=backend,
    )

    with pytest.raises(InstanceNotFoundException):
        await use_case.execute(user_id=str(uuid4()))

    assert backend.set_calls == []


@pytest.mark.asyncio
async def test_check_exists_normalizes_email() -> None:
    users_repo = FakeUsersRepository([build_user(email="alice@example.com")])
    use_case = CheckUserExistsUseCase(
        uow=FakeUnitOfWork(repositories={"users": users_repo})
    )

    found = await use_case.execute(
        UserExistsRequestModel(email="Alice@Example.com")
    )
    missing = await use_case.execute(UserExistsRequestModel(email="bob@example.com"))

    assert found.exists is True
    assert missing.exists is False
