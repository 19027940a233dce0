import os

os.environ.setdefault("TESTING", "true")

from collections.abc import AsyncGenerator, Generator  # noqa: E402

from fastapi import FastAPI  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.core.cache.backend.memory_backend import InMemoryCacheBackend  # noqa: E402
from src.core.database.session import get_session, get_unit_of_work  # noqa: E402
from src.core.email_service.dependencies import get_email_service  # noqa: E402
from src.core.email_service.service import EmailService  # noqa: E402
from src.main.config import Config, get_settings  # noqa: E402
from src.main.web import get_application  # noqa: E402
from tests.email.mocks import MockMailer  # noqa: E402
from tests.fakes.db import FakeAsyncSession, FakeUnitOfWork  # noqa: E402
from tests.fakes.repositories import (  # noqa: E402
    FakeOtpTokensRepository,
    FakeUsersRepository,
)
from tests.helpers.overrides import DependencyOverrides  # noqa: E402
from tests.helpers.providers import ProvideAsyncValue, ProvideValue  # noqa: E402


@pytest.fixture(scope="session")
def settings() -> Config:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def cache_backend() -> InMemoryCacheBackend:
    return InMemoryCacheBackend()


@pytest.fixture
def app(cache_backend: InMemoryCacheBackend) -> FastAPI:
    return get_application(cache_backend=cache_backend)


@pytest.fixture
def dependency_overrides(app: FastAPI) -> Generator[DependencyOverrides]:
    overrides = DependencyOverrides(app)
    yield overrides
    overrides.reset()


@pytest.fixture
def mock_mailer() -> MockMailer:
    return MockMailer()


@pytest.fixture
def email_service(mock_mailer: MockMailer) -> EmailService:
    return EmailService(mock_mailer)


@pytest.fixture
def fake_session() -> FakeAsyncSession:
    return FakeAsyncSession()


@pytest.fixture
def users_repo() -> FakeUsersRepository:
    return FakeUsersRepository()


@pytest.fixture
def otp_tokens_repo() -> FakeOtpTokensRepository:
    return FakeOtpTokensRepository()


@pytest.fixture
def fake_uow(
    fake_session: FakeAsyncSession,
    users_repo: FakeUsersRepository,
    otp_tokens_repo: FakeOtpTokensRepository,
) -> FakeUnitOfWork:
    return FakeUnitOfWork(
        session=fake_session,
        repositories={"users": users_repo, "otp_tokens": otp_tokens_repo},
    )


@pytest.fixture
def app_with_fakes(
    app: FastAPI,
    dependency_overrides: DependencyOverrides,
    email_service: EmailService,
    fake_session: FakeAsyncSession,
    fake_uow: FakeUnitOfWork,
    settings: Config,
) -> FastAPI:
    dependency_overrides.set(get_email_service, ProvideValue(email_service))
    dependency_overrides.set(get_session, ProvideAsyncValue(fake_session))
    dependency_overrides.set(get_unit_of_work, ProvideAsyncValue(fake_uow))
    dependency_overrides.set(get_settings, ProvideValue(settings))
    return app


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def async_client_with_fakes(
    app_with_fakes: FastAPI,
) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app_with_fakes)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client
