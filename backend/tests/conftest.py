"""
Pytest configuration and fixtures.
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tests.fakes import FakeDatabase, FakeMailer


@pytest.fixture
def fake_database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def image_store(tmp_path):
    from csrms.utils.uploads import ImageStore

    return ImageStore(tmp_path / "uploads")


@pytest_asyncio.fixture
async def api_client(fake_database, fake_mailer, image_store) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX AsyncClient configured against the FastAPI app with test overrides."""
    from csrms.main import app
    from csrms.core.database import get_database
    from csrms.core.mail import get_mailer
    from csrms.core.rate_limiter import limiter
    from csrms.utils.uploads import get_image_store

    limiter.reset()
    app.dependency_overrides[get_database] = lambda: fake_database
    app.dependency_overrides[get_mailer] = lambda: fake_mailer
    app.dependency_overrides[get_image_store] = lambda: image_store

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_database, None)
        app.dependency_overrides.pop(get_mailer, None)
        app.dependency_overrides.pop(get_image_store, None)
