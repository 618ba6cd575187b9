"""Integration-test fixtures.

Requires PostgreSQL with migrations applied (alembic upgrade head). The
lifespan hook runs once per session so the store, engine and sweeper live on
app.state exactly as in production. The whole directory is skipped when the
database is unreachable.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped client with the lifespan hook entered."""
    try:
        lifespan = app.router.lifespan_context(app)
        await lifespan.__aenter__()
    except (OSError, SQLAlchemyError) as exc:
        pytest.skip(f"PostgreSQL unavailable: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await lifespan.__aexit__(None, None, None)
