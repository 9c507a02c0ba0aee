"""Shared test configuration and fixtures.

API tests drive the real FastAPI app through ``httpx.AsyncClient`` with the
database session replaced by an ``AsyncMock``. Each test queues the results
its queries should see on ``db_session.execute.side_effect``, in call order,
so no PostgreSQL instance is needed.
"""

import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.auth.jwt import create_tenant_token
from app.config import settings
from app.database import get_db
from app.main import app
from app.models.property import Property
from app.models.reservation import Reservation

# ---------------------------------------------------------------------------
# Fake SQLAlchemy results
# ---------------------------------------------------------------------------


class FakeResult:
    """Stand-in for a SQLAlchemy ``Result`` over a fixed list of rows."""

    def __init__(self, rows: list | None = None, scalar: object = None):
        self._rows = list(rows or [])
        self._scalar = scalar

    def scalars(self) -> "FakeResult":
        return self

    def all(self) -> list:
        return list(self._rows)

    def scalar_one_or_none(self):
        return self._rows[0] if self._rows else None

    def scalar_one(self):
        return self._scalar


def _apply_server_defaults(obj) -> None:
    """Mimic the columns the database fills in on INSERT."""
    now = datetime.now(timezone.utc)
    if getattr(obj, "id", None) is None:
        obj.id = uuid.uuid4()
    if getattr(obj, "created_at", None) is None:
        obj.created_at = now
    if getattr(obj, "updated_at", None) is None:
        obj.updated_at = now


# ---------------------------------------------------------------------------
# Database session and HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def db_session() -> AsyncMock:
    """An ``AsyncSession`` double; ``add`` is synchronous like the real one."""
    session = AsyncMock()
    session.add = MagicMock()
    session.refresh.side_effect = _apply_server_defaults
    return session


@pytest_asyncio.fixture
async def client(db_session: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the mocked DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: authenticated tenant
# ---------------------------------------------------------------------------


@pytest.fixture
def tenant_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def auth_headers(tenant_id: uuid.UUID) -> dict[str, str]:
    """Return Authorization headers for a user of ``tenant_id``."""
    token = create_tenant_token(str(uuid.uuid4()), str(tenant_id))
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Convenience fixtures: ORM row factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_property(tenant_id: uuid.UUID) -> Callable[..., Property]:
    """Build a persisted-looking ``Property`` of the current tenant."""

    def _make(**overrides) -> Property:
        now = datetime.now(timezone.utc)
        data = {
            "id": uuid.uuid4(),
            "tenant_id": tenant_id,
            "name": "Casa Teste",
            "location": "Florianópolis, SC",
            "max_guests": 4,
            "base_price_per_night": Decimal("300.00"),
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return Property(**data)

    return _make


@pytest.fixture
def make_reservation(tenant_id: uuid.UUID) -> Callable[..., Reservation]:
    """Build a persisted-looking ``Reservation`` of the current tenant.

    ``check_in`` defaults to 14:00 local time ten days from now and the stay
    lasts ``nights`` (default 3).
    """

    def _make(nights: int = 3, **overrides) -> Reservation:
        now = datetime.now(timezone.utc)
        check_in = overrides.pop(
            "check_in",
            datetime.now(settings.tzinfo).replace(hour=14, minute=0, second=0, microsecond=0) + timedelta(days=10),
        )
        data = {
            "id": uuid.uuid4(),
            "tenant_id": tenant_id,
            "property_id": uuid.uuid4(),
            "guest_name": "Maria Silva",
            "num_guests": 2,
            "check_in": check_in,
            "check_out": check_in + timedelta(days=nights),
            "status": "confirmed",
            "total_price": Decimal("900.00"),
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return Reservation(**data)

    return _make
