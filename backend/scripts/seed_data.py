"""Seed the database with a demo tenant's properties and reservations.

Reservations are spread over the current and previous calendar month so the
dashboard shows non-zero revenue, trends and occupancy right away.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
import uuid
from datetime import datetime, time, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete

from app.auth.jwt import create_tenant_token
from app.config import settings
from app.database import Base, async_session_factory, engine
from app.models.property import Property
from app.models.reservation import Reservation

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_TENANT_ID = uuid.UUID("6f1c2a9e-5d1b-4f7a-9c1e-2b7d3e8a4f10")
DEMO_USER_ID = uuid.UUID("0b8e4d52-3a7c-4e19-8f26-91c5d7a2e6b3")

PROPERTIES = [
    {
        "name": "Casa da Praia",
        "description": "Beachfront house with three bedrooms and a balcony facing the sea.",
        "location": "Ubatuba, SP",
        "max_guests": 8,
        "base_price_per_night": Decimal("450.00"),
        "is_active": True,
    },
    {
        "name": "Loft Centro",
        "description": "Studio loft two blocks from the historic centre.",
        "location": "Paraty, RJ",
        "max_guests": 2,
        "base_price_per_night": Decimal("220.00"),
        "is_active": True,
    },
    {
        "name": "Chalé da Serra",
        "description": "Mountain chalet with fireplace, closed for renovation.",
        "location": "Campos do Jordão, SP",
        "max_guests": 4,
        "base_price_per_night": Decimal("380.00"),
        "is_active": False,
    },
]

# (property name, guest, days from the 1st of the current month, nights, status)
RESERVATIONS = [
    ("Casa da Praia", "Ana Souza", -25, 4, "confirmed"),
    ("Casa da Praia", "Bruno Lima", -12, 3, "confirmed"),
    ("Loft Centro", "Carla Mendes", -20, 2, "cancelled"),
    ("Casa da Praia", "Diego Rocha", 2, 5, "confirmed"),
    ("Loft Centro", "Eduarda Alves", 4, 3, "confirmed"),
    ("Loft Centro", "Felipe Costa", 9, 2, "pending"),
    ("Casa da Praia", "Gabriela Nunes", 14, 1, "visit"),
]


def _month_start(now: datetime) -> datetime:
    return datetime.combine(now.date().replace(day=1), time(14, 0), tzinfo=settings.tzinfo)


async def seed() -> None:
    """Create tables and populate the demo tenant.

    Idempotent: removes the demo tenant's rows before inserting fresh ones.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        await session.execute(delete(Reservation).where(Reservation.tenant_id == DEMO_TENANT_ID))
        await session.execute(delete(Property).where(Property.tenant_id == DEMO_TENANT_ID))
        await session.flush()

        # ------------------------------------------------------------------
        # 1. Create properties
        # ------------------------------------------------------------------
        created: dict[str, Property] = {}
        for prop_data in PROPERTIES:
            prop = Property(tenant_id=DEMO_TENANT_ID, **prop_data)
            session.add(prop)
            await session.flush()
            created[prop.name] = prop
            print(f"   🏠 {prop.name} — {prop.location} (R$ {prop.base_price_per_night}/night)")

        # ------------------------------------------------------------------
        # 2. Create reservations
        # ------------------------------------------------------------------
        start = _month_start(datetime.now(settings.tzinfo))
        for property_name, guest_name, offset, nights, status in RESERVATIONS:
            prop = created[property_name]
            check_in = start + timedelta(days=offset)
            session.add(
                Reservation(
                    tenant_id=DEMO_TENANT_ID,
                    property_id=prop.id,
                    guest_name=guest_name,
                    num_guests=2,
                    check_in=check_in,
                    check_out=check_in + timedelta(days=nights),
                    status=status,
                    total_price=prop.base_price_per_night * nights,
                )
            )

        await session.flush()
        await session.commit()

    token = create_tenant_token(str(DEMO_USER_ID), str(DEMO_TENANT_ID), expires_delta=timedelta(days=7))

    print()
    print("=" * 60)
    print("📊 Seed Summary")
    print("=" * 60)
    print(f"   Tenant:        {DEMO_TENANT_ID}")
    print(f"   Properties:    {len(PROPERTIES)}")
    print(f"   Reservations:  {len(RESERVATIONS)}")
    print("=" * 60)
    print("🔑 Access token (valid 7 days):")
    print(token)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
