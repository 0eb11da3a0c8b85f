"""Seed script for CashLedger demo data."""

import asyncio
import random
from datetime import datetime, time, timedelta
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cashledger.core.db import AsyncSessionLocal, create_tables
from cashledger.models import CashierSession
from cashledger.utils.datetime import today_local

SHIFT_PATTERNS = [
    {"start_time": time(7, 0), "end_time": time(15, 0), "name": "Shift Pagi"},
    {"start_time": time(15, 0), "end_time": time(23, 0), "name": "Shift Sore"},
]

CASHIER_POOL = ["Ani Wijaya", "Budi Santoso", "Citra Lestari", "Dewi Anggraini", "Eko Prasetyo"]

DAYS_BACK = 14


def _build_session(day, shift: dict, name: str, user_id) -> CashierSession:
    opened_at = datetime.combine(day, shift["start_time"])
    starting_cash = Decimal(random.choice([100000, 200000, 300000]))
    total_sales = Decimal(random.randint(20, 400) * 5000)

    session = CashierSession(
        user_id=user_id,
        employee_name=name,
        opened_at=opened_at,
        starting_cash=starting_cash,
        total_sales=total_sales,
        status="Open",
        notes=shift["name"],
    )
    # Most drawers count out within a few thousand of expected
    counted = starting_cash + total_sales + Decimal(random.choice([-5000, -1000, 0, 0, 0, 2000]))
    session.close(ending_cash=counted, closed_at=datetime.combine(day, shift["end_time"]))
    return session


async def seed_sessions(db: AsyncSession) -> int:
    """Create closed sessions for the last DAYS_BACK days plus one open session today."""
    result = await db.execute(select(CashierSession).limit(1))
    if result.scalar_one_or_none():
        print("ℹ️  Sessions already exist, skipping...")
        return 0

    user_ids = {name: uuid4() for name in CASHIER_POOL}
    today = today_local()
    count = 0

    for offset in range(DAYS_BACK, 0, -1):
        day = today - timedelta(days=offset)
        for shift in SHIFT_PATTERNS:
            name = random.choice(CASHIER_POOL)
            db.add(_build_session(day, shift, name, user_ids[name]))
            count += 1

    name = CASHIER_POOL[0]
    db.add(
        CashierSession(
            user_id=user_ids[name],
            employee_name=name,
            opened_at=datetime.combine(today, SHIFT_PATTERNS[0]["start_time"]),
            starting_cash=Decimal("200000"),
            total_sales=Decimal("0"),
            status="Open",
        )
    )
    count += 1

    await db.commit()
    print(f"✅ Created {count} cashier sessions")
    return count


async def seed():
    await create_tables()
    async with AsyncSessionLocal() as db:
        await seed_sessions(db)
    print("\n🎉 Seed complete!\n")


if __name__ == "__main__":
    asyncio.run(seed())
