"""
Business logic for dashboard statistics.
"""
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from db_models.asset import Asset, AssetStatus
from . import queries

RECENT_ASSETS_LIMIT = 5


async def get_dashboard_stats(db: AsyncSession, today: date | None = None) -> dict:
    """
    Headline numbers for the dashboard.
    """
    today = today or date.today()

    result = await db.execute(queries.count_visible_assets())
    total_assets = result.scalar() or 0

    result = await db.execute(queries.sum_purchase_prices())
    total_value = Decimal(str(result.scalar() or 0)).quantize(Decimal("0.01"))

    result = await db.execute(queries.count_active_licenses(today))
    active_licenses = result.scalar() or 0

    result = await db.execute(queries.count_assets_by_status(AssetStatus.AVAILABLE))
    available_assets = result.scalar() or 0

    return {
        "total_assets": total_assets,
        "total_value": total_value,
        "active_licenses": active_licenses,
        "available_assets": available_assets,
    }


async def get_recent_assets(db: AsyncSession, limit: int = RECENT_ASSETS_LIMIT) -> list[Asset]:
    result = await db.execute(queries.select_recent_assets(limit))
    return list(result.scalars().all())
