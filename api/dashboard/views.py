"""
Dashboard endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import CurrentIdentity
from api.assets.models import AssetRead, to_asset_read
from .models import DashboardStats
from . import db_manager

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats, summary="Headline asset statistics")
async def get_stats_endpoint(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
) -> DashboardStats:
    """
    Totals over non-disposed assets: count, purchase value, active software
    licences and assets available for assignment.
    """
    stats = await db_manager.get_dashboard_stats(db)
    return DashboardStats(**stats)


@router.get("/recent", response_model=list[AssetRead], summary="Recently created assets")
async def get_recent_assets_endpoint(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    assets = await db_manager.get_recent_assets(db)
    return [to_asset_read(a) for a in assets]


# Same handlers under the asset paths older clients call.
# Must be included before the assets router so "/assets/{asset_id}" doesn't capture them.
assets_alias_router = APIRouter(prefix="/assets", tags=["dashboard"])
assets_alias_router.add_api_route(
    "/stats",
    get_stats_endpoint,
    methods=["GET"],
    response_model=DashboardStats,
    summary="Headline asset statistics (alias of /dashboard/stats)",
)
assets_alias_router.add_api_route(
    "/recent",
    get_recent_assets_endpoint,
    methods=["GET"],
    response_model=list[AssetRead],
    summary="Recently created assets (alias of /dashboard/recent)",
)
