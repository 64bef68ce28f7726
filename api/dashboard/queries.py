"""
SQLAlchemy query builders for dashboard statistics.

All figures cover non-disposed assets only.
"""
from datetime import date

from sqlalchemy import select, func, or_

from db_models.asset import Asset, AssetStatus, SoftwareAsset
from api.assets.queries import asset_entity, not_disposed


def count_visible_assets():
    """Count non-disposed assets."""
    return select(func.count(Asset.id)).where(Asset.status != AssetStatus.DISPOSED.value)


def sum_purchase_prices():
    """Sum of purchase prices (not depreciated values)."""
    return (
        select(func.coalesce(func.sum(Asset.purchase_price), 0))
        .where(Asset.status != AssetStatus.DISPOSED.value)
    )


def count_active_licenses(today: date):
    """Count software assets that are not disposed and not yet expired."""
    return (
        select(func.count(SoftwareAsset.id))
        .select_from(SoftwareAsset)
        .where(
            SoftwareAsset.status != AssetStatus.DISPOSED.value,
            or_(
                SoftwareAsset.expiry_date.is_(None),
                SoftwareAsset.expiry_date > today,
            ),
        )
    )


def count_assets_by_status(status: AssetStatus):
    """Count assets currently in ``status``."""
    return select(func.count(Asset.id)).where(Asset.status == status.value)


def select_recent_assets(limit: int = 5):
    """Select the most recently created assets, newest first."""
    return (
        select(asset_entity)
        .where(not_disposed())
        .order_by(asset_entity.created_at.desc(), asset_entity.id.desc())
        .limit(limit)
    )
