"""
SQLAlchemy query builders for assets.

Every builder here selects from ``asset_entity``, a polymorphic view of the
asset hierarchy that LEFT OUTER JOINs both variant tables, so hardware and
software rows come back as their own classes and variant columns can be
filtered on. Disposed assets are excluded unless a builder says otherwise.
"""
from dataclasses import dataclass

from sqlalchemy import select, func, or_, and_
from sqlalchemy.orm import with_polymorphic

from db_models.asset import (
    Asset,
    AssetStatus,
    AssetType,
    HardwareAsset,
    SoftwareAsset,
)
from db_models.user import User

asset_entity = with_polymorphic(Asset, [HardwareAsset, SoftwareAsset])

SORTABLE_FIELDS = {
    "id": asset_entity.id,
    "name": asset_entity.name,
    "purchase_price": asset_entity.purchase_price,
    "purchase_date": asset_entity.purchase_date,
    "status": asset_entity.status,
    "created_at": asset_entity.created_at,
}


@dataclass
class AssetSearchCriteria:
    """All-optional search criteria; unset fields are not filtered on."""
    query: str | None = None
    status: AssetStatus | None = None
    serial_number: str | None = None
    assigned_to_user_id: int | None = None


def not_disposed():
    return asset_entity.status != AssetStatus.DISPOSED.value


def _contains(column, text: str):
    return column.icontains(text, autoescape=True)


def build_search_conditions(criteria: AssetSearchCriteria) -> list:
    """
    Build the AND-list of predicates for ``criteria``.

    The free-text query matches name, hardware serial number, software
    license key or the assigned user's username. Serial and license
    predicates are guarded by the discriminator so each only applies to its
    own variant. The username predicate needs ``User`` outer-joined, which
    ``select_search_assets`` does.
    """
    conditions = []

    if criteria.query:
        conditions.append(
            or_(
                _contains(asset_entity.name, criteria.query),
                and_(
                    asset_entity.asset_type == AssetType.HARDWARE.value,
                    _contains(asset_entity.HardwareAsset.serial_number, criteria.query),
                ),
                and_(
                    asset_entity.asset_type == AssetType.SOFTWARE.value,
                    _contains(asset_entity.SoftwareAsset.license_key, criteria.query),
                ),
                _contains(User.username, criteria.query),
            )
        )

    if criteria.status is not None:
        conditions.append(asset_entity.status == AssetStatus(criteria.status).value)

    if criteria.serial_number:
        conditions.append(
            and_(
                asset_entity.asset_type == AssetType.HARDWARE.value,
                _contains(asset_entity.HardwareAsset.serial_number, criteria.serial_number),
            )
        )

    if criteria.assigned_to_user_id is not None:
        conditions.append(User.id == criteria.assigned_to_user_id)

    return conditions


def order_by_clause(sort_by: str = "id", sort_dir: str = "asc"):
    """Resolve a sort field name. Raises KeyError for unknown fields."""
    column = SORTABLE_FIELDS[sort_by]
    return column.desc() if sort_dir.lower() == "desc" else column.asc()


def select_visible_assets():
    """Select all non-disposed assets."""
    return select(asset_entity).where(not_disposed())


def select_asset_by_id(asset_id: int):
    """Select a non-disposed asset by its ID."""
    return (
        select(asset_entity)
        .where(asset_entity.id == asset_id, not_disposed())
        .execution_options(populate_existing=True)
    )


def select_assets_by_ids(asset_ids: list[int]):
    return (
        select(asset_entity)
        .where(asset_entity.id.in_(asset_ids))
        .order_by(asset_entity.id.asc())
        .execution_options(populate_existing=True)
    )


def select_search_assets(criteria: AssetSearchCriteria):
    """Select non-disposed assets matching ``criteria`` (unordered, unpaged)."""
    return (
        select(asset_entity)
        .outerjoin(User, asset_entity.assigned_to_id == User.id)
        .where(not_disposed(), *build_search_conditions(criteria))
    )


def paginate(stmt, page: int, size: int, sort_by: str, sort_dir: str):
    return stmt.order_by(order_by_clause(sort_by, sort_dir)).offset(page * size).limit(size)


def count_rows(stmt):
    """Count the rows ``stmt`` would return."""
    return select(func.count()).select_from(stmt.order_by(None).subquery())
