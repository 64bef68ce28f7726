"""
Business logic for the asset lifecycle: create, update, soft delete, assign,
search and batch provisioning.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from db_models.asset import Asset, AssetStatus, HardwareAsset, SoftwareAsset
from db_models.user import User
from api.users import db_manager as users_db
from . import queries
from .valuation import calculate_current_value

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"

# Fields a partial update may overwrite
UPDATABLE_FIELDS = (
    "name",
    "purchase_price",
    "purchase_date",
    "useful_life_years",
    "residual_value",
    "status",
)


class AssetNotFoundError(Exception):
    """Raised when an asset doesn't exist or has been disposed."""
    pass


class DuplicateSerialNumberError(Exception):
    """Raised when a hardware serial number is already in use."""
    pass


class AssetConflictError(Exception):
    """Raised when an asset was modified concurrently by another request."""
    pass


class BatchCreationError(Exception):
    """Raised when a batch fails; nothing from the batch was persisted."""
    pass


class InvalidSortFieldError(ValueError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _stamp_created(asset: Asset, actor: str | None) -> None:
    asset.created_by = actor or SYSTEM_ACTOR
    asset.created_at = _now()
    if asset.residual_value is None:
        asset.residual_value = Decimal("0")
    if asset.status is None:
        asset.status = AssetStatus.AVAILABLE.value
    elif isinstance(asset.status, AssetStatus):
        asset.status = asset.status.value


def _stamp_modified(asset: Asset, actor: str | None) -> None:
    asset.last_modified_by = actor or SYSTEM_ACTOR
    asset.last_modified_at = _now()


async def _reload(db: AsyncSession, asset_id: int) -> Asset:
    result = await db.execute(queries.select_assets_by_ids([asset_id]))
    return result.scalar_one()


async def get_asset_or_raise(db: AsyncSession, asset_id: int) -> Asset:
    """Get a non-disposed asset by ID. Raises AssetNotFoundError if not found."""
    result = await db.execute(queries.select_asset_by_id(asset_id))
    asset = result.scalar_one_or_none()
    if asset is None:
        raise AssetNotFoundError(f"Asset not found with id: {asset_id}")
    return asset


async def create_asset(db: AsyncSession, asset: Asset, actor: str | None = None) -> Asset:
    """
    Persist a new hardware or software asset.

    Raises:
        DuplicateSerialNumberError: If a hardware serial number is taken
    """
    _stamp_created(asset, actor)
    db.add(asset)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if isinstance(asset, HardwareAsset):
            raise DuplicateSerialNumberError(
                f"Serial number '{asset.serial_number}' is already in use"
            ) from exc
        raise

    logger.info("Created %s asset %s (%s) by %s", asset.asset_type, asset.id, asset.name, asset.created_by)
    return await _reload(db, asset.id)


async def _fetch_page(db: AsyncSession, stmt, page: int, size: int, sort_by: str, sort_dir: str):
    if sort_by not in queries.SORTABLE_FIELDS:
        raise InvalidSortFieldError(
            f"Cannot sort by '{sort_by}'. Must be one of: {sorted(queries.SORTABLE_FIELDS)}"
        )

    result = await db.execute(queries.count_rows(stmt))
    total = result.scalar() or 0

    result = await db.execute(queries.paginate(stmt, page, size, sort_by, sort_dir))
    items = list(result.scalars().all())
    return items, total


async def list_assets(
    db: AsyncSession,
    page: int = 0,
    size: int = 10,
    sort_by: str = "id",
    sort_dir: str = "asc",
) -> tuple[list[Asset], int]:
    """Return one page of non-disposed assets and the total count."""
    return await _fetch_page(db, queries.select_visible_assets(), page, size, sort_by, sort_dir)


async def search_assets(
    db: AsyncSession,
    criteria: queries.AssetSearchCriteria,
    page: int = 0,
    size: int = 10,
    sort_by: str = "id",
    sort_dir: str = "asc",
) -> tuple[list[Asset], int]:
    """Return one page of non-disposed assets matching ``criteria``."""
    stmt = queries.select_search_assets(criteria)
    return await _fetch_page(db, stmt, page, size, sort_by, sort_dir)


async def update_asset(
    db: AsyncSession,
    asset_id: int,
    changes: dict[str, Any],
    actor: str | None = None,
) -> Asset:
    """
    Apply a partial update.

    Only the fields in ``UPDATABLE_FIELDS`` are written and ``None`` values
    are skipped. Status is applied as given; there is no transition check.

    Raises:
        AssetNotFoundError: If the asset doesn't exist or is disposed
        AssetConflictError: If the asset changed underneath this update
    """
    asset = await get_asset_or_raise(db, asset_id)

    for field in UPDATABLE_FIELDS:
        value = changes.get(field)
        if value is None:
            continue
        if isinstance(value, AssetStatus):
            value = value.value
        setattr(asset, field, value)

    _stamp_modified(asset, actor)
    await _commit_or_conflict(db, asset_id)
    return await _reload(db, asset_id)


async def delete_asset(db: AsyncSession, asset_id: int, actor: str | None = None) -> None:
    """
    Soft delete: mark the asset DISPOSED. The row is kept but disappears from
    default lookups, so deleting it again raises AssetNotFoundError.
    """
    asset = await get_asset_or_raise(db, asset_id)
    asset.status = AssetStatus.DISPOSED.value
    _stamp_modified(asset, actor)
    await _commit_or_conflict(db, asset_id)
    logger.info("Asset %s disposed by %s", asset_id, asset.last_modified_by)


async def assign_asset(
    db: AsyncSession,
    asset_id: int,
    user_id: int,
    actor: str | None = None,
) -> Asset:
    """
    Assign an asset to a user and force its status to ASSIGNED, whatever the
    previous status was.

    Raises:
        AssetNotFoundError, UserNotFoundError
        AssetConflictError: If another request modified the asset first
    """
    asset = await get_asset_or_raise(db, asset_id)
    user = await users_db.get_user_or_raise(db, user_id)
    return await apply_assignment(db, asset, user, actor)


async def apply_assignment(
    db: AsyncSession,
    asset: Asset,
    user: User,
    actor: str | None = None,
) -> Asset:
    """
    Write an assignment onto an asset already loaded in ``db``.

    The UPDATE is guarded by the asset's version, so if the row changed after
    ``asset`` was read the write is rejected and nothing is stored.

    Raises:
        AssetConflictError: If the asset changed since it was loaded
    """
    asset_id = asset.id
    asset.assigned_to = user
    asset.status = AssetStatus.ASSIGNED.value
    _stamp_modified(asset, actor)
    await _commit_or_conflict(db, asset_id)

    logger.info("Asset %s assigned to user %s by %s", asset_id, user.username, asset.last_modified_by)
    return await _reload(db, asset_id)


async def _commit_or_conflict(db: AsyncSession, asset_id: int) -> None:
    try:
        await db.commit()
    except StaleDataError as exc:
        await db.rollback()
        raise AssetConflictError(
            f"Asset {asset_id} was modified by another request; reload and retry"
        ) from exc


async def calculate_asset_value(db: AsyncSession, asset_id: int) -> Decimal:
    asset = await get_asset_or_raise(db, asset_id)
    return calculate_current_value(asset)


async def _persist_batch(db: AsyncSession, assets: list[Asset], description: str) -> list[Asset]:
    """Flush every asset in one transaction; roll the whole batch back on any failure."""
    try:
        for asset in assets:
            db.add(asset)
            await db.flush()
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.warning("Batch %s rolled back: %s", description, exc.__class__.__name__)
        raise BatchCreationError(f"Batch {description} failed; no assets were created") from exc

    ids = [asset.id for asset in assets]
    logger.info("Batch %s created %d assets", description, len(ids))
    result = await db.execute(queries.select_assets_by_ids(ids))
    return list(result.scalars().all())


def format_serial_number(prefix: str, sequence: int) -> str:
    """``prefix`` followed by the sequence zero-padded to three digits."""
    return f"{prefix}{sequence:03d}"


async def create_batch_hardware(
    db: AsyncSession,
    template: dict[str, Any],
    quantity: int,
    serial_prefix: str,
    actor: str | None = None,
) -> list[HardwareAsset]:
    """
    Create ``quantity`` hardware assets sharing ``template``'s fields.

    Serial numbers run ``<prefix>001``, ``<prefix>002``, ... Either all
    assets are created or none are.

    Raises:
        BatchCreationError: If any asset fails to persist
    """
    assets = []
    for sequence in range(1, quantity + 1):
        asset = HardwareAsset(**template, serial_number=format_serial_number(serial_prefix, sequence))
        _stamp_created(asset, actor)
        assets.append(asset)
    return await _persist_batch(db, assets, f"hardware '{serial_prefix}' x{quantity}")


async def create_batch_software(
    db: AsyncSession,
    template: dict[str, Any],
    quantity: int,
    actor: str | None = None,
) -> list[SoftwareAsset]:
    """
    Create ``quantity`` software assets sharing ``template``'s fields,
    including one license key and expiry date for the whole batch.

    Raises:
        BatchCreationError: If any asset fails to persist
    """
    assets = []
    for _ in range(quantity):
        asset = SoftwareAsset(**template)
        _stamp_created(asset, actor)
        assets.append(asset)
    return await _persist_batch(db, assets, f"software x{quantity}")
