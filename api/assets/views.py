"""
Asset endpoints: CRUD, assignment, valuation, search and batch provisioning.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from db_models.asset import AssetStatus, HardwareAsset, SoftwareAsset
from core.deps import CurrentIdentity
from api.users.db_manager import UserNotFoundError
from .models import (
    AssetAssign,
    AssetPage,
    AssetRead,
    AssetUpdate,
    AssetValuation,
    BatchHardwareRequest,
    BatchSoftwareRequest,
    HardwareAssetCreate,
    SoftwareAssetCreate,
    to_asset_read,
)
from .queries import AssetSearchCriteria
from . import db_manager

router = APIRouter(prefix="/assets", tags=["assets"])


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _conflict(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


def _page(items, total: int, page: int, size: int) -> AssetPage:
    return AssetPage(
        items=[to_asset_read(a) for a in items],
        total=total,
        page=page,
        size=size,
    )


@router.post(
    "/hardware",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a hardware asset",
)
async def create_hardware_endpoint(
    payload: HardwareAssetCreate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    try:
        asset = await db_manager.create_asset(
            db, HardwareAsset(**payload.model_dump()), actor=identity.username
        )
    except db_manager.DuplicateSerialNumberError as exc:
        raise _conflict(exc) from exc
    return to_asset_read(asset)


@router.post(
    "/software",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a software asset",
)
async def create_software_endpoint(
    payload: SoftwareAssetCreate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    asset = await db_manager.create_asset(
        db, SoftwareAsset(**payload.model_dump()), actor=identity.username
    )
    return to_asset_read(asset)


@router.get("", response_model=AssetPage, summary="List assets")
async def list_assets_endpoint(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    sort_by: str = "id",
    sort_dir: str = Query("asc", pattern="^(asc|desc|ASC|DESC)$"),
) -> AssetPage:
    """List non-disposed assets, one page at a time."""
    try:
        items, total = await db_manager.list_assets(db, page, size, sort_by, sort_dir)
    except db_manager.InvalidSortFieldError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _page(items, total, page, size)


@router.get("/search", response_model=AssetPage, summary="Search assets")
async def search_assets_endpoint(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
    query: str | None = None,
    asset_status: AssetStatus | None = Query(None, alias="status"),
    serial_number: str | None = None,
    assigned_to_user_id: int | None = None,
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    sort_by: str = "id",
    sort_dir: str = Query("asc", pattern="^(asc|desc|ASC|DESC)$"),
) -> AssetPage:
    """
    Search non-disposed assets.

    ``query`` matches name, serial number, license key or assignee username
    (case-insensitive). All given criteria must hold.
    """
    criteria = AssetSearchCriteria(
        query=query,
        status=asset_status,
        serial_number=serial_number,
        assigned_to_user_id=assigned_to_user_id,
    )
    try:
        items, total = await db_manager.search_assets(db, criteria, page, size, sort_by, sort_dir)
    except db_manager.InvalidSortFieldError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _page(items, total, page, size)


@router.post(
    "/batch/hardware",
    response_model=list[AssetRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a batch of hardware assets",
)
async def create_batch_hardware_endpoint(
    payload: BatchHardwareRequest,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    """Serial numbers are generated as <prefix>001, <prefix>002, ..."""
    template = payload.model_dump(exclude={"serial_number_prefix", "quantity"})
    try:
        assets = await db_manager.create_batch_hardware(
            db,
            template,
            quantity=payload.quantity,
            serial_prefix=payload.serial_number_prefix,
            actor=identity.username,
        )
    except db_manager.BatchCreationError as exc:
        raise _conflict(exc) from exc
    return [to_asset_read(a) for a in assets]


@router.post(
    "/batch/software",
    response_model=list[AssetRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a batch of software licences",
)
async def create_batch_software_endpoint(
    payload: BatchSoftwareRequest,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    template = payload.model_dump(exclude={"quantity"})
    try:
        assets = await db_manager.create_batch_software(
            db,
            template,
            quantity=payload.quantity,
            actor=identity.username,
        )
    except db_manager.BatchCreationError as exc:
        raise _conflict(exc) from exc
    return [to_asset_read(a) for a in assets]


@router.get("/{asset_id}", response_model=AssetRead, summary="Get asset by ID")
async def get_asset_endpoint(
    asset_id: int,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    try:
        asset = await db_manager.get_asset_or_raise(db, asset_id)
    except db_manager.AssetNotFoundError as exc:
        raise _not_found(exc) from exc
    return to_asset_read(asset)


@router.get(
    "/{asset_id}/value",
    response_model=AssetValuation,
    summary="Current depreciated value",
)
async def get_asset_value_endpoint(
    asset_id: int,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
) -> AssetValuation:
    try:
        value = await db_manager.calculate_asset_value(db, asset_id)
    except db_manager.AssetNotFoundError as exc:
        raise _not_found(exc) from exc
    return AssetValuation(asset_id=asset_id, current_value=value)


@router.put("/{asset_id}", response_model=AssetRead, summary="Update an asset")
async def update_asset_endpoint(
    asset_id: int,
    payload: AssetUpdate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    try:
        asset = await db_manager.update_asset(
            db, asset_id, payload.model_dump(exclude_unset=True), actor=identity.username
        )
    except db_manager.AssetNotFoundError as exc:
        raise _not_found(exc) from exc
    except db_manager.AssetConflictError as exc:
        raise _conflict(exc) from exc
    return to_asset_read(asset)


@router.delete(
    "/{asset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dispose of an asset",
)
async def delete_asset_endpoint(
    asset_id: int,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Soft delete: the asset is marked DISPOSED and hidden from listings."""
    try:
        await db_manager.delete_asset(db, asset_id, actor=identity.username)
    except db_manager.AssetNotFoundError as exc:
        raise _not_found(exc) from exc
    except db_manager.AssetConflictError as exc:
        raise _conflict(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{asset_id}/assign", response_model=AssetRead, summary="Assign an asset to a user")
async def assign_asset_endpoint(
    asset_id: int,
    payload: AssetAssign,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_session),
):
    try:
        asset = await db_manager.assign_asset(db, asset_id, payload.user_id, actor=identity.username)
    except (db_manager.AssetNotFoundError, UserNotFoundError) as exc:
        raise _not_found(exc) from exc
    except db_manager.AssetConflictError as exc:
        raise _conflict(exc) from exc
    return to_asset_read(asset)
