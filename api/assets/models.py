"""
Pydantic models for asset endpoints.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from db_models.asset import AssetStatus, HardwareAsset, SoftwareAsset


# --- Requests ---

class AssetBase(BaseModel):
    """Fields shared by every asset variant."""
    name: str = Field(..., min_length=1, max_length=255)
    purchase_price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    purchase_date: date
    status: AssetStatus = AssetStatus.AVAILABLE
    residual_value: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    useful_life_years: int = Field(..., ge=1)


class HardwareAssetCreate(AssetBase):
    serial_number: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    warranty_end_date: date | None = None
    last_maintenance_date: date | None = None
    maintenance_interval_months: int | None = Field(default=None, ge=1)


class SoftwareAssetCreate(AssetBase):
    license_key: str = Field(..., min_length=1, max_length=255)
    expiry_date: date | None = None


class AssetUpdate(BaseModel):
    """Partial update. Omitted or null fields are left unchanged."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    purchase_price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    purchase_date: date | None = None
    useful_life_years: int | None = Field(default=None, ge=1)
    residual_value: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    status: AssetStatus | None = None


class AssetAssign(BaseModel):
    user_id: int


class BatchHardwareRequest(AssetBase):
    """Template for a hardware batch; serials are generated from the prefix."""
    location: str = Field(..., min_length=1, max_length=255)
    warranty_end_date: date | None = None
    serial_number_prefix: str = Field(..., min_length=1, max_length=90)
    quantity: int = Field(..., ge=1, le=1000)


class BatchSoftwareRequest(AssetBase):
    """Template for a software batch; every seat shares the license key."""
    license_key: str = Field(..., min_length=1, max_length=255)
    expiry_date: date | None = None
    quantity: int = Field(..., ge=1, le=1000)


# --- Responses ---

class AssignedUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    firstname: str
    lastname: str


class AssetReadBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    purchase_price: Decimal
    purchase_date: date
    status: AssetStatus
    residual_value: Decimal
    useful_life_years: int
    assigned_to: AssignedUser | None = None
    created_by: str
    created_at: datetime
    last_modified_by: str | None = None
    last_modified_at: datetime | None = None


class HardwareAssetRead(AssetReadBase):
    asset_type: Literal["HARDWARE"]
    serial_number: str
    location: str
    warranty_end_date: date | None = None
    last_maintenance_date: date | None = None
    maintenance_interval_months: int | None = None


class SoftwareAssetRead(AssetReadBase):
    asset_type: Literal["SOFTWARE"]
    license_key: str
    expiry_date: date | None = None


AssetRead = Annotated[
    Union[HardwareAssetRead, SoftwareAssetRead],
    Field(discriminator="asset_type"),
]


def to_asset_read(asset) -> HardwareAssetRead | SoftwareAssetRead:
    """Serialize an ORM asset with the response model of its variant."""
    if isinstance(asset, HardwareAsset):
        return HardwareAssetRead.model_validate(asset)
    if isinstance(asset, SoftwareAsset):
        return SoftwareAssetRead.model_validate(asset)
    raise TypeError(f"Unsupported asset type: {type(asset).__name__}")


class AssetPage(BaseModel):
    """One page of assets."""
    items: list[AssetRead]
    total: int
    page: int
    size: int


class AssetValuation(BaseModel):
    asset_id: int
    current_value: Decimal
