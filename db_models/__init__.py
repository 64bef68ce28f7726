# Importing the model modules registers every table on Base.metadata.
from db_models.user import User, UserRole
from db_models.asset import (
    Asset,
    AssetStatus,
    AssetType,
    HardwareAsset,
    SoftwareAsset,
)

__all__ = [
    "User",
    "UserRole",
    "Asset",
    "AssetStatus",
    "AssetType",
    "HardwareAsset",
    "SoftwareAsset",
]
