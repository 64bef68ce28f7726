# db_models/asset.py
"""
Asset models.

Assets use joined-table inheritance: common columns live in ``assets`` and
each variant adds its own table keyed on the same id. ``asset_type`` is the
discriminator that tells hardware rows from software rows.

Deletion is soft. A deleted asset keeps its row with status DISPOSED and is
filtered out of every default query (see ``api/assets/queries.py``).
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    Date,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db_base import Base
from db_models.user import User


class AssetStatus(str, Enum):
    """Lifecycle states of an asset."""
    AVAILABLE = "AVAILABLE"
    ASSIGNED = "ASSIGNED"
    BROKEN = "BROKEN"
    REPAIRING = "REPAIRING"
    DISPOSED = "DISPOSED"


class AssetType(str, Enum):
    HARDWARE = "HARDWARE"
    SOFTWARE = "SOFTWARE"


class Asset(Base):
    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint("purchase_price > 0", name="ck_assets_purchase_price_positive"),
        CheckConstraint("useful_life_years >= 1", name="ck_assets_useful_life_min"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    asset_type: Mapped[str] = mapped_column(String(20), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    purchase_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssetStatus.AVAILABLE.value,
        index=True,
    )

    residual_value: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
    )
    useful_life_years: Mapped[int] = mapped_column(Integer, nullable=False)

    # Non-owning reference; many assets may point at one user
    assigned_to_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    assigned_to: Mapped[User | None] = relationship(User, lazy="selectin")

    # Audit fields. created_* are written once by the lifecycle service.
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_modified_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_modified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Optimistic lock counter, bumped by SQLAlchemy on every UPDATE
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {
        "polymorphic_on": asset_type,
        "version_id_col": version_id,
    }


class HardwareAsset(Asset):
    __tablename__ = "hardware_assets"
    __table_args__ = (
        CheckConstraint(
            "maintenance_interval_months IS NULL OR maintenance_interval_months >= 1",
            name="ck_hardware_maintenance_interval_min",
        ),
    )

    id: Mapped[int] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"),
        primary_key=True,
    )

    serial_number: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    warranty_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    last_maintenance_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    maintenance_interval_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __mapper_args__ = {"polymorphic_identity": AssetType.HARDWARE.value}


class SoftwareAsset(Asset):
    __tablename__ = "software_assets"

    id: Mapped[int] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Not unique: volume licences share one key across a batch
    license_key: Mapped[str] = mapped_column(String(255), nullable=False)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __mapper_args__ = {"polymorphic_identity": AssetType.SOFTWARE.value}
