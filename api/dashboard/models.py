from decimal import Decimal

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Headline asset figures."""
    total_assets: int
    total_value: Decimal
    active_licenses: int
    available_assets: int
