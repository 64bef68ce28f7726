"""
Straight-line depreciation.

    annual = round_half_up((price - residual) / useful_life, 2)
    value  = max(price - annual * whole_years_used, residual)

Once the useful life is used up the asset is worth its residual value.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def whole_years_between(start: date, end: date) -> int:
    """Completed years from ``start`` to ``end``; partial years are dropped."""
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def calculate_current_value(asset, today: date | None = None) -> Decimal:
    """
    Current depreciated value of ``asset``.

    Returns zero when the price, useful life or purchase date is missing.
    A purchase date in the future counts as zero years of use.
    """
    if asset is None:
        return ZERO

    price = asset.purchase_price
    useful_life = asset.useful_life_years
    purchased_on = asset.purchase_date
    if price is None or useful_life is None or purchased_on is None:
        return ZERO

    price = _to_decimal(price)
    residual = _to_decimal(asset.residual_value) if asset.residual_value is not None else ZERO

    years_used = max(whole_years_between(purchased_on, today or date.today()), 0)
    if years_used >= useful_life:
        return residual

    annual = ((price - residual) / Decimal(useful_life)).quantize(CENT, rounding=ROUND_HALF_UP)
    current = price - annual * years_used
    return max(current, residual)
