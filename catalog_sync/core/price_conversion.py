"""Price Conversion: listed price to the storefront's settlement currency.

Invariants:
    - Native-currency amounts are returned unchanged
    - Foreign amounts are multiplied by the configured rate and rounded half-up to cents
    - Pure: same (amount, currency, rate) always yields the same value
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from catalog_sync.core.sync_config import SyncConfig

_CENT = Decimal("0.01")


def _checked(amount: float) -> float:
    if amount is None or isinstance(amount, bool) or not math.isfinite(amount):
        raise ValueError(f"Invalid price amount: {amount!r}")
    if amount < 0:
        raise ValueError(f"Negative price amount: {amount!r}")
    return float(amount)


def convert_price(amount: float, currency_code: str | None, config: SyncConfig) -> float:
    """Settlement-currency value of amount."""
    amount = _checked(amount)
    if config.is_native(currency_code):
        return amount
    # str() round-trip keeps the decimal the caller wrote (100 * 6.96, not 100 * 6.9599999...)
    converted = Decimal(str(amount)) * Decimal(str(config.exchange_rate))
    return float(converted.quantize(_CENT, rounding=ROUND_HALF_UP))


def format_price(value: float) -> str:
    """Storefront price string: 696.0 -> "696.0", 12.5 -> "12.5"."""
    return repr(float(value))


def to_minor_units(amount: float) -> int:
    """Amount in cents, as the rights service expects for cost fields."""
    return int((Decimal(str(_checked(amount))) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
