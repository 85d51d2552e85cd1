"""Sync Configuration: the explicit settings every catalog/sale component receives.

Invariants:
    - Immutable once built; components never read settings from module globals
    - exchange_rate > 0, download_window > 0
"""

from dataclasses import dataclass
from datetime import timedelta

from catalog_sync.core.domain_types import Locale


@dataclass(frozen=True)
class SyncConfig:
    """Externally supplied values consumed by the core."""
    exchange_rate: float = 6.96
    sale_state: str = "test"
    native_currency: str = "BOB"
    download_window: timedelta = timedelta(minutes=5)
    locale: Locale = Locale.ES

    def __post_init__(self):
        if not self.exchange_rate > 0:
            raise ValueError(f"exchange_rate must be positive, got {self.exchange_rate}")
        if self.download_window <= timedelta(0):
            raise ValueError("download_window must be positive")

    def is_native(self, currency_code: str | None) -> bool:
        return (currency_code or "").upper() == self.native_currency.upper()
