"""Sale Tokens: opaque, time-bound credentials for one completed purchase.

Invariants:
    - Token layout is "<epoch-millis>-<uuid4>"; uniqueness rests on the uuid part
    - A sale is downloadable while now <= created_at + window (boundary inclusive)
    - Naive timestamps (as stored by SQLite) are read as UTC
    - Only mask_sale_token() output may reach logs or error messages
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from catalog_sync.core.domain_types import SaleToken


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_sale_token(now_ms: int, unique: UUID) -> SaleToken:
    return SaleToken(f"{now_ms}-{unique}")


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def download_deadline(created_at: datetime, window: timedelta) -> datetime:
    return as_utc(created_at) + window


def is_within_download_window(
    created_at: datetime, now: datetime, window: timedelta,
) -> bool:
    """True until the window elapses. Pure."""
    return as_utc(now) <= download_deadline(created_at, window)


def mask_sale_token(token: str) -> str:
    """Millisecond prefix only: the uuid part is the credential."""
    prefix, _, rest = str(token).partition("-")
    return f"{prefix}-***" if rest else "***"
