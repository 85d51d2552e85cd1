"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - ProductId is the commerce platform's numeric product id
    - SaleToken is opaque to callers; only sale_token.py builds one
    - All closed sets of values are str Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PublicationId = NewType("PublicationId", str)
ProductId = NewType("ProductId", int)
RemoteTagId = NewType("RemoteTagId", int)
RemoteCategoryId = NewType("RemoteCategoryId", int)
SaleToken = NewType("SaleToken", str)
OrderId = NewType("OrderId", str)


# ─── Value Types ─────────────────────────────────────────────────

SubjectCode = NewType("SubjectCode", str)   # e.g. "FA", "YFB"


# ─── Constants ───────────────────────────────────────────────────

SUBJECT_CODE_SEPARATOR = "|"

# ONIX price role whose prices need no manual follow-up after creation
AUTOMATIC_PRICE_ROLE = 14


# ─── Enums ───────────────────────────────────────────────────────

class Locale(str, Enum):
    """Locales with user-facing message catalogs."""
    ES = "es"
    EN = "en"


class PublishOutcome(str, Enum):
    """What CatalogPublisher did with one publication."""
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


class ReferenceKind(str, Enum):
    """Reference data reconciled before product sync."""
    TAG = "tag"
    CATEGORY = "category"


class RemoteService(str, Enum):
    """External collaborators, used in error codes and logs."""
    COMMERCE = "commerce"
    RIGHTS = "rights"


def split_subject_codes(raw: str | None) -> list[SubjectCode]:
    """Split a pipe-delimited code list, dropping blanks. Order preserved."""
    if not raw:
        return []
    return [
        SubjectCode(code.strip())
        for code in raw.split(SUBJECT_CODE_SEPARATOR)
        if code.strip()
    ]


def distinct_subject_codes(raw_lists: list[str | None]) -> list[SubjectCode]:
    """Distinct codes across several pipe-delimited lists, first-seen order."""
    seen: dict[SubjectCode, None] = {}
    for raw in raw_lists:
        for code in split_subject_codes(raw):
            seen.setdefault(code, None)
    return list(seen)
