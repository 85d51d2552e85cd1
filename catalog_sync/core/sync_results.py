"""Sync Results: structured outcomes of reconciliation and batch publishing.

Invariants:
    - A publication appears in exactly one of published / skipped / failed
    - error_count == len(failed); fully_synchronized iff error_count == 0
    - Reports are plain data; logging and raising are the caller's decision
"""

from dataclasses import dataclass, field

from catalog_sync.core.domain_types import PublicationId, PublishOutcome, ReferenceKind


@dataclass
class ItemFailure:
    """One entity that could not be pushed, with the error that stopped it."""
    key: str
    error: Exception

    @property
    def reason(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass
class ReconciliationReport:
    tags_created: list[str] = field(default_factory=list)
    categories_created: list[str] = field(default_factory=list)
    unknown_codes: list[str] = field(default_factory=list)
    failed: list[tuple[ReferenceKind, ItemFailure]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failed


@dataclass
class SyncReport:
    published: dict[PublicationId, PublishOutcome] = field(default_factory=dict)
    skipped: list[PublicationId] = field(default_factory=list)
    failed: list[ItemFailure] = field(default_factory=list)

    def record(self, publication_id: PublicationId, outcome: PublishOutcome) -> None:
        if outcome is PublishOutcome.SKIPPED:
            self.skipped.append(publication_id)
        else:
            self.published[publication_id] = outcome

    @property
    def total(self) -> int:
        return len(self.published) + len(self.skipped) + len(self.failed)

    @property
    def error_count(self) -> int:
        return len(self.failed)

    @property
    def fully_synchronized(self) -> bool:
        return self.error_count == 0

    def summary(self) -> dict:
        """JSON-ready view for the API and logs."""
        return {
            "total": self.total,
            "created": sum(1 for o in self.published.values() if o is PublishOutcome.CREATED),
            "updated": sum(1 for o in self.published.values() if o is PublishOutcome.UPDATED),
            "skipped": len(self.skipped),
            "error_count": self.error_count,
            "fully_synchronized": self.fully_synchronized,
            "failed": [
                {"publication_id": f.key, "reason": f.reason} for f in self.failed
            ],
        }
