"""Synchronization Schemas: the batch run summary returned to operators."""

from pydantic import BaseModel


class FailedPublication(BaseModel):
    publication_id: str
    reason: str


class SynchronizationResponse(BaseModel):
    total: int
    created: int
    updated: int
    skipped: int
    error_count: int
    fully_synchronized: bool
    failed: list[FailedPublication] = []
