"""Pydantic Schemas: API contracts and outgoing payloads for remote services.

Invariants:
    - Outgoing payloads are frozen value objects, built once and never mutated
    - Request schemas validate at the system boundary

Design Decisions:
    - Separate from models: schemas are wire contracts, models are persistence
"""
