"""Services Layer: orchestration of the catalog store, storefront and rights service.

Invariants:
    - Every public operation owns exactly one transaction (StoreScope)
    - Services talk to the outside only through core/repository_protocols.py
    - Failures are logged with entity identifiers before they propagate
"""
