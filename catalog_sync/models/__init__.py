"""ORM Models: SQLAlchemy declarative models for catalog and sale entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Publication is the aggregate root for Price and Media
    - Publisher and Category are shared reference data, never owned

Design Decisions:
    - One file per entity
    - All models imported here so string-based relationship() references resolve
"""

from catalog_sync.models.publisher import Publisher  # noqa: F401
from catalog_sync.models.category import Category  # noqa: F401
from catalog_sync.models.price import Price  # noqa: F401
from catalog_sync.models.media import Media  # noqa: F401
from catalog_sync.models.publication import Publication  # noqa: F401
from catalog_sync.models.sale import Sale  # noqa: F401
