"""Sale ORM: one registered purchase and its download credential.

Invariants:
    - order_id is the primary key: one sale per storefront order
    - token is unique (DB constraint), generated by core.sale_token
    - downloaded flips False -> True exactly once; sales are never deleted
    - quantity is always 1 (one licence per order line)
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_sync.db.base import Base


class Sale(Base):
    __tablename__ = "sales"

    order_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    token: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True,
    )
    customer: Mapped[str] = mapped_column(String(255), nullable=False)
    sku: Mapped[str] = mapped_column(String(20), nullable=False)
    format: Mapped[str] = mapped_column(String(20), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=1,
    )
    downloaded: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
