"""Publication ORM: a sellable digital title in the internal catalog.

Invariants:
    - product_id is null until the first successful storefront creation
    - product_id set implies price.migrated is True
    - Owns exactly one Price and at most one Media (cascade delete-orphan)
    - subject_codes and product_form_detail are pipe-delimited code lists

Design Decisions:
    - lazy="selectin" on every relationship: async sessions cannot lazy-load
"""

from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_sync.db.base import Base


class Publication(Base):
    """Catalog publication pushed to the storefront as one product."""
    __tablename__ = "publications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    subject_codes: Mapped[str | None] = mapped_column(
        String(500), nullable=True,
    )
    product_form_detail: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
    )
    technical_protection: Mapped[str | None] = mapped_column(
        String(10), nullable=True,
    )
    product_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, unique=True, index=True,
    )
    updated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    exchange_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    publisher_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("publishers.id"), nullable=True,
    )

    price: Mapped[Optional["Price"]] = relationship(
        "Price", back_populates="publication", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    media: Mapped[Optional["Media"]] = relationship(
        "Media", back_populates="publication", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    publisher: Mapped[Optional["Publisher"]] = relationship(
        "Publisher", lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"Publication(id={self.id!r}, isbn={self.isbn!r}, "
            f"product_id={self.product_id!r})"
        )
