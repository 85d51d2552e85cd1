"""Price ORM: the listed price of one publication.

Invariants:
    - migrated is True once the price was used in a storefront creation;
      after that only updates are allowed for the owning publication
    - role is the ONIX price role code; None or 14 needs no manual review
"""

from sqlalchemy import Boolean, Float, ForeignKey, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_sync.db.base import Base


class Price(Base):
    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    publication_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("publications.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    country_code: Mapped[str | None] = mapped_column(String(2), nullable=True)
    price_type: Mapped[str | None] = mapped_column(String(10), nullable=True)
    role: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    migrated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    publication: Mapped["Publication"] = relationship(
        "Publication", back_populates="price",
    )
