"""Media ORM: cover image of a publication."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_sync.db.base import Base


class Media(Base):
    __tablename__ = "media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    publication_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("publications.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    path: Mapped[str] = mapped_column(String(1000), nullable=False)

    publication: Mapped["Publication"] = relationship(
        "Publication", back_populates="media",
    )
