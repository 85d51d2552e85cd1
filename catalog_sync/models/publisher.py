"""Publisher ORM: shared reference data, mirrored as a storefront tag.

Invariants:
    - tag_id is null until the first tag creation, then never changes
    - Every publication of the publisher reuses the same tag_id
    - Navigation is one-way: Publication.publisher, never publisher to publications
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_sync.db.base import Base


class Publisher(Base):
    __tablename__ = "publishers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tag_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
