"""Category ORM: one subject code, mirrored as a storefront category.

Invariants:
    - code is the primary key: one category per distinct subject code
    - category_id is null until the storefront category exists
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_sync.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    code: Mapped[str] = mapped_column(String(20), primary_key=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
