"""Initial schema: publishers, categories, publications, prices, media, sales.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "publishers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("tag_id", sa.Integer, nullable=True),
    )

    op.create_table(
        "categories",
        sa.Column("code", sa.String(20), primary_key=True),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("category_id", sa.Integer, nullable=True),
    )

    op.create_table(
        "publications",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("isbn", sa.String(20), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(500), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("subject_codes", sa.String(500), nullable=True),
        sa.Column("product_form_detail", sa.String(100), nullable=True),
        sa.Column("technical_protection", sa.String(10), nullable=True),
        sa.Column("product_id", sa.Integer, nullable=True, unique=True),
        sa.Column("updated", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("exchange_rate", sa.Float, nullable=True),
        sa.Column("publisher_id", sa.Integer, sa.ForeignKey("publishers.id"), nullable=True),
    )
    op.create_index("ix_publications_isbn", "publications", ["isbn"])
    op.create_index("ix_publications_product_id", "publications", ["product_id"])

    op.create_table(
        "prices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "publication_id", sa.String(64),
            sa.ForeignKey("publications.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("currency_code", sa.String(3), nullable=False),
        sa.Column("country_code", sa.String(2), nullable=True),
        sa.Column("price_type", sa.String(10), nullable=True),
        sa.Column("role", sa.SmallInteger, nullable=True),
        sa.Column("migrated", sa.Boolean, nullable=False, server_default=sa.false()),
    )

    op.create_table(
        "media",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "publication_id", sa.String(64),
            sa.ForeignKey("publications.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("path", sa.String(1000), nullable=False),
    )

    op.create_table(
        "sales",
        sa.Column("order_id", sa.String(64), primary_key=True),
        sa.Column("token", sa.String(100), nullable=False),
        sa.Column("customer", sa.String(255), nullable=False),
        sa.Column("sku", sa.String(20), nullable=False),
        sa.Column("format", sa.String(20), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("quantity", sa.SmallInteger, nullable=False, server_default="1"),
        sa.Column("downloaded", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_sales_token", "sales", ["token"], unique=True)


def downgrade() -> None:
    op.drop_table("sales")
    op.drop_table("media")
    op.drop_table("prices")
    op.drop_table("publications")
    op.drop_table("categories")
    op.drop_table("publishers")
