"""Database: declarative Base for the catalog and sale tables.

Invariants:
    - All models share one MetaData (Base.metadata), also read by Alembic
"""
