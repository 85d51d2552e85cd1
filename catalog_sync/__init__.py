"""Catalog Sync: pushes the publication catalog to the storefront and fulfills sales."""
