"""Commerce Payloads: product, tag and category bodies sent to the storefront.

Invariants:
    - regular_price is a string, formatted by core.price_conversion.format_price
    - Creation payloads always carry type="simple" and virtual=True
    - model_dump(exclude_none=True) is the exact JSON body sent
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ItemRef(BaseModel):
    """Reference to a storefront category or tag by id."""
    model_config = ConfigDict(frozen=True)

    id: int


class ImageRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str


class ProductUpdate(BaseModel):
    """Mutable fields of an existing storefront product."""
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    short_description: str | None = None
    name: str
    regular_price: str
    categories: tuple[ItemRef, ...] = ()
    tags: tuple[ItemRef, ...] = ()


class ProductCreate(ProductUpdate):
    """Full body for a new storefront product."""
    sku: str
    type: Literal["simple"] = "simple"
    virtual: bool = True
    images: tuple[ImageRef, ...] = ()


class NamedItem(BaseModel):
    """Body for tag and category creation."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
