"""Sale Schemas: request/response bodies for the sale and download endpoints."""

from pydantic import BaseModel, Field, field_validator


class SimulateSaleRequest(BaseModel):
    product_id: int = Field(gt=0)
    price: float | None = Field(None, ge=0)


class SimulateSaleResponse(BaseModel):
    ok: bool
    message: str
    product_id: int
    price: float


class OrderRequest(BaseModel):
    """Completed storefront order for one publication."""
    product_id: int = Field(gt=0)
    order_id: str = Field(min_length=1, max_length=64)
    username: str = Field(min_length=1, max_length=255)

    @field_validator("order_id", "username")
    @classmethod
    def strip_identifiers(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("identifier cannot be empty or whitespace")
        return v


class SaleRegisteredResponse(BaseModel):
    token: str


class DownloadResponse(BaseModel):
    download_url: str
