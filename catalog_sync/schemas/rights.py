"""Rights Service Contracts: sale requests and responses exchanged with the licensing service.

Invariants:
    - cost is an integer amount in minor units (cents)
    - RemoteResponse carries the raw status; interpreting it is the caller's job
"""

from pydantic import BaseModel, ConfigDict


class SaleRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    cost: int
    country: str | None = None
    format: str
    customer_id: str
    price_type: str | None = None
    protection: str
    currency: str
    sale_state: str
    transaction_id: str


class SaleSimulationQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: str
    cost: int
    protection: str
    country: str | None = None
    currency: str
    price_type: str | None = None


class RemoteResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str = ""


class PublicationMetadata(BaseModel):
    """Current catalog data for one ISBN as held by the rights service."""
    model_config = ConfigDict(frozen=True)

    isbn: str
    title: str
    author: str | None = None
    description: str | None = None
    price_amount: float
    currency: str
    country: str | None = None
    price_type: str | None = None
