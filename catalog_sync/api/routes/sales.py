"""Sale Routes: simulation, registration and download of purchased publications."""

from fastapi import APIRouter, Depends, Query, status

from catalog_sync.api.dependencies import get_download_authorizer, get_sale_registrar
from catalog_sync.core.domain_types import ProductId
from catalog_sync.schemas.sales import (
    DownloadResponse, OrderRequest, SaleRegisteredResponse,
    SimulateSaleRequest, SimulateSaleResponse,
)
from catalog_sync.services.download_authorizer import DownloadAuthorizer
from catalog_sync.services.sale_registrar import SaleRegistrar

router = APIRouter(prefix="/api/v1", tags=["sales"])


@router.post("/sales/simulate", response_model=SimulateSaleResponse)
async def simulate_sale(
    body: SimulateSaleRequest,
    registrar: SaleRegistrar = Depends(get_sale_registrar),
):
    """Dry-run a sale. ok=False means the product was refreshed; show the new price."""
    simulation = await registrar.simulate_sale(ProductId(body.product_id), body.price)
    return SimulateSaleResponse(
        ok=simulation.ok,
        message=simulation.message,
        product_id=simulation.product_id,
        price=simulation.price,
    )


@router.post(
    "/sales", response_model=SaleRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_sale(
    body: OrderRequest,
    registrar: SaleRegistrar = Depends(get_sale_registrar),
):
    token = await registrar.register_sale(body)
    return SaleRegisteredResponse(token=token)


@router.get("/downloads/{token}", response_model=DownloadResponse)
async def download(
    token: str,
    username: str = Query(min_length=1, max_length=255),
    authorizer: DownloadAuthorizer = Depends(get_download_authorizer),
):
    url = await authorizer.authorize_download(token, username)
    return DownloadResponse(download_url=url)
