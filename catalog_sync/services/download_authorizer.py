"""Download Authorizer: exchanges a sale token for a one-time download URL.

Invariants:
    - Valid only while now <= created_at + download_window (boundary inclusive)
    - A downloaded sale never yields a second URL
    - downloaded flips to True only after the rights service answered 200 with a URL
    - One transaction per request: commit on success, rollback on any failure
    - Every log line names the sale token; the log formatter masks all but its prefix

Design Decisions:
    - The window check rejects expired tokens. The legacy guard rejected tokens
      still inside the window; that inverted check is not reproduced.
"""

import logging
from datetime import datetime
from typing import Callable

from catalog_sync.core.domain_types import RemoteService, SaleToken
from catalog_sync.core.errors import (
    CatalogSyncError, ErrorContext, RemoteRejectedError, ResourceNotFoundError,
    SaleAlreadyDownloadedError, SaleTokenExpiredError,
)
from catalog_sync.core.message_strings import MessageKey
from catalog_sync.core.repository_protocols import RightsService, StoreScope
from catalog_sync.core.sale_token import (
    download_deadline, is_within_download_window, mask_sale_token, utc_now,
)
from catalog_sync.core.sync_config import SyncConfig

logger = logging.getLogger(__name__)


class DownloadAuthorizer:

    def __init__(
        self,
        rights: RightsService,
        scope: StoreScope,
        config: SyncConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rights = rights
        self.scope = scope
        self.config = config
        self.clock = clock

    async def authorize_download(self, token: str, username: str) -> str:
        try:
            async with self.scope() as store:
                sale = await store.find_sale_by_token(SaleToken(token))
                if sale is None:
                    raise ResourceNotFoundError("Sale", mask_sale_token(token))
                context = ErrorContext(order_id=sale.order_id, isbn=sale.sku)

                if sale.downloaded:
                    raise SaleAlreadyDownloadedError(context)
                window = self.config.download_window
                if not is_within_download_window(sale.created_at, self.clock(), window):
                    raise SaleTokenExpiredError(
                        download_deadline(sale.created_at, window), context,
                    )

                response = await self.rights.get_download_url(
                    sale.customer, sale.order_id, sale.sku, sale.format, username,
                )
                url = response.body.strip()
                if response.status_code != 200 or not url:
                    raise RemoteRejectedError(
                        RemoteService.RIGHTS, "get_download_url", response.status_code,
                        MessageKey.DOWNLOAD_URL_UNAVAILABLE, context,
                    )

                sale.downloaded = True
                await store.persist(sale)
                logger.info(
                    f"Issued download URL for order {sale.order_id}",
                    extra={"sale_token": token, **context.as_log_extra()},
                )
                return url
        except CatalogSyncError as e:
            logger.error(
                f"Error on downloading a publication. {e.message}",
                extra={
                    "error_code": e.code, "sale_token": token,
                    **e.context.as_log_extra(),
                },
            )
            raise
