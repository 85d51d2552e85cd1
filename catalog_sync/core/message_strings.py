"""Message Strings: centralized locale-specific text shown to shoppers and operators.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every MessageKey has an entry for every Locale
    - Unknown locales fall back to Locale.ES (the storefront's language)

Design Decisions:
    - Keys are decoupled from error codes: several codes can share one message
"""

from enum import Enum

from catalog_sync.core.domain_types import Locale

DEFAULT_LOCALE = Locale.ES


class MessageKey(str, Enum):
    PRODUCT_NOT_FOUND = "product_not_found"
    SALE_NOT_FOUND = "sale_not_found"
    PRODUCT_DATA_UPDATED = "product_data_updated"
    SALE_NOT_REGISTERED = "sale_not_registered"
    SALE_ALREADY_REGISTERED = "sale_already_registered"
    DOWNLOAD_EXPIRED = "download_expired"
    DOWNLOAD_ALREADY_USED = "download_already_used"
    DOWNLOAD_URL_UNAVAILABLE = "download_url_unavailable"
    SIMULATION_REJECTED = "simulation_rejected"
    STOREFRONT_REJECTED = "storefront_rejected"
    SERVICE_UNAVAILABLE = "service_unavailable"
    SYNCHRONIZATION_FAILED = "synchronization_failed"
    REFERENCE_NOT_RECONCILED = "reference_not_reconciled"
    INVALID_PRODUCT_DATA = "invalid_product_data"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED = "unexpected"


_MESSAGES: dict[Locale, dict[MessageKey, str]] = {
    Locale.ES: {
        MessageKey.PRODUCT_NOT_FOUND: (
            "No se pudo encontrar el producto ingresado, por favor "
            "comuniquese con el administrador."
        ),
        MessageKey.SALE_NOT_FOUND: (
            "No se pudo encontrar el registro de venta activo, por favor "
            "comuniquese con el Administrador."
        ),
        MessageKey.PRODUCT_DATA_UPDATED: (
            "Los datos del producto fueron actualizados."
        ),
        MessageKey.SALE_NOT_REGISTERED: (
            "No se puede registrar la venta por favor comuniquese con la "
            "Administración."
        ),
        MessageKey.SALE_ALREADY_REGISTERED: (
            "La venta de este pedido ya fue registrada."
        ),
        MessageKey.DOWNLOAD_EXPIRED: "Tiempo expirado de descarga.",
        MessageKey.DOWNLOAD_ALREADY_USED: (
            "El enlace de descarga ya fue utilizado."
        ),
        MessageKey.DOWNLOAD_URL_UNAVAILABLE: (
            "No se pudo obtener la URL de descarga del producto, por favor "
            "comuniquese con el Administrador."
        ),
        MessageKey.SIMULATION_REJECTED: (
            "No se pudo validar la venta del producto, por favor "
            "comuniquese con el Administrador."
        ),
        MessageKey.STOREFRONT_REJECTED: (
            "La tienda rechazo la operacion sobre el producto."
        ),
        MessageKey.SERVICE_UNAVAILABLE: (
            "El servicio externo no esta disponible, intente nuevamente mas tarde."
        ),
        MessageKey.SYNCHRONIZATION_FAILED: (
            "Ocurrio un error en la sincronizacion de parametros."
        ),
        MessageKey.REFERENCE_NOT_RECONCILED: (
            "El producto hace referencia a una categoria o editorial no sincronizada."
        ),
        MessageKey.INVALID_PRODUCT_DATA: (
            "Los datos del producto no son validos, por favor comuniquese "
            "con el Administrador."
        ),
        MessageKey.STORAGE_UNAVAILABLE: (
            "La base de datos no esta disponible, intente nuevamente mas tarde."
        ),
        MessageKey.INVALID_REQUEST: "Los datos enviados no son validos.",
        MessageKey.UNEXPECTED: "Ocurrio un error inesperado.",
    },
    Locale.EN: {
        MessageKey.PRODUCT_NOT_FOUND: (
            "The requested product could not be found, please contact the "
            "administrator."
        ),
        MessageKey.SALE_NOT_FOUND: (
            "No active sale record was found, please contact the administrator."
        ),
        MessageKey.PRODUCT_DATA_UPDATED: "The product data was updated.",
        MessageKey.SALE_NOT_REGISTERED: (
            "The sale could not be registered, please contact the administrator."
        ),
        MessageKey.SALE_ALREADY_REGISTERED: (
            "The sale for this order was already registered."
        ),
        MessageKey.DOWNLOAD_EXPIRED: "The download window has expired.",
        MessageKey.DOWNLOAD_ALREADY_USED: (
            "The download link was already used."
        ),
        MessageKey.DOWNLOAD_URL_UNAVAILABLE: (
            "The download URL could not be obtained, please contact the "
            "administrator."
        ),
        MessageKey.SIMULATION_REJECTED: (
            "The sale could not be validated, please contact the administrator."
        ),
        MessageKey.STOREFRONT_REJECTED: (
            "The storefront rejected the product operation."
        ),
        MessageKey.SERVICE_UNAVAILABLE: (
            "An external service is unavailable, please try again later."
        ),
        MessageKey.SYNCHRONIZATION_FAILED: (
            "Synchronization of tags and categories failed."
        ),
        MessageKey.REFERENCE_NOT_RECONCILED: (
            "The product references a category or publisher that is not synchronized."
        ),
        MessageKey.INVALID_PRODUCT_DATA: (
            "The product data is invalid, please contact the administrator."
        ),
        MessageKey.STORAGE_UNAVAILABLE: (
            "The database is unavailable, please try again later."
        ),
        MessageKey.INVALID_REQUEST: "The request data is invalid.",
        MessageKey.UNEXPECTED: "An unexpected error occurred.",
    },
}


def resolve_locale(value: str | Locale | None) -> Locale:
    """Parse a locale code, falling back to DEFAULT_LOCALE."""
    if isinstance(value, Locale):
        return value
    try:
        return Locale((value or "").lower())
    except ValueError:
        return DEFAULT_LOCALE


def get_message(key: MessageKey, locale: str | Locale | None = None) -> str:
    """Localized text for key."""
    return _MESSAGES[resolve_locale(locale)][key]
