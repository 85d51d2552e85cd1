"""ONIX Codes: maps catalog metadata codes to the rights service's vocabulary.

Invariants:
    - primary_format() returns the first recognised product form detail code's format
    - protection_scheme() defaults to "none" for missing codes and raises for unknown ones
"""

from catalog_sync.core.domain_types import SUBJECT_CODE_SEPARATOR

# ONIX code list 175 (product form detail), digital formats only
_FORMATS: dict[str, str] = {
    "E101": "epub",
    "E107": "pdf",
    "E116": "mobi",
    "E127": "epub",     # EPUB3 fixed layout
    "A103": "mp3",
}

# ONIX code list 144 (e-publication technical protection)
_PROTECTIONS: dict[str, str] = {
    "00": "none",
    "01": "acs4",
    "02": "watermark",
    "03": "acs4",
}

DEFAULT_FORMAT = "epub"


def primary_format(product_form_detail: str | None) -> str:
    for code in (product_form_detail or "").split(SUBJECT_CODE_SEPARATOR):
        fmt = _FORMATS.get(code.strip().upper())
        if fmt:
            return fmt
    return DEFAULT_FORMAT


def protection_scheme(technical_protection: str | None) -> str:
    if not technical_protection:
        return "none"
    try:
        return _PROTECTIONS[technical_protection.strip()]
    except KeyError:
        raise ValueError(f"Unknown technical protection code: {technical_protection!r}")
