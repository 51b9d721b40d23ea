"""Sanitization of externally supplied values.

URL fields end up in ``src`` attributes of the rendered document and the brand
colour ends up inside the stylesheet, so both are restricted to a safe subset
before they reach the composer.
"""

import re
from typing import Any

import httpx

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})
MAX_PORT = 65535

_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9_.\-]")
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_NAMED_COLOR = re.compile(r"^[A-Za-z]{3,32}$")
_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def sanitize_url(value: Any) -> str:
    """Return ``value`` as a normalized absolute http(s) URL, or ``""``.

    Args:
        value: Untrusted payload value

    Returns:
        Normalized URL string, empty if the value is not a string, cannot be
        parsed, has no valid host or port, or uses any scheme other than
        http/https
    """
    if not isinstance(value, str) or not value.strip():
        return ""

    try:
        url = httpx.URL(value.strip())
        if url.scheme not in ALLOWED_URL_SCHEMES or not url.host:
            return ""
        if "%" in url.host or (url.port is not None and url.port > MAX_PORT):
            return ""
        return str(url)
    except (httpx.InvalidURL, ValueError):
        return ""


def sanitize_filename(value: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_.-]`` with ``_``."""
    return _FILENAME_UNSAFE.sub("_", value)


def invoice_filename(invoice_number: str | None) -> str:
    """Derive the download filename for an invoice.

    Example:
        >>> invoice_filename("INV 2025/01")
        'invoice-INV_2025_01.pdf'
    """
    return f"invoice-{sanitize_filename(invoice_number or 'draft')}.pdf"


def sanitize_color(value: Any) -> str:
    """Accept a hex colour or a plain CSS colour keyword, else ``""``."""
    if not isinstance(value, str):
        return ""
    candidate = value.strip()
    if _HEX_COLOR.match(candidate) or _NAMED_COLOR.match(candidate):
        return candidate
    return ""


def sanitize_currency(value: Any) -> str:
    """Return an upper-cased three-letter currency code, else ``""``."""
    if not isinstance(value, str):
        return ""
    candidate = value.strip().upper()
    return candidate if _CURRENCY_CODE.match(candidate) else ""
