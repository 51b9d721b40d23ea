"""Normalization of raw invoice payloads into canonical ``Invoice`` records.

Normalization is best-effort: missing or malformed fields degrade to defaults
instead of rejecting the request, because a usable draft document is more
useful to the caller than an error.

Payloads arrive in either camelCase or snake_case. Each canonical field has an
ordered list of candidate keys and the first key holding a non-null value wins.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from services.invoice.defaults import DEFAULT_CURRENCY, DEFAULT_INVOICE_NUMBER, DEFAULT_PROFILE
from services.invoice.sanitize import sanitize_color, sanitize_currency, sanitize_url
from services.invoice.schema import (
    BillTo,
    Company,
    Invoice,
    LineItem,
    OrganizationProfile,
    Payment,
    Totals,
)

logger = logging.getLogger(__name__)

INVOICE_NUMBER_KEYS = ("invoiceNumber", "invoice_number")
ISSUE_DATE_KEYS = ("issueDate", "issue_date")
DUE_DATE_KEYS = ("dueDate", "due_date")
BILL_TO_KEYS = ("billTo", "bill_to")
ITEMS_KEYS = ("items", "lineItems", "line_items")
QTY_KEYS = ("qty", "quantity")
UNIT_PRICE_KEYS = ("unitPrice", "unit_price")
BALANCE_DUE_KEYS = ("balanceDue", "balance_due")
SHOW_BANK_DETAILS_KEYS = ("showBankDetails", "show_bank_details")

COMPANY_KEYS = {
    "name": ("name",),
    "company_number": ("companyNumber", "company_number"),
    "vat_number": ("vatNumber", "vat_number"),
    "address": ("address",),
    "domain": ("domain",),
    "email": ("email",),
    "website": ("website",),
    "logo_url": ("logoUrl", "logo_url"),
    "brand_color": ("brandColor", "brand_color"),
}

PAYMENT_KEYS = {
    "bank": ("bank",),
    "account_name": ("accountName", "account_name"),
    "sort_code": ("sortCode", "sort_code"),
    "account_number": ("accountNumber", "account_number"),
    "iban": ("iban",),
    "swift": ("swift",),
    "qr_image": ("qrImage", "qr_image"),
}

# Exponent capped so products of two coerced values stay inside the default
# decimal context.
_NUMERIC_STRING = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d{1,3})?$")

ZERO = Decimal(0)


def resolve(source: Mapping[str, Any], *names: str) -> Any:
    """Return the value of the first candidate key that is present and not null.

    Args:
        source: Payload mapping
        names: Candidate keys in priority order

    Returns:
        First non-null value, or None if no candidate is set
    """
    for name in names:
        value = source.get(name)
        if value is not None:
            return value
    return None


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def as_text(value: Any) -> str:
    """Coerce a payload scalar to display text.

    Strings pass through with characters that cannot be UTF-8 encoded (lone
    surrogates) replaced. Finite numbers use their shortest form. Anything
    else (booleans, containers, null) counts as absent and yields ``""``.
    """
    if isinstance(value, str):
        return value.encode("utf-8", "replace").decode("utf-8")
    if isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return ""
        return str(int(value)) if value.is_integer() else repr(value)
    return ""


def to_decimal(value: Any) -> Decimal:
    """Coerce a payload value to a finite Decimal; anything non-numeric is 0."""
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, Decimal):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        if not _NUMERIC_STRING.match(text):
            return ZERO
        number = Decimal(text)
    else:
        return ZERO
    return number if number.is_finite() else ZERO


class InvoiceNormalizer:
    """Resolves loosely-shaped payloads into complete, consistent invoices.

    Defaults for the issuer and bank blocks come from the injected
    ``OrganizationProfile``; payload values override them field by field.
    """

    def __init__(self, profile: OrganizationProfile = DEFAULT_PROFILE) -> None:
        """Initialize normalizer.

        Args:
            profile: Organizational defaults merged under payload overrides
        """
        self.profile = profile

    def normalize(self, raw: Any) -> Invoice:
        """Build the canonical invoice for a decoded JSON payload.

        Never raises: non-object payloads are treated as an empty object.

        Args:
            raw: Decoded JSON value of arbitrary shape

        Returns:
            Canonical Invoice
        """
        payload = as_mapping(raw)

        line_items = self._line_items(resolve(payload, *ITEMS_KEYS))
        show_bank_details = resolve(payload, *SHOW_BANK_DETAILS_KEYS)

        invoice = Invoice(
            invoice_number=as_text(resolve(payload, *INVOICE_NUMBER_KEYS))
            or DEFAULT_INVOICE_NUMBER,
            issue_date=as_text(resolve(payload, *ISSUE_DATE_KEYS)),
            due_date=as_text(resolve(payload, *DUE_DATE_KEYS)),
            currency=sanitize_currency(payload.get("currency")) or DEFAULT_CURRENCY,
            company=self._company(as_mapping(payload.get("company"))),
            bill_to=self._bill_to(as_mapping(resolve(payload, *BILL_TO_KEYS))),
            line_items=line_items,
            totals=self._totals(payload, line_items),
            notes=as_text(payload.get("notes")),
            payment=self._payment(as_mapping(payload.get("payment"))),
            show_bank_details=True if show_bank_details is None else bool(show_bank_details),
        )

        logger.debug(
            f"Normalized invoice {invoice.invoice_number} "
            f"({len(invoice.line_items)} items, balance {invoice.totals.balance_due})"
        )
        return invoice

    def _line_items(self, value: Any) -> tuple[LineItem, ...]:
        if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
            return ()

        items = []
        for entry in value:
            item = as_mapping(entry)
            items.append(
                LineItem(
                    description=as_text(item.get("description")),
                    qty=to_decimal(resolve(item, *QTY_KEYS)),
                    unit_price=to_decimal(resolve(item, *UNIT_PRICE_KEYS)),
                )
            )
        return tuple(items)

    def _totals(self, payload: Mapping[str, Any], line_items: Sequence[LineItem]) -> Totals:
        """Compute totals; the subtotal is never taken from the payload."""
        supplied = as_mapping(payload.get("totals"))

        subtotal = sum((item.line_total for item in line_items), ZERO)
        tax_value = supplied.get("tax")
        if tax_value is None:
            tax_value = payload.get("tax")
        tax = to_decimal(tax_value)
        discount = to_decimal(supplied.get("discount"))
        paid = to_decimal(supplied.get("paid"))

        explicit_balance = resolve(supplied, *BALANCE_DUE_KEYS)
        if explicit_balance is not None:
            balance_due = to_decimal(explicit_balance)
        else:
            balance_due = subtotal + tax - discount - paid

        return Totals(
            subtotal=subtotal,
            tax=tax,
            discount=discount,
            paid=paid,
            balance_due=balance_due,
        )

    def _company(self, overrides: Mapping[str, Any]) -> Company:
        defaults = self.profile.company
        brand = self.profile.brand

        def text(field: str, default: str) -> str:
            return as_text(resolve(overrides, *COMPANY_KEYS[field])) or default

        domain = text("domain", defaults.domain)
        logo_url = self._url(overrides, COMPANY_KEYS["logo_url"], "company.logoUrl")
        website = self._url(overrides, COMPANY_KEYS["website"], "company.website")
        brand_color = sanitize_color(resolve(overrides, *COMPANY_KEYS["brand_color"]))

        return Company(
            name=text("name", defaults.name),
            company_number=text("company_number", defaults.company_number),
            vat_number=text("vat_number", defaults.vat_number),
            address=text("address", defaults.address),
            domain=domain,
            email=text("email", f"accounts@{domain}"),
            website=website or f"https://{domain}",
            logo_url=logo_url or brand.logo_url,
            brand_color=brand_color or brand.color,
        )

    def _payment(self, overrides: Mapping[str, Any]) -> Payment:
        defaults = self.profile.bank

        def text(field: str, default: str) -> str:
            return as_text(resolve(overrides, *PAYMENT_KEYS[field])) or default

        return Payment(
            bank=text("bank", defaults.bank),
            account_name=text("account_name", defaults.account_name),
            sort_code=text("sort_code", defaults.sort_code),
            account_number=text("account_number", defaults.account_number),
            iban=text("iban", defaults.iban),
            swift=text("swift", defaults.swift),
            qr_image=self._url(overrides, PAYMENT_KEYS["qr_image"], "payment.qrImage"),
        )

    def _bill_to(self, source: Mapping[str, Any]) -> BillTo:
        def optional(name: str) -> str | None:
            return as_text(source.get(name)) or None

        return BillTo(
            name=optional("name"),
            company=optional("company"),
            address=optional("address"),
            email=optional("email"),
        )

    def _url(self, source: Mapping[str, Any], keys: tuple[str, ...], label: str) -> str:
        value = resolve(source, *keys)
        url = sanitize_url(value)
        if value is not None and not url:
            logger.warning(f"Rejected {label}: not an absolute http(s) URL")
        return url
