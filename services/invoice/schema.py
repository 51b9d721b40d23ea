"""Invoice data models.

The canonical ``Invoice`` is built once per request by the normalizer and is
immutable afterwards. Money and quantities are ``Decimal``.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Brand(BaseModel):
    """Visual identity applied to every document."""

    model_config = ConfigDict(frozen=True)

    color: str
    font_family: str
    logo_url: str


class CompanyDefaults(BaseModel):
    """Registered details of the issuing organization."""

    model_config = ConfigDict(frozen=True)

    name: str
    company_number: str
    vat_number: str
    address: str
    domain: str


class BankDefaults(BaseModel):
    """Bank account printed in the payment block."""

    model_config = ConfigDict(frozen=True)

    bank: str
    account_name: str
    sort_code: str
    account_number: str
    iban: str
    swift: str


class OrganizationProfile(BaseModel):
    """Compiled-in organizational defaults.

    Injected into the normalizer and composer rather than read from module
    globals, so each can be constructed with a different profile in tests.
    """

    model_config = ConfigDict(frozen=True)

    brand: Brand
    company: CompanyDefaults
    bank: BankDefaults


class Company(BaseModel):
    """Issuer block: profile defaults merged with payload overrides."""

    model_config = ConfigDict(frozen=True)

    name: str
    company_number: str
    vat_number: str
    address: str
    domain: str
    email: str
    website: str
    logo_url: str
    brand_color: str


class BillTo(BaseModel):
    """Recipient block, passed through from the payload without defaults."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    company: str | None = None
    address: str | None = None
    email: str | None = None


class LineItem(BaseModel):
    """Single invoice line."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    qty: Decimal = Decimal(0)
    unit_price: Decimal = Decimal(0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def line_total(self) -> Decimal:
        return self.qty * self.unit_price


class Totals(BaseModel):
    """Invoice totals.

    Attributes:
        subtotal: Sum of line totals, always recomputed
        tax: Tax amount
        discount: Discount amount (positive value, subtracted)
        paid: Amount already paid
        balance_due: Explicit payload value or subtotal + tax - discount - paid
    """

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal = Decimal(0)
    tax: Decimal = Decimal(0)
    discount: Decimal = Decimal(0)
    paid: Decimal = Decimal(0)
    balance_due: Decimal = Decimal(0)


class Payment(BaseModel):
    """Payment details: bank defaults merged with payload overrides."""

    model_config = ConfigDict(frozen=True)

    bank: str
    account_name: str
    sort_code: str
    account_number: str
    iban: str
    swift: str
    qr_image: str = ""


class Invoice(BaseModel):
    """Fully resolved, internally consistent invoice record."""

    model_config = ConfigDict(frozen=True)

    invoice_number: str = Field("DRAFT", description="Displayed invoice identifier")
    issue_date: str = Field("", description="Issue date, display string")
    due_date: str = Field("", description="Due date, display string")
    currency: str = Field("GBP", description="Currency code (ISO 4217)")
    company: Company
    bill_to: BillTo = Field(default_factory=BillTo)
    line_items: tuple[LineItem, ...] = ()
    totals: Totals = Field(default_factory=Totals)
    notes: str = ""
    payment: Payment
    show_bank_details: bool = True
