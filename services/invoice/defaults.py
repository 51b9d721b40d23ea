"""Compiled-in organizational defaults for issued invoices."""

from services.invoice.schema import BankDefaults, Brand, CompanyDefaults, OrganizationProfile

DEFAULT_CURRENCY = "GBP"
DEFAULT_INVOICE_NUMBER = "DRAFT"

DEFAULT_PROFILE = OrganizationProfile(
    brand=Brand(
        color="#3C296D",
        font_family="'Inter', 'Helvetica Neue', sans-serif",
        logo_url=(
            "https://228b0d41a70826a298630413a3775f84.cdn.bubble.io/cdn-cgi/image/"
            "w=96,h=52,f=auto,dpr=2,fit=contain/f1740613307556x552233112811189500/"
            "Create%20With_%E2%80%A8%20%285%29.png"
        ),
    ),
    company=CompanyDefaults(
        name="CREATE WITH LTD",
        company_number="15934640",
        vat_number="499197417",
        address="71-75 Shelton Street, London, England, WC2H 9JQ",
        domain="createwith.com",
    ),
    bank=BankDefaults(
        bank="Monzo",
        account_name="CREATE WITH LTD",
        sort_code="04-00-03",
        account_number="94728077",
        iban="GB93 MONZ 0400 0394 7280 77",
        swift="MONZGB2L",
    ),
)
