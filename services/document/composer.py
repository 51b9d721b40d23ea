"""Composition of canonical invoices into printable HTML documents.

The composer is pure: identical invoices produce byte-identical documents.
Every interpolated value is HTML-escaped here; URL fields are additionally
restricted to http(s) by the normalizer before they arrive.
"""

from decimal import Decimal
from html import escape

from pydantic import BaseModel, ConfigDict

from services.document.formatting import format_money, format_quantity, load_locale
from services.invoice.defaults import DEFAULT_PROFILE
from services.invoice.schema import Invoice, LineItem, OrganizationProfile

FONT_STYLESHEET_URL = (
    "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap"
)


class DocumentDescription(BaseModel):
    """Self-contained printable document (markup with embedded stylesheet).

    Attributes:
        title: Document title
        html: Complete HTML document handed to the rendering engine
    """

    model_config = ConfigDict(frozen=True)

    title: str
    html: str


STYLESHEET = """
    :root {
      --brand: %(brand_color)s;
      --ink-900: #0f172a; --ink-800: #0f172a; --ink-700: #1e293b; --ink-500: #475569;
      --border: #e2e8f0; --muted: #f8fafc;
      --pill: #ede9fe; --shadow: 0 16px 40px rgba(17, 24, 39, 0.08);
    }
    * { box-sizing: border-box; }
    body { margin: 0; background: radial-gradient(circle at 20%% 20%%, rgba(60,41,109,0.08), transparent 40%%), var(--muted); font-family: %(font_family)s; color: var(--ink-800); }
    @page { size: A4 portrait; margin: 18mm 16mm 20mm 16mm; }
    .sheet { background: #fff; border: 1px solid var(--border); border-radius: 18px; padding: 32px; box-shadow: var(--shadow); }
    header { display: flex; justify-content: space-between; align-items: flex-start; gap: 24px; }
    .logo-block { display: flex; flex-direction: column; gap: 8px; }
    .logo { height: 52px; }
    .meta { text-align: right; }
    .pill { display: inline-flex; align-items: center; gap: 8px; padding: 8px 12px; border-radius: 999px; background: var(--pill); color: var(--brand); font-weight: 600; text-transform: uppercase; letter-spacing: 0.04em; font-size: 12px; }
    h1 { margin: 12px 0 4px; font-size: 26px; color: var(--ink-900); }
    .meta table { font-size: 13px; color: var(--ink-500); width: 100%%; margin-top: 0; }
    .columns { display: grid; grid-template-columns: repeat(auto-fit, minmax(230px, 1fr)); gap: 20px; margin: 28px 0 12px; padding: 18px; background: linear-gradient(135deg, rgba(60,41,109,0.06), rgba(60,41,109,0.01)); border: 1px solid var(--border); border-radius: 14px; }
    .label { font-size: 12px; text-transform: uppercase; letter-spacing: 0.06em; color: var(--ink-500); margin-bottom: 6px; }
    .value { font-size: 14px; color: var(--ink-800); line-height: 1.5; white-space: pre-line; }
    table { width: 100%%; border-collapse: collapse; margin-top: 18px; }
    thead { display: table-header-group; }
    thead th { font-size: 11px; text-transform: uppercase; letter-spacing: 0.05em; text-align: left; color: var(--ink-500); padding-bottom: 10px; border-bottom: 2px solid var(--brand); }
    tbody tr { page-break-inside: avoid; break-inside: avoid; }
    tbody td { padding: 12px 0; border-bottom: 1px solid var(--border); vertical-align: top; color: var(--ink-700); }
    tbody tr:last-child td { border-bottom: none; }
    .qty, .price, .total { text-align: right; }
    .totals { margin-top: 26px; margin-left: auto; max-width: 320px; border-top: 2px solid var(--brand); padding-top: 14px; break-inside: avoid; }
    .total-row { display: flex; justify-content: space-between; margin: 6px 0; font-size: 14px; }
    .grand { font-weight: 700; font-size: 16px; color: var(--ink-900); }
    .notes { margin-top: 18px; padding: 14px 16px; background: var(--muted); border: 1px dashed var(--border); border-radius: 12px; color: var(--ink-700); white-space: pre-line; break-inside: avoid; }
    .pay { margin-top: 12px; font-size: 13px; color: var(--ink-700); line-height: 1.4; break-inside: avoid; }
    .qr { margin-top: 8px; height: 86px; }
"""


def _text(value: str | None) -> str:
    return escape(value or "", quote=True)


class DocumentComposer:
    """Maps canonical invoices to printable HTML documents."""

    def __init__(self, profile: OrganizationProfile = DEFAULT_PROFILE, locale: str = "en_GB") -> None:
        """Initialize composer.

        Args:
            profile: Organizational defaults (font family)
            locale: Locale identifier for money and quantity formatting

        Raises:
            babel.UnknownLocaleError: If the locale is unknown
        """
        self.profile = profile
        self.locale = load_locale(locale)

    def compose(self, invoice: Invoice) -> DocumentDescription:
        """Render the invoice into a self-contained HTML document.

        Args:
            invoice: Canonical invoice

        Returns:
            DocumentDescription for the rendering engine
        """
        title = f"Invoice {invoice.invoice_number}"
        stylesheet = STYLESHEET % {
            "brand_color": invoice.company.brand_color,
            "font_family": self.profile.brand.font_family,
        }

        body = "\n".join(
            section
            for section in (
                self._header(invoice),
                self._parties(invoice),
                self._items(invoice),
                self._totals(invoice),
                self._notes(invoice),
                self._payment(invoice),
            )
            if section
        )

        html = (
            "<!DOCTYPE html><html><head>\n"
            '  <meta charset="utf-8" />\n'
            f"  <title>{_text(title)}</title>\n"
            '  <link rel="preconnect" href="https://fonts.googleapis.com">\n'
            '  <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>\n'
            f'  <link href="{_text(FONT_STYLESHEET_URL)}" rel="stylesheet">\n'
            f"  <style>{stylesheet}  </style>\n"
            "</head><body>\n"
            '  <main class="sheet">\n'
            f"{body}\n"
            "  </main></body></html>"
        )
        return DocumentDescription(title=title, html=html)

    def _money(self, invoice: Invoice, amount: Decimal) -> str:
        return _text(format_money(amount, invoice.currency, self.locale))

    def _header(self, invoice: Invoice) -> str:
        company = invoice.company
        return f"""    <header>
      <div class="logo-block">
        <img class="logo" src="{_text(company.logo_url)}" alt="{_text(company.name)} logo" />
        <div class="pill">Invoice</div>
      </div>
      <div class="meta">
        <h1>Invoice {_text(invoice.invoice_number)}</h1>
        <table>
          <tr><td>Issue date:</td><td>{_text(invoice.issue_date)}</td></tr>
          <tr><td>Due date:</td><td>{_text(invoice.due_date)}</td></tr>
          <tr><td>Company No:</td><td>{_text(company.company_number)}</td></tr>
          <tr><td>VAT:</td><td>{_text(company.vat_number)}</td></tr>
        </table>
      </div>
    </header>"""

    def _parties(self, invoice: Invoice) -> str:
        company = invoice.company
        bill_to = invoice.bill_to
        sender = "<br/>".join(
            _text(line) for line in (company.name, company.address, company.email, company.website)
        )
        recipient = "<br/>".join(
            _text(line)
            for line in (bill_to.name, bill_to.company, bill_to.address, bill_to.email)
            if line
        )
        return f"""    <section class="columns">
      <div>
        <div class="label">From</div>
        <div class="value">{sender}</div>
      </div>
      <div>
        <div class="label">Bill To</div>
        <div class="value">{recipient}</div>
      </div>
    </section>"""

    def _item_row(self, invoice: Invoice, item: LineItem) -> str:
        return f"""        <tr style="page-break-inside: avoid;">
          <td>{_text(item.description)}</td>
          <td class="qty">{_text(format_quantity(item.qty, self.locale))}</td>
          <td class="price">{self._money(invoice, item.unit_price)}</td>
          <td class="total">{self._money(invoice, item.line_total)}</td>
        </tr>"""

    def _items(self, invoice: Invoice) -> str:
        rows = "\n".join(self._item_row(invoice, item) for item in invoice.line_items)
        return f"""    <table class="items">
      <thead><tr><th>Description</th><th class="qty">Qty</th><th class="price">Unit</th><th class="total">Line Total</th></tr></thead>
      <tbody>
{rows}
      </tbody>
    </table>"""

    def _totals(self, invoice: Invoice) -> str:
        totals = invoice.totals
        rows = [("Subtotal", self._money(invoice, totals.subtotal), "total-row")]
        if totals.tax:
            rows.append(("Tax", self._money(invoice, totals.tax), "total-row"))
        if totals.discount:
            rows.append(("Discount", self._money(invoice, -totals.discount), "total-row"))
        if totals.paid:
            rows.append(("Paid", self._money(invoice, totals.paid), "total-row"))
        rows.append(("Balance Due", self._money(invoice, totals.balance_due), "total-row grand"))

        lines = "\n".join(
            f'      <div class="{css}"><span>{label}</span><span>{amount}</span></div>'
            for label, amount, css in rows
        )
        return f'    <div class="totals">\n{lines}\n    </div>'

    def _notes(self, invoice: Invoice) -> str:
        if not invoice.notes:
            return ""
        return f'    <div class="notes">{_text(invoice.notes)}</div>'

    def _payment(self, invoice: Invoice) -> str:
        if not invoice.show_bank_details:
            return ""

        payment = invoice.payment
        qr = ""
        if payment.qr_image:
            qr = f'\n      <div><img class="qr" src="{_text(payment.qr_image)}" alt="Payment QR"/></div>'

        return f"""    <div class="pay">
      <strong>Payment details</strong><br/>
      Bank: {_text(payment.bank)}<br/>
      Account: {_text(payment.account_name)} · {_text(payment.sort_code)} · {_text(payment.account_number)}<br/>
      IBAN: {_text(payment.iban)} · SWIFT: {_text(payment.swift)}{qr}
    </div>"""
