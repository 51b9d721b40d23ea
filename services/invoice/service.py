"""Invoice document pipeline: payload -> invoice -> printable document."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from services.document.composer import DocumentComposer, DocumentDescription
from services.invoice.normalizer import InvoiceNormalizer
from services.invoice.sanitize import invoice_filename
from services.invoice.schema import Invoice
from services.shared.config import Settings


class PreparedInvoice(BaseModel):
    """Everything the transport layer needs before rendering.

    Attributes:
        invoice: Canonical invoice
        document: Printable document for the rendering engine
        filename: Download filename for the content-disposition header
    """

    model_config = ConfigDict(frozen=True)

    invoice: Invoice
    document: DocumentDescription
    filename: str


class InvoiceDocumentService:
    """Runs normalization and composition for a single request."""

    def __init__(self, normalizer: InvoiceNormalizer, composer: DocumentComposer) -> None:
        self.normalizer = normalizer
        self.composer = composer

    def prepare(self, raw: Any) -> PreparedInvoice:
        """Normalize a decoded payload and compose its document.

        Args:
            raw: Decoded JSON payload of arbitrary shape

        Returns:
            PreparedInvoice with invoice, document and download filename
        """
        invoice = self.normalizer.normalize(raw)
        return PreparedInvoice(
            invoice=invoice,
            document=self.composer.compose(invoice),
            filename=invoice_filename(invoice.invoice_number),
        )


def create_invoice_service(settings: Settings) -> InvoiceDocumentService:
    """Build the pipeline with the compiled-in organization profile.

    Args:
        settings: Application settings (document locale)

    Returns:
        Configured InvoiceDocumentService
    """
    return InvoiceDocumentService(
        normalizer=InvoiceNormalizer(),
        composer=DocumentComposer(locale=settings.document_locale),
    )
