"""Browserless renderer using its ``/pdf`` API (Puppeteer page.pdf options).

See: https://docs.browserless.io/rest-apis/pdf
"""

from typing import Any

import httpx

from services.document.composer import DocumentDescription
from services.rendering.base import PdfRenderer
from services.rendering.page import PageGeometry

PDF_PATH = "/pdf"


class BrowserlessRenderer(PdfRenderer):
    """Posts the document inline as JSON; waits for fonts and images to settle."""

    @property
    def renderer_name(self) -> str:
        return "browserless"

    def build_payload(self, document: DocumentDescription, page: PageGeometry) -> dict[str, Any]:
        return {
            "html": document.html,
            "gotoOptions": {"waitUntil": "networkidle0"},
            "options": {
                "format": page.format,
                "printBackground": page.print_background,
                "preferCSSPageSize": page.prefer_css_page_size,
                "margin": {
                    "top": page.margins.top,
                    "right": page.margins.right,
                    "bottom": page.margins.bottom,
                    "left": page.margins.left,
                },
            },
        }

    async def _send(
        self, client: httpx.AsyncClient, document: DocumentDescription, page: PageGeometry
    ) -> httpx.Response:
        params = {"token": self.settings.renderer_api_token} if self.settings.renderer_api_token else None
        return await client.post(
            PDF_PATH, json=self.build_payload(document, page), params=params
        )
