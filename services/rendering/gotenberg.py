"""Gotenberg renderer using its Chromium HTML route.

See: https://gotenberg.dev/docs/routes#html-file-into-pdf-route
"""

import httpx

from services.document.composer import DocumentDescription
from services.rendering.base import PdfRenderer
from services.rendering.page import PageGeometry

CONVERT_HTML_PATH = "/forms/chromium/convert/html"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class GotenbergRenderer(PdfRenderer):
    """Posts the document as ``index.html`` plus page options as form fields."""

    @property
    def renderer_name(self) -> str:
        return "gotenberg"

    def build_form(self, page: PageGeometry) -> dict[str, str]:
        """Translate page geometry into Gotenberg form fields."""
        return {
            "paperWidth": page.width,
            "paperHeight": page.height,
            "marginTop": page.margins.top,
            "marginRight": page.margins.right,
            "marginBottom": page.margins.bottom,
            "marginLeft": page.margins.left,
            "printBackground": _flag(page.print_background),
            "preferCssPageSize": _flag(page.prefer_css_page_size),
            "skipNetworkIdleEvent": "false",
        }

    async def _send(
        self, client: httpx.AsyncClient, document: DocumentDescription, page: PageGeometry
    ) -> httpx.Response:
        return await client.post(
            CONVERT_HTML_PATH,
            data=self.build_form(page),
            files={"files": ("index.html", document.html.encode("utf-8"), "text/html")},
        )
