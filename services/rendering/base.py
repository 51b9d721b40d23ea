"""Abstract base class for PDF rendering engines.

The rendering engine is an external headless browser reached over HTTP. Each
render opens its own client inside ``async with`` so the connection is released
on success, HTTP error and timeout alike.

Based on Strategy Pattern:
https://refactoring.guru/design-patterns/strategy/python
"""

import logging
from abc import ABC, abstractmethod

import httpx
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from services.document.composer import DocumentDescription
from services.rendering.page import A4_PORTRAIT, PageGeometry
from services.shared.config import Settings

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


class RenderResult(BaseModel):
    """Result of a render operation.

    Attributes:
        pdf: PDF bytes or None if rendering failed
        success: Whether operation succeeded
        error: Error message if operation failed (server-side diagnostics only)
        renderer: Name of the engine that performed the render
    """

    pdf: bytes | None = None
    success: bool
    error: str | None = None
    renderer: str


class PdfRenderer(ABC):
    """Base class for rendering engine adapters.

    Subclasses only describe the engine's request format; connection
    lifecycle, retries on transport errors and result validation live here.
    """

    def __init__(
        self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        """Initialize renderer with settings.

        Args:
            settings: Application settings
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.settings = settings
        self._transport = transport
        self._wait = wait_exponential_jitter(initial=0.5, max=5)

    @property
    @abstractmethod
    def renderer_name(self) -> str:
        """Get renderer name for logging/metrics."""
        pass

    @abstractmethod
    async def _send(
        self, client: httpx.AsyncClient, document: DocumentDescription, page: PageGeometry
    ) -> httpx.Response:
        """Submit the document to the engine and return its raw response."""
        pass

    async def render(
        self, document: DocumentDescription, page: PageGeometry = A4_PORTRAIT
    ) -> RenderResult:
        """Render a document to PDF bytes.

        Args:
            document: Composed document
            page: Page geometry (A4 portrait by default)

        Returns:
            RenderResult with PDF bytes or error
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.settings.renderer_base_url,
                timeout=self.settings.renderer_timeout_seconds,
                transport=self._transport,
            ) as client:
                async for attempt in AsyncRetrying(
                    retry=retry_if_exception_type(httpx.TransportError),
                    wait=self._wait,
                    stop=stop_after_attempt(self.settings.renderer_max_attempts),
                    reraise=True,
                ):
                    with attempt:
                        response = await self._send(client, document, page)

                response.raise_for_status()
                pdf = response.content

            if not pdf.startswith(PDF_MAGIC):
                logger.error(
                    f"{self.renderer_name} returned a non-PDF body ({len(pdf)} bytes)"
                )
                return RenderResult(
                    success=False,
                    error="Renderer returned a non-PDF body",
                    renderer=self.renderer_name,
                )

            return RenderResult(pdf=pdf, success=True, renderer=self.renderer_name)

        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.renderer_name} rejected render: HTTP {e.response.status_code} "
                f"{e.response.text[:200]}"
            )
            return RenderResult(
                success=False,
                error=f"Renderer returned HTTP {e.response.status_code}",
                renderer=self.renderer_name,
            )
        except httpx.TimeoutException as e:
            logger.error(f"{self.renderer_name} timed out: {e!r}")
            return RenderResult(
                success=False, error="Renderer timed out", renderer=self.renderer_name
            )
        except Exception as e:
            logger.error(f"{self.renderer_name} render failed: {e!r}", exc_info=True)
            return RenderResult(
                success=False,
                error=f"Render failed: {str(e)}",
                renderer=self.renderer_name,
            )
