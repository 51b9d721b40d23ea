"""Selection of the PDF rendering engine named in settings."""

import logging

from services.rendering.base import PdfRenderer
from services.rendering.browserless import BrowserlessRenderer
from services.rendering.gotenberg import GotenbergRenderer
from services.shared.config import Settings

logger = logging.getLogger(__name__)


class RendererRegistry:
    """Engine name to adapter class; ``register`` adds engines at runtime."""

    _renderers: dict[str, type[PdfRenderer]] = {
        "gotenberg": GotenbergRenderer,
        "browserless": BrowserlessRenderer,
    }

    @classmethod
    def register(cls, name: str, renderer_class: type[PdfRenderer]) -> None:
        cls._renderers[name] = renderer_class
        logger.info(f"Registered PDF renderer: {name}")

    @classmethod
    def get_renderer_class(cls, name: str) -> type[PdfRenderer]:
        """Look up an adapter class.

        Raises:
            ValueError: If no engine is registered under ``name``
        """
        if name not in cls._renderers:
            available = ", ".join(cls._renderers.keys())
            raise ValueError(f"Unknown PDF renderer: '{name}'. Available renderers: {available}")
        return cls._renderers[name]

    @classmethod
    def list_renderers(cls) -> list[str]:
        return list(cls._renderers.keys())


def create_renderer(settings: Settings) -> PdfRenderer:
    """Build the adapter for ``settings.renderer_provider``.

    The adapter holds no connection; each ``render`` call opens its own
    client against ``settings.renderer_base_url``.

    Raises:
        ValueError: If the configured engine is unknown
    """
    renderer = RendererRegistry.get_renderer_class(settings.renderer_provider)(settings)
    logger.info(
        f"Created PDF renderer: {settings.renderer_provider} ({settings.renderer_base_url})"
    )
    return renderer
