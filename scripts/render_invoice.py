#!/usr/bin/env python3
"""Render an invoice payload file without going through the HTTP API.

Runs the same pipeline as the service: normalize, compose, and (unless
``--html-only``) render through the configured rendering engine.

Usage:
    python scripts/render_invoice.py payload.json --output-dir out/
    python scripts/render_invoice.py payload.json --html-only --output-dir out/

Requirements:
    - Rendering engine reachable at APP_RENDERER_BASE_URL (PDF output only)
"""

import asyncio
import json
import logging
from pathlib import Path

from services.invoice.service import PreparedInvoice, create_invoice_service
from services.rendering.factory import create_renderer
from services.shared.config import Settings, get_settings

logger = logging.getLogger(__name__)


def prepare_from_file(payload_path: Path, settings: Settings) -> PreparedInvoice:
    """Load a JSON payload file and run normalization and composition.

    Raises:
        json.JSONDecodeError: If the file is not valid JSON
    """
    with open(payload_path, encoding="utf-8") as f:
        payload = json.load(f)
    return create_invoice_service(settings).prepare(payload)


async def render_to_file(prepared: PreparedInvoice, output_dir: Path, settings: Settings) -> Path:
    """Render the prepared invoice and write the PDF under its derived filename.

    Raises:
        RuntimeError: If the rendering engine fails
    """
    result = await create_renderer(settings).render(prepared.document)
    if not result.success or result.pdf is None:
        raise RuntimeError(f"Rendering failed: {result.error}")

    output_path = output_dir / prepared.filename
    output_path.write_bytes(result.pdf)
    return output_path


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Render an invoice payload to PDF")
    parser.add_argument("payload", type=Path, help="Path to the JSON invoice payload")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the generated files",
    )
    parser.add_argument(
        "--html-only",
        action="store_true",
        help="Write the composed HTML document and skip PDF rendering",
    )

    args = parser.parse_args()
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    prepared = prepare_from_file(args.payload, settings)
    args.output_dir.mkdir(parents=True, exist_ok=True)

    if args.html_only:
        html_path = args.output_dir / Path(prepared.filename).with_suffix(".html")
        html_path.write_text(prepared.document.html, encoding="utf-8")
        logger.info(f"Saved {html_path}")
    else:
        pdf_path = asyncio.run(render_to_file(prepared, args.output_dir, settings))
        logger.info(f"Saved {pdf_path}")
