"""Integration tests for the invoice PDF pipeline.

End-to-end scenarios run through the HTTP API with the browserless adapter
talking to an httpx.MockTransport, so the full request path (JSON parsing,
normalization, composition, renderer request, response headers) is exercised.

The live rendering test requires:
- RENDERER_INTEGRATION_URL pointing at a running Gotenberg instance

It is skipped if RENDERER_INTEGRATION_URL is not set.
"""

import json
import os
from collections.abc import Generator
from decimal import Decimal
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from services.api.main import app, invoice_service
from services.invoice.defaults import DEFAULT_PROFILE
from services.rendering.browserless import BrowserlessRenderer
from services.rendering.gotenberg import GotenbergRenderer
from services.shared.config import Settings

PDF_BYTES = b"%PDF-1.7\n%integration\n"
ENDPOINT = "/api/v1/invoices/pdf"


class RenderCapture:
    """Records the HTML documents submitted to the rendering engine."""

    def __init__(self) -> None:
        self.documents: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.documents.append(json.loads(request.content)["html"])
        return httpx.Response(200, content=PDF_BYTES)

    @property
    def html(self) -> str:
        return self.documents[-1]


@pytest.fixture
def capture() -> RenderCapture:
    return RenderCapture()


@pytest.fixture
def client(capture: RenderCapture) -> Generator[TestClient, None, None]:
    """Test client whose renderer talks to a mock engine."""
    settings = Settings(_env_file=None, renderer_base_url="http://renderer.test")
    renderer = BrowserlessRenderer(settings, transport=httpx.MockTransport(capture.handler))
    with patch("services.api.main.renderer", renderer):
        yield TestClient(app)


def post(client: TestClient, payload: Any) -> httpx.Response:
    return client.post(ENDPOINT, json=payload)


def test_scenario_simple_invoice(client: TestClient, capture: RenderCapture) -> None:
    """Single line item in GBP."""
    payload = {"items": [{"description": "Design", "qty": 2, "unitPrice": 150}], "currency": "GBP"}

    response = post(client, payload)

    assert response.status_code == 200
    assert response.content == PDF_BYTES
    assert response.headers["content-disposition"] == 'attachment; filename="invoice-DRAFT.pdf"'

    invoice = invoice_service.prepare(payload).invoice
    assert invoice.totals.subtotal == Decimal(300)
    assert invoice.totals.balance_due == Decimal(300)
    assert "<span>Subtotal</span><span>£300.00</span>" in capture.html
    assert "<span>Balance Due</span><span>£300.00</span>" in capture.html


def test_scenario_non_numeric_quantity(client: TestClient, capture: RenderCapture) -> None:
    """Non-numeric qty contributes zero without failing the request."""
    payload = {
        "items": [
            {"description": "Broken", "qty": "abc", "unitPrice": 100},
            {"description": "Design", "qty": 2, "unitPrice": 150},
        ]
    }

    response = post(client, payload)

    assert response.status_code == 200
    assert invoice_service.prepare(payload).invoice.totals.subtotal == Decimal(300)
    assert "<td>Broken</td>" in capture.html
    assert '<td class="total">£0.00</td>' in capture.html


def test_scenario_javascript_logo(client: TestClient, capture: RenderCapture) -> None:
    """Unsafe logo URL falls back to the compiled-in brand logo."""
    payload = {"company": {"logoUrl": "javascript:alert(1)"}}

    response = post(client, payload)

    assert response.status_code == 200
    assert invoice_service.prepare(payload).invoice.company.logo_url == DEFAULT_PROFILE.brand.logo_url
    assert f'src="{DEFAULT_PROFILE.brand.logo_url}"' in capture.html
    assert "javascript:" not in capture.html


def test_scenario_overpayment(client: TestClient, capture: RenderCapture) -> None:
    """Paid above subtotal + tax yields a negative balance with a minus sign."""
    payload = {
        "items": [{"description": "Design", "qty": 1, "unitPrice": 100}],
        "totals": {"tax": 20, "paid": 170},
    }

    response = post(client, payload)

    assert response.status_code == 200
    assert invoice_service.prepare(payload).invoice.totals.balance_due == Decimal(-50)
    assert "<span>Balance Due</span><span>-£50.00</span>" in capture.html


def test_snake_case_payload(client: TestClient, capture: RenderCapture) -> None:
    """snake_case payloads render the same figures as camelCase ones."""
    response = post(
        client,
        {
            "invoice_number": "SC-1",
            "line_items": [{"description": "Hosting", "qty": 12, "unit_price": 10}],
            "bill_to": {"name": "Grace Hopper"},
            "show_bank_details": False,
        },
    )

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="invoice-SC-1.pdf"'
    assert "£120.00" in capture.html
    assert "Grace Hopper" in capture.html
    assert '<div class="pay">' not in capture.html


def test_engine_failure_is_generic() -> None:
    """Engine errors surface as a generic 500."""
    settings = Settings(_env_file=None, renderer_base_url="http://renderer.test")
    renderer = GotenbergRenderer(
        settings,
        transport=httpx.MockTransport(lambda request: httpx.Response(502, text="upstream trace")),
    )
    with patch("services.api.main.renderer", renderer):
        response = TestClient(app).post(ENDPOINT, json={})

    assert response.status_code == 500
    assert response.text == "Failed to generate invoice"


@pytest.mark.skipif(
    not os.getenv("RENDERER_INTEGRATION_URL"),
    reason="RENDERER_INTEGRATION_URL not set - skipping live renderer test",
)
@pytest.mark.asyncio
async def test_live_gotenberg_render() -> None:
    """Render a real PDF through a running Gotenberg instance."""
    settings = Settings(
        _env_file=None,
        renderer_provider="gotenberg",
        renderer_base_url=os.environ["RENDERER_INTEGRATION_URL"],
        renderer_timeout_seconds=60,
    )
    prepared = invoice_service.prepare(
        {"items": [{"description": f"Line {i}", "qty": 1, "unitPrice": 10} for i in range(60)]}
    )

    result = await GotenbergRenderer(settings).render(prepared.document)

    assert result.success is True
    assert result.pdf is not None
    assert result.pdf.startswith(b"%PDF")
