"""Unit tests for invoice PDF API.

Tests cover:
- Health check endpoints
- JSON body validation
- PDF response headers
- Generic error on render failure
- CORS preflight
- Prometheus metrics endpoint
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from services.api.main import app
from services.rendering.base import RenderResult

PDF_BYTES = b"%PDF-1.7\n%test\n"
ENDPOINT = "/api/v1/invoices/pdf"


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


def rendered(pdf: bytes = PDF_BYTES) -> AsyncMock:
    return AsyncMock(return_value=RenderResult(pdf=pdf, success=True, renderer="gotenberg"))


def test_health_check(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "invoice-pdf-service"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness check endpoint."""
    response = client.get("/ready")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["ready"] is True


def test_generate_pdf(client: TestClient) -> None:
    """Valid payload returns the rendered PDF as an attachment."""
    with patch("services.api.main.renderer.render", new=rendered()) as mock_render:
        response = client.post(
            ENDPOINT,
            json={"invoiceNumber": "INV-7", "items": [{"description": "Design", "qty": 1}]},
        )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="invoice-INV-7.pdf"'
    assert response.content == PDF_BYTES

    document = mock_render.await_args.args[0]
    assert "Invoice INV-7" in document.html


def test_filename_is_sanitized(client: TestClient) -> None:
    """Header-breaking characters never reach content-disposition."""
    with patch("services.api.main.renderer.render", new=rendered()):
        response = client.post(ENDPOINT, json={"invoiceNumber": 'A"; x=1\\/..'})

    assert response.headers["content-disposition"] == 'attachment; filename="invoice-A___x_1__...pdf"'


@pytest.mark.parametrize("body", [b"not json", b"", b"{'single': 'quotes'}", b"\xff\xfe"])
def test_invalid_json(client: TestClient, body: bytes) -> None:
    """Unparseable bodies are a client error and never rendered."""
    with patch("services.api.main.renderer.render", new=rendered()) as mock_render:
        response = client.post(ENDPOINT, content=body, headers={"content-type": "application/json"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.text == "Invalid JSON body"
    mock_render.assert_not_awaited()


@pytest.mark.parametrize("payload", [b"[]", b"null", b"42", b'"text"'])
def test_non_object_json_is_degraded_not_rejected(client: TestClient, payload: bytes) -> None:
    """Valid JSON of the wrong shape still produces a draft invoice."""
    with patch("services.api.main.renderer.render", new=rendered()):
        response = client.post(ENDPOINT, content=payload)

    assert response.status_code == status.HTTP_200_OK
    assert 'filename="invoice-DRAFT.pdf"' in response.headers["content-disposition"]


@pytest.mark.parametrize(
    "body",
    [
        b'{"items": [{"qty": 1e26, "unitPrice": 1}]}',
        b'{"items": [{"qty": "1e26", "unitPrice": 1}]}',
        b'{"company": {"logoUrl": "http://xn--.com"}}',
        b'{"invoiceNumber": "A\\ud800"}',
    ],
)
def test_degraded_payload_is_rendered(client: TestClient, body: bytes) -> None:
    """Extreme or malformed field values still reach the renderer."""
    with patch("services.api.main.renderer.render", new=rendered()) as mock_render:
        response = client.post(ENDPOINT, content=body, headers={"content-type": "application/json"})

    assert response.status_code == status.HTTP_200_OK
    document = mock_render.await_args.args[0]
    assert document.html.encode("utf-8")


def test_render_failure_is_generic(client: TestClient) -> None:
    """Renderer diagnostics are logged, not returned."""
    failure = AsyncMock(
        return_value=RenderResult(
            success=False, error="Renderer returned HTTP 503: secret internals", renderer="gotenberg"
        )
    )
    with patch("services.api.main.renderer.render", new=failure):
        response = client.post(ENDPOINT, json={"items": []})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.text == "Failed to generate invoice"
    assert "secret" not in response.text


def test_method_not_allowed(client: TestClient) -> None:
    response = client.get(ENDPOINT)

    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


def test_cors_preflight(client: TestClient) -> None:
    response = client.options(
        ENDPOINT,
        headers={
            "Origin": "https://app.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_cors_header_on_pdf_response(client: TestClient) -> None:
    with patch("services.api.main.renderer.render", new=rendered()):
        response = client.post(ENDPOINT, json={}, headers={"Origin": "https://app.example.com"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_invoice_metrics_recorded(client: TestClient) -> None:
    """Test that invoice outcome counters are incremented."""
    from services.api import metrics

    initial_success = metrics.invoices_generated_total.labels(status="success")._value.get()
    initial_invalid = metrics.invoices_generated_total.labels(status="invalid_json")._value.get()

    with patch("services.api.main.renderer.render", new=rendered()):
        client.post(ENDPOINT, json={})
    client.post(ENDPOINT, content=b"{")

    assert metrics.invoices_generated_total.labels(status="success")._value.get() == initial_success + 1
    assert (
        metrics.invoices_generated_total.labels(status="invalid_json")._value.get()
        == initial_invalid + 1
    )


def test_metrics_endpoint(client: TestClient) -> None:
    """Test Prometheus metrics endpoint."""
    client.get("/health")
    response = client.get("/metrics")

    assert response.status_code == status.HTTP_200_OK
    content_type = response.headers["content-type"]
    assert "openmetrics-text" in content_type or "text/plain" in content_type
    assert "http_requests_total" in response.text
