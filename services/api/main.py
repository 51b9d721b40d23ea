"""FastAPI application for invoice PDF generation.

Production-ready API with:
- Health and readiness checks for Kubernetes
- Best-effort invoice normalization (degraded input never fails)
- Async PDF rendering through an external headless browser
- Generic error responses that never leak renderer diagnostics
- Prometheus metrics for monitoring

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import json
import logging
import time

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from services.api import metrics
from services.invoice.service import create_invoice_service
from services.rendering.factory import create_renderer
from services.shared.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Invoice PDF Service",
    description="Generates branded invoice PDFs from JSON invoice descriptions",
    version=settings.service_version,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

invoice_service = create_invoice_service(settings)
renderer = create_renderer(settings)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    # Skip metrics for /metrics endpoint itself
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=request.url.path,
    ).observe(duration)

    return response


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Health check endpoint for liveness probe.

    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy", version=settings.service_version, service=settings.service_name
    )


@app.get("/ready", response_model=ReadinessResponse, tags=["Health"])
def readiness_check() -> ReadinessResponse:
    """Readiness check endpoint for Kubernetes readiness probe.

    Returns:
        Readiness status
    """
    return ReadinessResponse(ready=True)


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


@app.post("/api/v1/invoices/pdf", tags=["Invoices"])
async def generate_invoice_pdf(request: Request) -> Response:
    """Generate an invoice PDF from a JSON invoice description.

    The body is parsed as raw JSON rather than a typed model: any field may be
    missing or malformed and is resolved to a default instead of failing.

    ## Usage Example

    ```bash
    curl -X POST "http://localhost:8000/api/v1/invoices/pdf" \\
      -H "Content-Type: application/json" \\
      -d '{"items": [{"description": "Design", "qty": 2, "unitPrice": 150}]}' \\
      -o invoice.pdf
    ```

    ## Error Handling

    - Returns 400 if the body is not valid JSON
    - Returns 500 if the rendering engine fails or times out

    Returns:
        PDF attachment named ``invoice-<number>.pdf``
    """
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        metrics.invoices_generated_total.labels(status="invalid_json").inc()
        return PlainTextResponse("Invalid JSON body", status_code=status.HTTP_400_BAD_REQUEST)

    prepared = invoice_service.prepare(payload)

    render_start = time.time()
    result = await renderer.render(prepared.document)
    metrics.pdf_render_duration_seconds.labels(renderer=result.renderer).observe(
        time.time() - render_start
    )

    if not result.success or result.pdf is None:
        logger.error(
            f"invoice_render_error invoice={prepared.invoice.invoice_number} "
            f"renderer={result.renderer} error={result.error}"
        )
        metrics.invoices_generated_total.labels(status="render_failed").inc()
        return PlainTextResponse(
            "Failed to generate invoice", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    metrics.invoices_generated_total.labels(status="success").inc()
    metrics.pdf_size_bytes.observe(len(result.pdf))
    logger.info(
        f"Generated {prepared.filename} ({len(prepared.invoice.line_items)} items, "
        f"{len(result.pdf)} bytes)"
    )

    return Response(
        content=result.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{prepared.filename}"'},
    )
