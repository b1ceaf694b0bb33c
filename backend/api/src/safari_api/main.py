"""FastAPI application for the safari booking REST API.

Serves availability, calendar selection and cancellation endpoints under
/api. Runs under uvicorn locally and behind API Gateway via Mangum.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from safari_api.exceptions import register_exception_handlers
from safari_api.middleware.correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from safari_api.models.common import PingResponse
from safari_api.routes.availability import router as availability_router
from safari_api.routes.cancellations import router as cancellations_router
from safari_shared import __version__
from safari_shared.config import Settings, get_settings
from safari_shared.utils.dates import utc_now
from safari_shared.utils.logging import configure_logging, get_logger


def init_logging(settings: Settings | None = None) -> None:
    """Configure root logging at the LOG_LEVEL from settings."""
    configure_logging((settings or get_settings()).log_level)


init_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Safari Booking API",
    description="Availability, date selection and cancellation refunds for safari properties",
    version=__version__,
)

# Configure CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# Include routers under /api prefix
app.include_router(availability_router, prefix="/api")
app.include_router(cancellations_router, prefix="/api")


@app.get("/api/ping", response_model=PingResponse, tags=["health"])
async def ping() -> PingResponse:
    """Health check endpoint."""
    return PingResponse(timestamp=utc_now().isoformat())


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "safari_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
