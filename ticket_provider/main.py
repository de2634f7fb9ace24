"""Ticket provider FastAPI application."""
import logging
import os
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ticket_provider.api import health, interaction, provider
from ticket_provider.api.models import ErrorResponse
from ticket_provider.config import load_provider_config, load_service_port
from ticket_provider.core.logging import configure_logging
from ticket_provider.exceptions import TicketIssuanceError
from ticket_provider.interaction import (
    create_orchestrator,
    install_orchestrator,
    reset_orchestrator,
)

configure_logging()
log = logging.getLogger("ticket-provider")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    log.info("Starting ticket provider service...")

    # Missing config or unusable key material must stop startup
    try:
        config = load_provider_config()
        orchestrator = create_orchestrator(config)
    except Exception as e:
        log.error(f"Failed to initialize ticket provider: {e}")
        raise

    install_orchestrator(orchestrator)
    log.info(
        f"Ticket provider started: issuer={config.issuer} "
        f"checkers={len(orchestrator.registry)} order_status_url={config.order_status_url}"
    )

    yield

    log.info("Shutting down ticket provider service...")
    reset_orchestrator()
    log.info("Ticket provider service stopped")


app = FastAPI(
    title="DSNP Interaction Ticket Provider",
    version="0.1.0",
    description="Issues signed interaction tickets (verifiable credentials)",
    lifespan=lifespan,
)


@app.get("/version")
def version():
    """Return service version."""
    git_sha = os.getenv("GIT_SHA", "unknown")
    result = {"git_sha": git_sha}
    if git_sha != "unknown":
        result["short_sha"] = git_sha[:7]
    return result


# -----------------------------------------------------------------------------
# API Routers
# -----------------------------------------------------------------------------

app.include_router(health.router)
app.include_router(interaction.router)
app.include_router(provider.router)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Log all requests with timing and a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    start = time.time()
    response = await call_next(request)
    duration_ms = int((time.time() - start) * 1000)
    response.headers["X-Request-ID"] = request_id

    log.info(
        f"request_complete status={response.status_code} duration_ms={duration_ms}",
        extra={
            "request_id": request_id,
            "route": request.url.path,
            "method": request.method,
            "status": response.status_code,
        },
    )
    return response


# -----------------------------------------------------------------------------
# Ticket issuance failures
# -----------------------------------------------------------------------------

@app.exception_handler(TicketIssuanceError)
async def ticket_issuance_error_handler(request: Request, exc: TicketIssuanceError):
    """Report the coarse outcome class; keep the reason in the logs."""
    extra = {
        "request_id": getattr(request.state, "request_id", "-"),
        "route": request.url.path,
        "code": exc.code,
        "status": exc.status_code,
    }
    if exc.status_code >= 500:
        log.error(f"Ticket issuance failed: {exc.message}", extra=extra)
    else:
        log.warning(f"Ticket issuance refused: {exc.message}", extra=extra)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.outcome).model_dump(),
    )


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("ticket_provider.main:app", host="0.0.0.0", port=load_service_port())
