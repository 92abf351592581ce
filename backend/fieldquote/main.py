"""
Field Quote Engine API
FastAPI wrapper around the quote computation engine: service line items,
travel/call-out, PV installation economics, maintenance and wallbox offers.
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from fieldquote import config
from fieldquote.services.logging_config import setup_logging
from fieldquote.services.middleware import RequestTimingMiddleware

setup_logging(level=config.LOG_LEVEL, json_output=config.JSON_LOGS)
logger = logging.getLogger("fieldquote.api")

_PROCESS_START = time.monotonic()

app = FastAPI(
    title=config.API_TITLE,
    version=config.API_VERSION,
    description="Deterministic CHF quote computation for field-service offers.",
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Request-ID"],
)
# Outermost so the timing covers every other middleware
app.add_middleware(RequestTimingMiddleware)

# Routers
from fieldquote.api.catalog_routes import router as catalog_router  # noqa: E402
from fieldquote.api.quote_routes import router as quote_router  # noqa: E402

app.include_router(catalog_router)
app.include_router(quote_router)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": config.API_VERSION,
        "currency": config.CURRENCY,
        "uptime_seconds": round(time.monotonic() - _PROCESS_START, 1),
    }
