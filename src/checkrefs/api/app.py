"""FastAPI application instance for the reference checker API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..logging_utils import configure_logging
from ..serialize import DeterministicSerializer
from . import __version__
from .routes import router as api_router

configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Check References API",
    description="Checks activity and article manifests against the files in a "
    "repository checkout and reports activity changes between two revisions.",
    version=__version__,
)

app.include_router(api_router)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Wrap failures the check service does not map in the error envelope."""
    logger.exception("Unhandled error", extra={"path": request.url.path})
    envelope = DeterministicSerializer().create_error_envelope(
        "INTERNAL_ERROR",
        f"{type(exc).__name__}: {exc}",
        {"path": request.url.path},
    )
    return JSONResponse(status_code=500, content=envelope)
