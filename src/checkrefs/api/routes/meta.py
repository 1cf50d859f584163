"""Meta endpoints: workspace readiness and API capabilities."""

import logging
import os

from fastapi import APIRouter

from ... import settings
from ...main import ACTION_NAME
from ...vcs import GitRepository
from .. import __version__
from ..models import HealthResponse, VersionResponse

router = APIRouter(tags=["meta"])

logger = logging.getLogger(__name__)

DEFAULT_MANIFESTS = {
    "activities_csv": "./activities.csv",
    "articles_csv": "./articles.csv",
}


def _manifest_status(workspace: str) -> dict:
    """Map each configured manifest path to whether it exists in ``workspace``."""
    status = {}
    for name, default in DEFAULT_MANIFESTS.items():
        path = settings.get_input(name, default)
        status[path] = os.path.isfile(os.path.join(workspace, path))
    return status


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Report whether the configured workspace can be checked.

    Without ``GITHUB_WORKSPACE`` the service only accepts explicit
    workspaces on ``POST /check`` and reports healthy.
    """
    workspace = settings.get_workspace()
    if not workspace:
        return HealthResponse(status="healthy", version=__version__)

    root = os.path.abspath(workspace)
    is_checkout = GitRepository(root).is_checkout()
    manifests = _manifest_status(root)
    status = "healthy" if is_checkout and all(manifests.values()) else "degraded"
    logger.info(
        "Health check invoked",
        extra={"workspace": root, "is_checkout": is_checkout, "status": status},
    )
    return HealthResponse(
        status=status,
        version=__version__,
        workspace=root,
        workspace_is_checkout=is_checkout,
        manifests=manifests,
    )


@router.get("/version", response_model=VersionResponse)
def version_info() -> VersionResponse:
    return VersionResponse(version=__version__, api_version="v1")


@router.get("/", include_in_schema=False)
def root() -> dict:
    return {
        "name": ACTION_NAME,
        "version": __version__,
        "endpoints": {
            "check": "POST /check",
            "health": "GET /health",
            "version": "GET /version",
        },
    }
