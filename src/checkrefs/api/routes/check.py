"""Check routes for the reference checker API."""

import logging
from typing import Any, Dict

from fastapi import APIRouter

from ..models import CheckRequest
from ..services import CheckService

router = APIRouter(tags=["check"])

logger = logging.getLogger(__name__)

check_service = CheckService()


@router.post("/check")
def run_check(request: CheckRequest) -> Dict[str, Any]:
    """Check a workspace's manifests and, given revisions, report activity changes."""
    logger.info("Received check request", extra={"workspace": request.workspace})
    return check_service.process_check_request(request)
