"""Service layer wrapping the CLI's check pipeline for the API."""

import logging
from typing import Any, Dict

from ...config import CheckConfig
from ...errors import CheckRefsError
from ...main import process_check
from ...serialize import DeterministicSerializer
from ..models import CheckRequest

logger = logging.getLogger(__name__)


class CheckService:
    """Runs a reference check and wraps the outcome in an envelope."""

    def process_check_request(self, request: CheckRequest) -> Dict[str, Any]:
        """Process a check request and return the JSON envelope."""
        logger.info(
            "Processing check request",
            extra={
                "workspace": request.workspace,
                "base": request.git_base_sha,
                "head": request.git_head_sha,
            },
        )
        serializer = DeterministicSerializer()

        try:
            config = CheckConfig(
                workspace=request.workspace,
                activities_csv=request.activities_csv,
                articles_csv=request.articles_csv,
                magic_tasks=tuple(request.magic_tasks),
                git_base_sha=request.git_base_sha,
                git_head_sha=request.git_head_sha,
            )
            result = process_check(config)

            serializer = DeterministicSerializer(config)
            payload = serializer.serialize_output(
                result.report, result.table_diff, result.file_diff, result.markdown
            )
            payload["notes"] = sorted(result.notes)

            logger.info(
                "Check finished",
                extra={"workspace": request.workspace, "failed": result.report.failed},
            )
            return serializer.create_success_envelope(payload)

        except CheckRefsError as exc:
            logger.warning(
                "Known check error",
                extra={"workspace": request.workspace, "code": exc.code},
            )
            return serializer.create_error_envelope(exc.code, exc.message, exc.details)

        except ValueError as exc:
            return serializer.create_error_envelope("CONFIGURATION_ERROR", str(exc))
