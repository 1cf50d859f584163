"""Environment loading for the GitHub Actions runtime."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
logger.debug("Environment variables loaded from .env if present")


def get_input(name: str, default: str = "") -> str:
    """Return an action input the way the runner exports it (INPUT_<NAME>)."""
    env_name = "INPUT_" + name.replace(" ", "_").upper()
    value = os.getenv(env_name, "").strip()
    return value or default


def get_workspace() -> Optional[str]:
    """Return the checked-out workspace root, if the runner set one."""
    workspace = os.getenv("GITHUB_WORKSPACE")
    if not workspace:
        logger.debug("GITHUB_WORKSPACE not configured")
        return None
    return workspace


def get_step_summary_path() -> Optional[str]:
    """Return the job summary file path, if the runner set one."""
    return os.getenv("GITHUB_STEP_SUMMARY") or None
