"""Service layer for the reference checker API."""

from .check import CheckService

__all__ = ["CheckService"]
