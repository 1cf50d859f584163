"""API route registration for the reference checker."""

from fastapi import APIRouter

from . import check, meta

router = APIRouter()
router.include_router(meta.router)
router.include_router(check.router)

__all__ = ["router"]
