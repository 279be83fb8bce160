"""Manuals API package.

This package contains all manual-related API endpoints organized by domain:
- manual_routes: Manual CRUD and listings
- step_routes: Step creation, editing, deletion and reordering
- image_routes: Step image upload and deletion
"""

from fastapi import APIRouter

from guideforge.api.v1.manuals.image_routes import router as image_router
from guideforge.api.v1.manuals.manual_routes import router as manual_router
from guideforge.api.v1.manuals.step_routes import router as step_router

# Create a combined router for all manual-related endpoints
router = APIRouter()

router.include_router(manual_router)
router.include_router(step_router)
router.include_router(image_router)

__all__ = ["router"]
