"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from skillgate.api.routes.auth_routes import router as auth_router
from skillgate.api.routes.drive_routes import router as drive_router
from skillgate.api.routes.application_routes import router as application_router
from skillgate.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(drive_router)
api_router.include_router(application_router)
api_router.include_router(admin_router)
