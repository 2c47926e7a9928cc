"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from skillgate.api import api_router
    app.include_router(api_router, prefix="/api")
"""

from skillgate.api.routes import api_router

__all__ = ["api_router"]
