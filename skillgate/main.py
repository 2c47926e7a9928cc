"""
SkillGate Placement Portal - Main Application

FastAPI backend with:
- MongoDB for users, drives and applications
- JWT authentication with role and approval checks
- Campus drive catalog, application tracking and admin approvals

Run: uvicorn skillgate.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillgate.api.routes import api_router
from skillgate.core.config import get_settings
from skillgate.core.errors import register_exception_handlers
from skillgate.db.mongodb import init_mongo_indexes, test_mongo_connection
from skillgate.schemas.schemas import HealthResponse

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="SkillGate Placement Portal",
    description="""
    Campus recruitment portal.

    ## Features
    - **Authentication**: JWT-based auth for students, companies and admins
    - **Drives**: Companies post drives with CGPA cutoffs and screening tests
    - **Applications**: Students apply (eligibility checked), companies shortlist/select
    - **Admin**: Approve or reject pending accounts

    ## Database
    - MongoDB: users, drives, applications
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create MongoDB indexes on startup (uniqueness of emails and applications)."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "SkillGate Placement Portal", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Detailed health check."""
    return HealthResponse(
        status="healthy",
        mongodb="connected" if test_mongo_connection() else "disconnected"
    )
