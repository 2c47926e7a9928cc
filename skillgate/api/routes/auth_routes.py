"""
Authentication Routes

POST /auth/register - Register new user (returns user + token)
POST /auth/login - Login and get JWT token
GET /auth/profile - Get current user's profile
PUT /auth/profile - Update current user's profile
"""

from fastapi import APIRouter, Depends

from skillgate.core.auth import get_current_user
from skillgate.services.auth_service import get_auth_service
from skillgate.schemas.schemas import (
    RegisterRequest, LoginRequest, AuthResponse, UserResponse, ProfileUpdate
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new account.

    Students and companies start as 'pending' until an admin approves them.
    """
    service = get_auth_service()
    return service.register(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    return get_auth_service().login(request.email, request.password)


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get current authenticated user's profile (without password)."""
    return get_auth_service().get_profile(user)


@router.put("/profile", response_model=AuthResponse)
async def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """
    Update own profile. Only provided fields change.

    Students: collegeId, branch, graduationYear, cgpa, skills, resume.
    Companies: companyDetails (merged with existing values).
    """
    patch = data.model_dump(by_alias=True, exclude_none=True)
    return get_auth_service().update_profile(user, patch)
