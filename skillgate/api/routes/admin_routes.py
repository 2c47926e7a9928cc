"""
Admin Routes

GET /admin/stats - Account counts for the dashboard
GET /admin/pending?role= - Accounts waiting for approval
PUT /admin/users/{user_id}/status - Approve or reject an account
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from skillgate.core.auth import get_current_admin
from skillgate.services.admin_service import get_admin_service
from skillgate.schemas.schemas import (
    AdminStatsResponse, MessageResponse, UserResponse, UserRole, UserStatusUpdate
)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(admin: dict = Depends(get_current_admin)):
    return get_admin_service().stats()


@router.get("/pending", response_model=List[UserResponse])
async def get_pending_users(
    role: Optional[UserRole] = Query(None, description="Only companies or only students"),
    admin: dict = Depends(get_current_admin)
):
    """Pending accounts, optionally filtered by role."""
    return get_admin_service().list_pending(role.value if role else None)


@router.put("/users/{user_id}/status", response_model=MessageResponse)
async def update_user_status(
    user_id: str,
    update: UserStatusUpdate,
    admin: dict = Depends(get_current_admin)
):
    """Approve or reject an account."""
    message = get_admin_service().set_user_status(user_id, update.status)
    return MessageResponse(message=message)
