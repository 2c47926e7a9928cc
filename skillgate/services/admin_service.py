"""
Admin Service - account approval and dashboard counts.
"""

import logging
from typing import Optional, List, Any

from skillgate.core.errors import NotFoundError, ValidationError
from skillgate.schemas.schemas import UserStatus
from skillgate.services.mongo_service import UserStore, public_user

logger = logging.getLogger(__name__)

# Admins are approved at creation and never show up in the approval queue
REVIEWABLE_ROLES = ["company", "student"]


class AdminService:
    def __init__(self, users: UserStore = None):
        self.users = users or UserStore()

    def stats(self) -> dict:
        pending_companies = self.users.count({"role": "company", "status": "pending"})
        pending_students = self.users.count({"role": "student", "status": "pending"})
        return {
            "totalCompanies": self.users.count({"role": "company"}),
            "totalStudents": self.users.count({"role": "student"}),
            "pendingApprovals": pending_companies + pending_students,
        }

    def list_pending(self, role: Optional[str] = None) -> List[dict]:
        roles = [role] if role else REVIEWABLE_ROLES
        return [public_user(u) for u in self.users.find_pending(roles)]

    def set_user_status(self, user_id: Any, status: str) -> str:
        try:
            status = UserStatus(status).value
        except ValueError:
            raise ValidationError(f"Unknown user status: {status}")

        if not self.users.get_by_id(user_id):
            raise NotFoundError("User not found")

        self.users.update(user_id, {"status": status})
        logger.info("User %s marked %s", user_id, status)
        return f"User {status} successfully"


def get_admin_service() -> AdminService:
    return AdminService()
