"""
Auth Service - registration, login and self-service profile edits.

The reserved admin login synthesizes a fixed identity without touching the
users collection. It is only active when ADMIN_PASSWORD is configured;
scripts/seed_admin.py provisions real admin accounts instead.
"""

import hmac
import logging
from typing import Optional, List, Union, Any, Dict

from email_validator import EmailNotValidError, validate_email

from skillgate.core.auth import admin_identity, hash_password, issue_token, verify_password, ADMIN_ID
from skillgate.core.config import Settings, get_settings
from skillgate.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from skillgate.services.mongo_service import UserStore, public_user

logger = logging.getLogger(__name__)

ROLES = ("student", "company", "admin")
STUDENT_FIELDS = ("collegeId", "branch", "graduationYear", "cgpa", "resume")
COMPANY_DETAIL_FIELDS = (
    "registrationNumber", "industryType", "companySize",
    "websiteUrl", "description", "contactPerson",
)


def normalize_skills(skills: Union[List[str], str, None]) -> List[str]:
    """Accept a list or a comma-delimited string; drop blanks, keep order."""
    if not skills:
        return []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [s.strip() for s in skills if s and s.strip()]


def normalize_email(email: str) -> str:
    """
    Canonical form used for storage and lookup (domain lowercased), the same
    normalization EmailStr applies at registration.
    """
    email = (email or "").strip()
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        return email


def with_token(user: dict) -> dict:
    return {**user, "token": issue_token(user)}


class AuthService:
    def __init__(self, users: UserStore = None, settings: Settings = None):
        self.users = users or UserStore()
        self.settings = settings or get_settings()

    def register(self, name: str, email: str, password: str, role: Optional[str] = None) -> dict:
        """
        Create an account. Admins are approved immediately, everyone else
        waits for an admin in 'pending'. Returns the user plus a token.
        """
        if not name or not email or not password:
            raise ValidationError("Please fill all fields")

        email = normalize_email(email)
        role = role or "student"
        if role not in ROLES:
            raise ValidationError(f"Invalid role: {role}")
        if self.users.get_by_email(email):
            raise ConflictError("User already exists")

        doc = {
            "name": name,
            "email": email,
            "password": hash_password(password),
            "role": role,
            "status": "approved" if role == "admin" else "pending",
        }
        if role == "student":
            doc.update({"skills": [], "profileCompleted": False})

        user = public_user(self.users.insert(doc))
        logger.info("Registered %s account %s (%s)", role, user["id"], user["status"])
        return with_token(user)

    def _is_reserved_admin(self, email: str, password: str) -> bool:
        if not self.settings.admin_bootstrap_enabled:
            return False
        return (
            hmac.compare_digest(email.encode(), normalize_email(self.settings.admin_email).encode())
            and hmac.compare_digest(password.encode(), self.settings.admin_password.encode())
        )

    def login(self, email: str, password: str) -> dict:
        email = normalize_email(email)
        if self._is_reserved_admin(email, password):
            logger.info("Reserved admin login")
            return with_token(admin_identity())

        doc = self.users.get_by_email(email)
        if not doc or not verify_password(password, doc.get("password")):
            logger.warning("Failed login for %s", email)
            raise AuthError("Invalid email or password", status_code=400)

        return with_token(public_user(doc))

    def get_profile(self, identity: dict) -> dict:
        if identity["id"] == ADMIN_ID:
            return admin_identity()
        doc = self.users.get_by_id(identity["id"])
        if not doc:
            raise NotFoundError("User not found")
        return public_user(doc)

    def update_profile(self, identity: dict, patch: Dict[str, Any]) -> dict:
        """
        Merge whitelisted fields into the caller's profile.

        Students: profile fields, and profileCompleted is set on every update.
        Companies: companyDetails is merged key by key, never replaced.
        """
        doc = self.users.get_by_id(identity["id"])
        if not doc:
            raise NotFoundError("User not found")

        updates: Dict[str, Any] = {}
        if patch.get("name"):
            updates["name"] = patch["name"]
        if patch.get("password"):
            updates["password"] = hash_password(patch["password"])

        if doc["role"] == "student":
            for field in STUDENT_FIELDS:
                if patch.get(field) is not None:
                    updates[field] = patch[field]
            if patch.get("skills") is not None:
                updates["skills"] = normalize_skills(patch["skills"])
            updates["profileCompleted"] = True

        if doc["role"] == "company" and patch.get("companyDetails"):
            merged = dict(doc.get("companyDetails") or {})
            for key, value in patch["companyDetails"].items():
                if key in COMPANY_DETAIL_FIELDS and value is not None:
                    merged[key] = value
            updates["companyDetails"] = merged

        updated = self.users.update(doc["_id"], updates) if updates else doc
        if not updated:
            raise NotFoundError("User not found")
        logger.info("Profile updated for %s (%s)", identity["id"], ", ".join(sorted(updates)) or "no changes")
        return with_token(public_user(updated))


def get_auth_service() -> AuthService:
    return AuthService()
