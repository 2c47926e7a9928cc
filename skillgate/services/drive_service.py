"""
Drive Service - the drive catalog.

Companies post drives (job postings with an eligibility cutoff and an
optional screening test). Students see only active drives whose deadline
has not passed. companyName is copied from the company at creation time and
is not refreshed if the company later renames itself.
"""

import logging
from datetime import datetime
from typing import Optional, List, Any, Dict

from bson import ObjectId

from skillgate.core.config import Settings, get_settings
from skillgate.core.errors import ForbiddenError, NotFoundError, ValidationError
from skillgate.services.auth_service import normalize_skills
from skillgate.services.mongo_service import (
    ApplicationStore, DriveStore, parse_object_id, serialize_doc, to_naive_utc, utcnow
)

logger = logging.getLogger(__name__)

REQUIRED_DRIVE_FIELDS = ("title", "description", "batchYear", "cgpaCutoff", "salary", "deadline")
DEFAULT_DURATION = 60


def caller_owns(drive: dict, caller: dict) -> bool:
    """True when the drive was posted by the calling company."""
    return str(drive.get("companyId")) == str(caller.get("id"))


def serialize_question(question: dict) -> dict:
    item = {k: v for k, v in question.items() if k != "_id"}
    item["id"] = str(question["_id"])
    return item


def serialize_drive(drive: dict) -> dict:
    """serialize_doc plus question ids (questions are subdocuments with their own _id)."""
    item = serialize_doc(drive)
    item["questions"] = [serialize_question(q) for q in drive.get("questions") or []]
    return item


def question_ids(drive: dict) -> set:
    return {str(q["_id"]) for q in drive.get("questions") or []}


class DriveService:
    def __init__(
        self,
        drives: DriveStore = None,
        applications: ApplicationStore = None,
        settings: Settings = None,
    ):
        self.drives = drives or DriveStore()
        self.applications = applications or ApplicationStore()
        self.settings = settings or get_settings()

    def create_drive(self, company: dict, fields: Dict[str, Any]) -> dict:
        """
        Post a new drive for the calling company.

        Args:
            company: the authenticated company (serialized user)
            fields: camelCase drive fields as sent by the client
        """
        missing = [f for f in REQUIRED_DRIVE_FIELDS if fields.get(f) in (None, "")]
        if missing:
            raise ValidationError(f"Please fill all required fields: {', '.join(missing)}")

        doc = {
            "companyId": parse_object_id(company["id"]),
            "companyName": company["name"],
            "title": fields["title"],
            "description": fields["description"],
            "batchYear": fields["batchYear"],
            "cgpaCutoff": float(fields["cgpaCutoff"]),
            "skills": normalize_skills(fields.get("skills")),
            "salary": fields["salary"],
            "deadline": to_naive_utc(fields["deadline"]),
            "testDate": to_naive_utc(fields.get("testDate")),
            "questions": [{"_id": ObjectId(), **q} for q in fields.get("questions") or []],
            "duration": fields.get("duration") or DEFAULT_DURATION,
            "status": "active",
        }
        drive = serialize_drive(self.drives.insert(doc))
        logger.info("Company %s created drive %s (%s)", company["id"], drive["id"], drive["title"])
        return drive

    def list_active_drives(self, now: Optional[datetime] = None) -> List[dict]:
        """Drives open to students: status active and deadline not passed."""
        now = to_naive_utc(now) or utcnow()
        return [serialize_drive(d) for d in self.drives.find_active(now)]

    def list_own_drives(self, company: dict) -> List[dict]:
        """All of the company's drives, each with its applicantCount."""
        drives = self.drives.find_by_company(company["id"])
        counts = self.applications.count_by_drive([d["_id"] for d in drives])
        result = []
        for drive in drives:
            item = serialize_drive(drive)
            item["applicantCount"] = counts.get(item["id"], 0)
            result.append(item)
        return result

    def get_drive(self, drive_id: Any) -> dict:
        """Raw drive document or NotFoundError."""
        drive = self.drives.get_by_id(drive_id)
        if not drive:
            raise NotFoundError("Drive not found")
        return drive

    def get_open_drive(self, drive_id: Any) -> dict:
        """Raw drive document that still accepts applications."""
        drive = self.get_drive(drive_id)
        if drive.get("status", "active") != "active":
            raise ValidationError("Drive is closed")
        return drive

    def get_owned_drive(self, company: dict, drive_id: Any) -> dict:
        """Raw drive document, checking the caller owns it when ownership is enforced."""
        drive = self.get_drive(drive_id)
        if self.settings.enforce_drive_ownership and not caller_owns(drive, company):
            raise ForbiddenError("This drive belongs to another company")
        return drive

    def get_own_drive(self, company: dict, drive_id: Any) -> dict:
        """Full drive with applicantCount for the drive details page."""
        drive = self.get_drive(drive_id)
        if not caller_owns(drive, company):
            raise ForbiddenError("This drive belongs to another company")
        item = serialize_drive(drive)
        item["applicantCount"] = self.applications.count_for_drives([drive["_id"]])
        return item

    def close_drive(self, company: dict, drive_id: Any) -> dict:
        """Stop accepting applications. Closing a closed drive is a no-op."""
        drive = self.get_drive(drive_id)
        if not caller_owns(drive, company):
            raise ForbiddenError("This drive belongs to another company")
        if drive.get("status") != "closed":
            drive = self.drives.set_status(drive["_id"], "closed")
            logger.info("Company %s closed drive %s", company["id"], drive_id)
        item = serialize_drive(drive)
        item["applicantCount"] = self.applications.count_for_drives([drive["_id"]])
        return item

    def get_drive_test(self, drive_id: Any) -> dict:
        """
        Projection used by the test-taking page.

        Note: no eligibility or prior-submission check happens here.
        """
        drive = self.get_drive(drive_id)
        return {
            "id": str(drive["_id"]),
            "title": drive["title"],
            "questions": [serialize_question(q) for q in drive.get("questions") or []],
            "duration": drive.get("duration") or DEFAULT_DURATION,
        }


def get_drive_service() -> DriveService:
    return DriveService()
