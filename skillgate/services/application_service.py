"""
Application Service - the application lifecycle.

apply() runs its checks in a fixed order so the error a student sees is
deterministic:

    1. the drive exists              -> NotFoundError
    2. the drive is still active     -> ValidationError
    3. no application for the pair   -> ConflictError
    4. cgpa >= drive.cgpaCutoff      -> EligibilityError

Status changes are permissive by default (any known status can be written).
With enforce_status_transitions the ALLOWED_TRANSITIONS table applies.
"""

import logging
from typing import Optional, List, Any, Dict

from skillgate.core.config import Settings, get_settings
from skillgate.core.errors import ConflictError, EligibilityError, ForbiddenError, NotFoundError, ValidationError
from skillgate.schemas.schemas import ApplicationStatus
from skillgate.services.drive_service import DriveService, caller_owns, question_ids
from skillgate.services.mongo_service import (
    ApplicationStore, DriveStore, UserStore, serialize_doc
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    "pending": {"shortlisted", "interview", "selected", "rejected"},
    "shortlisted": {"interview", "selected", "rejected"},
    "interview": {"selected", "rejected"},
    "selected": set(),
    "rejected": set(),
}

DRIVE_SUMMARY_FIELDS = ("title", "companyName", "status", "testDate", "deadline")
STUDENT_SUMMARY_FIELDS = ("name", "email", "collegeId", "branch", "cgpa", "resume", "skills")


def is_eligible(student: dict, drive: dict) -> bool:
    """A student without a cgpa on file is never eligible."""
    cgpa = student.get("cgpa")
    if cgpa is None:
        return False
    return float(cgpa) >= float(drive["cgpaCutoff"])


def check_transition(current: str, new: str) -> None:
    """Raise ValidationError unless current -> new is in the transition table."""
    if current == new:
        return
    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValidationError(f"Cannot move application from '{current}' to '{new}'")


def _project(doc: Optional[dict], fields) -> Optional[dict]:
    if doc is None:
        return None
    return {"id": str(doc["_id"]), **{f: doc[f] for f in fields if doc.get(f) is not None}}


class ApplicationService:
    def __init__(
        self,
        applications: ApplicationStore = None,
        drives: DriveStore = None,
        users: UserStore = None,
        settings: Settings = None,
    ):
        self.applications = applications or ApplicationStore()
        self.drives = drives or DriveStore()
        self.users = users or UserStore()
        self.settings = settings or get_settings()
        self.drive_service = DriveService(self.drives, self.applications, self.settings)

    def _student_profile(self, student: dict) -> dict:
        """Fresh student document so eligibility sees the latest cgpa."""
        doc = self.users.get_by_id(student["id"])
        if not doc:
            raise NotFoundError("User not found")
        return doc

    def apply(self, student: dict, drive_id: Any) -> dict:
        drive = self.drive_service.get_open_drive(drive_id)

        if self.applications.find_one(student["id"], drive["_id"]):
            raise ConflictError("Already applied to this drive")

        if not is_eligible(self._student_profile(student), drive):
            raise EligibilityError("Not eligible: CGPA criteria not met")

        application = self.applications.insert(student["id"], drive["_id"])
        logger.info("Student %s applied to drive %s", student["id"], drive["_id"])
        return serialize_doc(application)

    def submit_test(self, student: dict, drive_id: Any, answers: List[Dict[str, Any]]) -> dict:
        """
        Record screening-test answers (no grading). Applies first when the
        student has no application for the drive yet.
        """
        drive = self.drive_service.get_open_drive(drive_id)
        unknown = [a["questionId"] for a in answers if a["questionId"] not in question_ids(drive)]
        if unknown:
            raise ValidationError(f"Unknown question id: {', '.join(unknown)}")

        application = self.applications.find_one(student["id"], drive["_id"])
        if application is None:
            self.apply(student, drive["_id"])
            application = self.applications.find_one(student["id"], drive["_id"])

        updated = self.applications.record_test(application["_id"], answers)
        if updated is None:
            raise ConflictError("Test already submitted for this drive")
        logger.info("Student %s submitted test for drive %s (%d answers)", student["id"], drive["_id"], len(answers))
        return serialize_doc(updated)

    def list_my_applications(self, student: dict) -> List[dict]:
        """Caller's applications, newest first, each with a drive summary."""
        applications = self.applications.find_by_student(student["id"])
        result = []
        for application in applications:
            drive = self.drives.get_by_id(application["driveId"])
            item = serialize_doc(application)
            item["drive"] = _project(drive, DRIVE_SUMMARY_FIELDS)
            result.append(item)
        return result

    def list_drive_applications(self, company: dict, drive_id: Any) -> List[dict]:
        """Applicants of a drive, newest first, each with a student summary."""
        drive = self.drive_service.get_owned_drive(company, drive_id)
        applications = self.applications.find_by_drive(drive["_id"])
        result = []
        for application in applications:
            student = self.users.get_by_id(application["studentId"])
            item = serialize_doc(application)
            item["student"] = _project(student, STUDENT_SUMMARY_FIELDS)
            result.append(item)
        return result

    def update_application_status(self, company: dict, application_id: Any, status: str) -> dict:
        """
        Overwrite the status of an application. Writing the current status
        again returns the same record.
        """
        application = self.applications.get_by_id(application_id)
        if not application:
            raise NotFoundError("Application not found")
        try:
            status = ApplicationStatus(status).value
        except ValueError:
            raise ValidationError(f"Unknown application status: {status}")

        if self.settings.enforce_drive_ownership:
            drive = self.drives.get_by_id(application["driveId"])
            if drive is None or not caller_owns(drive, company):
                raise ForbiddenError("This application belongs to another company's drive")

        current = application.get("status", "pending")
        if self.settings.enforce_status_transitions:
            check_transition(current, status)

        if current == status:
            return serialize_doc(application)

        updated = self.applications.update(application["_id"], {"status": status})
        if updated is None:
            raise NotFoundError("Application not found")
        logger.info("Application %s: %s -> %s", application_id, current, status)
        return serialize_doc(updated)

    def company_stats(self, company: dict) -> dict:
        drives = self.drives.find_by_company(company["id"])
        drive_ids = [d["_id"] for d in drives]
        return {
            "totalDrives": len(drives),
            "totalApplications": self.applications.count_for_drives(drive_ids) if drive_ids else 0,
        }


def get_application_service() -> ApplicationService:
    return ApplicationService()
