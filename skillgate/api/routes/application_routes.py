"""
Application Routes

POST /applications - Apply to a drive (approved student)
POST /applications/submit-test - Submit screening test answers (approved student)
GET /applications/my - Get my applications
GET /applications/drive/{drive_id} - Get applicants of a drive (company)
PUT /applications/{application_id}/status - Update application status (company)
GET /applications/stats - Get drive/application totals (company)
"""

from fastapi import APIRouter, Depends
from typing import List

from skillgate.core.auth import get_approved_student, get_current_company, get_current_student
from skillgate.services.application_service import get_application_service
from skillgate.schemas.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate, CompanyStatsResponse,
    DriveApplicantResponse, MyApplicationResponse, TestSubmission
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_drive(application: ApplicationCreate, student: dict = Depends(get_approved_student)):
    """
    Apply to a drive. Students only. Cannot apply twice to the same drive.

    Fails if the drive does not exist, if already applied, or if the
    student's CGPA is below the drive's cutoff (checked in that order).
    """
    return get_application_service().apply(student, application.drive_id)


@router.post("/submit-test", response_model=ApplicationResponse)
async def submit_test(submission: TestSubmission, student: dict = Depends(get_approved_student)):
    """Submit test answers for a drive. Applies to the drive first if needed."""
    answers = [a.model_dump(by_alias=True) for a in submission.answers]
    return get_application_service().submit_test(student, submission.drive_id, answers)


@router.get("/my", response_model=List[MyApplicationResponse])
async def get_my_applications(student: dict = Depends(get_current_student)):
    """Get all applications for current student."""
    return get_application_service().list_my_applications(student)


@router.get("/stats", response_model=CompanyStatsResponse)
async def get_company_stats(company: dict = Depends(get_current_company)):
    """Get total drives posted and applications received."""
    return get_application_service().company_stats(company)


@router.get("/drive/{drive_id}", response_model=List[DriveApplicantResponse])
async def get_drive_applications(drive_id: str, company: dict = Depends(get_current_company)):
    """Get all applicants of one of the company's drives."""
    return get_application_service().list_drive_applications(company, drive_id)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    company: dict = Depends(get_current_company)
):
    """Update status of an application (shortlist / interview / select / reject)."""
    return get_application_service().update_application_status(
        company, application_id, update.status
    )
