"""
Drive Routes

POST /drives - Create drive (approved company only)
GET /drives - List active drives (students)
GET /drives/company - Get company's own drives with applicant counts
GET /drives/{drive_id} - Get one of the company's drives
PUT /drives/{drive_id}/close - Close a drive (owning company)
GET /drives/{drive_id}/test - Get test questions for a drive (students)
"""

from fastapi import APIRouter, Depends
from typing import List

from skillgate.core.auth import get_approved_company, get_current_company, get_current_student
from skillgate.services.drive_service import get_drive_service
from skillgate.schemas.schemas import (
    DriveCreate, DriveResponse, CompanyDriveResponse, DriveTestResponse
)

router = APIRouter(prefix="/drives", tags=["Drives"])


@router.post("", response_model=DriveResponse, status_code=201)
async def create_drive(drive: DriveCreate, company: dict = Depends(get_approved_company)):
    """Create a new drive. Only approved companies can post drives."""
    fields = drive.model_dump(by_alias=True)
    return get_drive_service().create_drive(company, fields)


@router.get("", response_model=List[DriveResponse])
async def list_drives(student: dict = Depends(get_current_student)):
    """List drives that are active and whose deadline has not passed, newest first."""
    return get_drive_service().list_active_drives()


@router.get("/company", response_model=List[CompanyDriveResponse])
async def list_company_drives(company: dict = Depends(get_current_company)):
    """Get all drives posted by this company with applicant counts."""
    return get_drive_service().list_own_drives(company)


@router.get("/{drive_id}", response_model=CompanyDriveResponse)
async def get_drive(drive_id: str, company: dict = Depends(get_current_company)):
    """Get details of one of the company's drives."""
    return get_drive_service().get_own_drive(company, drive_id)


@router.put("/{drive_id}/close", response_model=CompanyDriveResponse)
async def close_drive(drive_id: str, company: dict = Depends(get_current_company)):
    """Close a drive. Closed drives disappear from the student listing."""
    return get_drive_service().close_drive(company, drive_id)


@router.get("/{drive_id}/test", response_model=DriveTestResponse)
async def get_drive_test(drive_id: str, student: dict = Depends(get_current_student)):
    """Get the questions and duration of a drive's screening test."""
    return get_drive_service().get_drive_test(drive_id)
