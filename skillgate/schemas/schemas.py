"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON field names are camelCase (cgpaCutoff, applicantCount, ...), matching
the field names stored in MongoDB.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True, validate_default=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    company = "company"
    admin = "admin"


class UserStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class DriveStatus(str, Enum):
    active = "active"
    closed = "closed"


class QuestionKind(str, Enum):
    text = "text"
    mcq = "mcq"


class ApplicationStatus(str, Enum):
    pending = "pending"
    shortlisted = "shortlisted"
    interview = "interview"
    selected = "selected"
    rejected = "rejected"


# ============================================================
# AUTH / PROFILE SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.student


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class CompanyDetails(CamelModel):
    registration_number: Optional[str] = None
    industry_type: Optional[str] = None
    company_size: Optional[str] = None
    website_url: Optional[str] = None
    description: Optional[str] = None
    contact_person: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own profile. Role decides which apply."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    password: Optional[str] = Field(None, min_length=1)
    # student
    college_id: Optional[str] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[Union[List[str], str]] = None
    resume: Optional[str] = None
    # company
    company_details: Optional[CompanyDetails] = None


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    status: UserStatus
    college_id: Optional[str] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = None
    cgpa: Optional[float] = None
    skills: List[str] = []
    resume: Optional[str] = None
    profile_completed: bool = False
    company_details: Optional[CompanyDetails] = None
    created_at: Optional[datetime] = None


class AuthResponse(UserResponse):
    token: str


# ============================================================
# DRIVE SCHEMAS
# ============================================================

class QuestionCreate(CamelModel):
    text: str = Field(..., min_length=1)
    options: List[str] = []
    kind: QuestionKind = QuestionKind.text
    marks: int = Field(10, ge=0)


class Question(QuestionCreate):
    """Stored question; answers refer to it by id."""
    id: str


class DriveCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    batch_year: int = Field(..., ge=1950, le=2100)
    cgpa_cutoff: float = Field(..., ge=0, le=10)
    skills: Union[List[str], str] = []
    salary: str = Field(..., min_length=1)
    deadline: datetime
    test_date: Optional[datetime] = None
    questions: List[QuestionCreate] = []
    duration: int = Field(60, ge=1)


class DriveResponse(CamelModel):
    id: str
    company_id: str
    company_name: str
    title: str
    description: str
    batch_year: int
    cgpa_cutoff: float
    skills: List[str] = []
    salary: str
    deadline: datetime
    test_date: Optional[datetime] = None
    questions: List[Question] = []
    duration: int = 60
    status: DriveStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyDriveResponse(DriveResponse):
    applicant_count: int = 0


class DriveTestResponse(CamelModel):
    id: str
    title: str
    questions: List[Question] = []
    duration: int = 60


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    drive_id: str = Field(..., min_length=1)


class TestAnswer(CamelModel):
    question_id: str
    answer: str = ""


class TestSubmission(CamelModel):
    drive_id: str = Field(..., min_length=1)
    answers: List[TestAnswer] = []


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicationResponse(CamelModel):
    id: str
    student_id: str
    drive_id: str
    status: ApplicationStatus
    applied_at: datetime
    updated_at: Optional[datetime] = None
    answers: List[TestAnswer] = []
    test_submitted_at: Optional[datetime] = None


class DriveSummary(CamelModel):
    id: str
    title: str
    company_name: str
    status: DriveStatus
    test_date: Optional[datetime] = None
    deadline: datetime


class StudentSummary(CamelModel):
    id: str
    name: str
    email: str
    college_id: Optional[str] = None
    branch: Optional[str] = None
    cgpa: Optional[float] = None
    resume: Optional[str] = None
    skills: List[str] = []


class MyApplicationResponse(ApplicationResponse):
    drive: Optional[DriveSummary] = None


class DriveApplicantResponse(ApplicationResponse):
    student: Optional[StudentSummary] = None


class CompanyStatsResponse(CamelModel):
    total_drives: int
    total_applications: int


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class AdminStatsResponse(CamelModel):
    total_companies: int
    total_students: int
    pending_approvals: int


class UserStatusUpdate(CamelModel):
    status: UserStatus


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class HealthResponse(BaseModel):
    status: str
    mongodb: str
