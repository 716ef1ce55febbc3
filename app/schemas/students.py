from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field, field_validator
from app.models import StudentStage, StudentStatus
from app.schemas.common import ApiModel, Reference, empty_str_to_none, reject_null


class StudentCreate(ApiModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    status: StudentStatus = StudentStatus.ACTIVE
    stage: StudentStage = StudentStage.INQUIRY
    program: Reference = None
    university: Reference = None
    agent: Reference = None
    nationality: Optional[str] = None
    notes: Optional[str] = None
    is_high_priority: bool = False

    @field_validator('phone', 'nationality', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return empty_str_to_none(v)


class StudentUpdate(ApiModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    status: Optional[StudentStatus] = None
    stage: Optional[StudentStage] = None
    program: Reference = None
    university: Reference = None
    agent: Reference = None
    nationality: Optional[str] = None
    notes: Optional[str] = None
    is_high_priority: Optional[bool] = None

    @field_validator('first_name', 'last_name', 'email', 'status', 'stage', 'is_high_priority', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('phone', 'nationality', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return empty_str_to_none(v)


class StudentResponse(ApiModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    status: StudentStatus
    stage: StudentStage
    program: Optional[int] = None
    university: Optional[int] = None
    agent: Optional[int] = None
    nationality: Optional[str] = None
    notes: Optional[str] = None
    is_high_priority: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentDetailResponse(StudentResponse):
    """Single student view with the display names of its references resolved"""
    agent_name: Optional[str] = None
    university_name: Optional[str] = None
    program_name: Optional[str] = None
