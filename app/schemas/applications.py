from typing import Optional
from datetime import datetime
from pydantic import field_validator
from app.models import ApplicationStage, ApplicationStatus
from app.schemas.common import NO_REFERENCE, ApiModel, Reference, RequiredReference, empty_str_to_none, reject_null


class ApplicationCreate(ApiModel):
    student_id: RequiredReference
    university_id: RequiredReference
    program_id: RequiredReference
    agent_id: Reference = None  # None means direct application
    stage: ApplicationStage = ApplicationStage.DOCUMENT_COLLECTION
    status: ApplicationStatus = ApplicationStatus.IN_PROGRESS
    intake_date: Optional[datetime] = None
    application_date: Optional[datetime] = None
    decision_date: Optional[datetime] = None
    notes: Optional[str] = None
    is_high_priority: bool = False

    @field_validator('intake_date', 'application_date', 'decision_date', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if v == NO_REFERENCE:
            return None
        return empty_str_to_none(v)


class ApplicationUpdate(ApiModel):
    student_id: Optional[RequiredReference] = None
    university_id: Optional[RequiredReference] = None
    program_id: Optional[RequiredReference] = None
    agent_id: Reference = None
    stage: Optional[ApplicationStage] = None
    status: Optional[ApplicationStatus] = None
    intake_date: Optional[datetime] = None
    application_date: Optional[datetime] = None
    decision_date: Optional[datetime] = None
    notes: Optional[str] = None
    is_high_priority: Optional[bool] = None

    @field_validator('student_id', 'university_id', 'program_id', 'stage', 'status', 'is_high_priority', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('intake_date', 'application_date', 'decision_date', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if v == NO_REFERENCE:
            return None
        return empty_str_to_none(v)


class ApplicationResponse(ApiModel):
    id: int
    student_id: int
    university_id: int
    program_id: int
    agent_id: Optional[int] = None
    stage: ApplicationStage
    status: ApplicationStatus
    intake_date: Optional[datetime] = None
    application_date: Optional[datetime] = None
    decision_date: Optional[datetime] = None
    notes: Optional[str] = None
    is_high_priority: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentApplicationResponse(ApplicationResponse):
    """Application listed under a student, with catalog names resolved"""
    university_name: Optional[str] = None
    program_name: Optional[str] = None
