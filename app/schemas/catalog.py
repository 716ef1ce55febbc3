"""
Schemas for the university catalog: universities and the programs they offer
"""
from typing import List, Optional
from datetime import datetime
from pydantic import EmailStr, Field, field_validator
from app.models import AgreementStatus, UniversityStatus, UniversityTier
from app.schemas.common import ApiModel, RequiredReference, empty_str_to_none, reject_null


class UniversityCreate(ApiModel):
    name: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    city: Optional[str] = None
    province: Optional[str] = None
    tier: UniversityTier = UniversityTier.TIER3
    status: UniversityStatus = UniversityStatus.ACTIVE
    website: Optional[str] = None
    logo: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    agreement_status: AgreementStatus = AgreementStatus.NONE
    agreement_date: Optional[datetime] = None
    agreement_expiry: Optional[datetime] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator('city', 'province', 'website', 'logo', 'contact_name', 'contact_email',
                     'contact_phone', 'agreement_date', 'agreement_expiry', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return empty_str_to_none(v)


class UniversityUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = None
    province: Optional[str] = None
    tier: Optional[UniversityTier] = None
    status: Optional[UniversityStatus] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    agreement_status: Optional[AgreementStatus] = None
    agreement_date: Optional[datetime] = None
    agreement_expiry: Optional[datetime] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator('name', 'country', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('city', 'province', 'website', 'logo', 'contact_name', 'contact_email',
                     'contact_phone', 'agreement_date', 'agreement_expiry', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return empty_str_to_none(v)


class UniversityResponse(ApiModel):
    id: int
    name: str
    country: str
    city: Optional[str] = None
    province: Optional[str] = None
    tier: Optional[UniversityTier] = None
    status: Optional[UniversityStatus] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    agreement_status: Optional[AgreementStatus] = None
    agreement_date: Optional[datetime] = None
    agreement_expiry: Optional[datetime] = None
    commission_rate: Optional[float] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProgramCreate(ApiModel):
    name: str = Field(..., min_length=1)
    university_id: RequiredReference
    level: str = Field(..., min_length=1)
    duration: Optional[str] = None
    tuition_fee: Optional[str] = None
    start_date: Optional[str] = None


class ProgramUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    university_id: Optional[RequiredReference] = None
    level: Optional[str] = Field(None, min_length=1)
    duration: Optional[str] = None
    tuition_fee: Optional[str] = None
    start_date: Optional[str] = None

    @field_validator('name', 'university_id', 'level', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class ProgramResponse(ApiModel):
    id: int
    name: str
    university_id: int
    level: str
    duration: Optional[str] = None
    tuition_fee: Optional[str] = None
    start_date: Optional[str] = None
    created_at: Optional[datetime] = None
