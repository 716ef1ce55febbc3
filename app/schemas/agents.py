from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field, field_validator
from app.models import AgentStatus
from app.schemas.common import ApiModel, empty_str_to_none, reject_null


class AgentCreate(ApiModel):
    name: str = Field(..., min_length=1)
    company: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    country: Optional[str] = None
    status: AgentStatus = AgentStatus.ACTIVE
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    is_featured: bool = False
    notes: Optional[str] = None

    @field_validator('company', 'phone', 'country', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return empty_str_to_none(v)


class AgentUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    status: Optional[AgentStatus] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    is_featured: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator('name', 'email', 'status', 'is_featured', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class AgentResponse(ApiModel):
    id: int
    name: str
    company: Optional[str] = None
    email: str
    phone: Optional[str] = None
    country: Optional[str] = None
    status: AgentStatus
    commission_rate: Optional[float] = None
    is_featured: Optional[bool] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
