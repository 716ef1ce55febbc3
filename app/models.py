from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, JSON, Float, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
import enum

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    STAFF = "staff"

class StudentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    WITHDRAWN = "withdrawn"

class StudentStage(str, enum.Enum):
    INQUIRY = "inquiry"
    APPLICATION = "application"
    OFFER = "offer"
    VISA = "visa"
    PRE_DEPARTURE = "pre_departure"
    ENROLLMENT = "enrollment"
    ALUMNI = "alumni"

class UniversityTier(str, enum.Enum):
    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"
    TIER4 = "tier4"

class UniversityStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"

class AgreementStatus(str, enum.Enum):
    NONE = "none"
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    RENEWAL = "renewal"

class AgentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"

class ApplicationStage(str, enum.Enum):
    DOCUMENT_COLLECTION = "document_collection"
    UNDER_REVIEW = "under_review"
    SUBMITTED_TO_UNIVERSITY = "submitted_to_university"
    CONDITIONAL_OFFER = "conditional_offer"
    UNCONDITIONAL_OFFER = "unconditional_offer"
    REJECTED = "rejected"

class ApplicationStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DEFERRED = "deferred"
    WITHDRAWN = "withdrawn"

def ValueEnum(enum_cls):
    """Enum column type that stores the member values ("tier1"), not the member names"""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=32,
    )

# Users table
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash, never the plaintext
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    role = Column(ValueEnum(UserRole), nullable=False, default=UserRole.STAFF)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    sessions = relationship("UserSession", back_populates="user", passive_deletes=True)

# Server-side sessions, one row per login
class UserSession(Base):
    __tablename__ = "user_sessions"

    token = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="sessions")

# Agents table
class Agent(Base):
    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    company = Column(String, nullable=True)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    country = Column(String, nullable=True)
    status = Column(ValueEnum(AgentStatus), nullable=False, default=AgentStatus.ACTIVE)
    commission_rate = Column(Float, nullable=True)  # Percentage, e.g. 12.5
    is_featured = Column(Boolean, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

# Universities table
class University(Base):
    __tablename__ = "universities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    country = Column(String, nullable=False)
    city = Column(String, nullable=True)
    province = Column(String, nullable=True)
    tier = Column(ValueEnum(UniversityTier), default=UniversityTier.TIER3)
    status = Column(ValueEnum(UniversityStatus), default=UniversityStatus.ACTIVE)
    website = Column(String, nullable=True)
    logo = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    agreement_status = Column(ValueEnum(AgreementStatus), default=AgreementStatus.NONE)
    agreement_date = Column(DateTime(timezone=True), nullable=True)
    agreement_expiry = Column(DateTime(timezone=True), nullable=True)
    commission_rate = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)  # Array of tags (e.g., ["russell-group", "scholarships"])
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    programs = relationship("Program", back_populates="university", passive_deletes=True)

# Programs table
class Program(Base):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    university_id = Column(Integer, ForeignKey("universities.id", ondelete="CASCADE"), nullable=False, index=True)
    level = Column(String, nullable=False)  # Bachelor, Master, PhD, Foundation...
    duration = Column(String, nullable=True)
    tuition_fee = Column(String, nullable=True)
    start_date = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    university = relationship("University", back_populates="programs")

# Students table
class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    status = Column(ValueEnum(StudentStatus), nullable=False, default=StudentStatus.ACTIVE)
    stage = Column(ValueEnum(StudentStage), nullable=False, default=StudentStage.INQUIRY, index=True)

    # Loose references, null means "no relation"
    program = Column("program_id", Integer, ForeignKey("programs.id", ondelete="SET NULL"), nullable=True)
    university = Column("university_id", Integer, ForeignKey("universities.id", ondelete="SET NULL"), nullable=True)
    agent = Column("agent_id", Integer, ForeignKey("agents.id", ondelete="SET NULL"), nullable=True)

    nationality = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    is_high_priority = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    applications = relationship("Application", back_populates="student", passive_deletes=True)

# Applications table - tracks multiple applications per student
class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    university_id = Column(Integer, ForeignKey("universities.id", ondelete="CASCADE"), nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True)
    agent_id = Column(Integer, ForeignKey("agents.id", ondelete="SET NULL"), nullable=True)  # Null means direct application
    stage = Column(ValueEnum(ApplicationStage), nullable=False, default=ApplicationStage.DOCUMENT_COLLECTION, index=True)
    status = Column(ValueEnum(ApplicationStatus), nullable=False, default=ApplicationStatus.IN_PROGRESS)
    intake_date = Column(DateTime(timezone=True), nullable=True)
    application_date = Column(DateTime(timezone=True), nullable=True)
    decision_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    is_high_priority = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    student = relationship("Student", back_populates="applications")
