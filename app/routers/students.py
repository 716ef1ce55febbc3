from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
import logging
from app.models import Student, StudentStage, StudentStatus, User
from app.routers.auth import require_authenticated
from app.schemas.students import StudentCreate, StudentDetailResponse, StudentResponse, StudentUpdate
from app.services.storage import Storage, find_missing_references, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

def _check_references(storage: Storage, data: dict):
    missing = find_missing_references(
        storage,
        agent=data.get('agent'),
        university=data.get('university'),
        program=data.get('program'),
    )
    if missing:
        raise HTTPException(status_code=400, detail=f"Referenced {', '.join(missing)} does not exist")

def _with_display_names(storage: Storage, student: Student) -> StudentDetailResponse:
    """Resolve agent/university/program ids to names; a dangling id gives a null name"""
    detail = StudentDetailResponse.model_validate(student)

    if student.agent is not None:
        agent = storage.get_agent_by_id(student.agent)
        detail.agent_name = agent.name if agent else None

    if student.university is not None:
        university = storage.get_university_by_id(student.university)
        detail.university_name = university.name if university else None

    if student.program is not None:
        program = storage.get_program_by_id(student.program)
        detail.program_name = program.name if program else None

    return detail

@router.get("", response_model=List[StudentResponse])
@router.get("/", response_model=List[StudentResponse])
async def list_students(
    stage: Optional[StudentStage] = None,
    student_status: Optional[StudentStatus] = Query(None, alias="status"),
    agent: Optional[int] = None,
    university: Optional[int] = None,
    program: Optional[int] = None,
    is_high_priority: Optional[bool] = Query(None, alias="isHighPriority"),
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """List all students with optional equality filters"""
    filters = {
        'stage': stage,
        'status': student_status,
        'agent': agent,
        'university': university,
        'program': program,
        'is_high_priority': is_high_priority,
    }
    filters = {key: value for key, value in filters.items() if value is not None}
    if not filters:
        return storage.get_students()
    return storage.get_students_by_filter(filters)

@router.get("/filter/stage/{stage}", response_model=List[StudentResponse])
async def filter_students_by_stage(
    stage: str,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Students currently at the given pipeline stage (empty for unknown stages)"""
    return storage.get_students_by_stage(stage)

@router.get("/{student_id}", response_model=StudentDetailResponse)
async def get_student(
    student_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Get a student with agent, university and program names resolved"""
    student = storage.get_student_by_id(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return _with_display_names(storage, student)

@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Create a student; references arrive already normalized by StudentCreate"""
    data = student_data.model_dump()
    _check_references(storage, data)
    return storage.create_student(data)

@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Partially update a student; only the supplied fields change"""
    update_data = student_data.model_dump(exclude_unset=True)
    _check_references(storage, update_data)

    student = storage.update_student(student_id, update_data)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student

@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Delete a student"""
    if not storage.delete_student(student_id):
        raise HTTPException(status_code=404, detail="Student not found")
    return None
