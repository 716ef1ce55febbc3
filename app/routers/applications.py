from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from app.models import User
from app.routers.auth import require_authenticated
from app.schemas.applications import (
    ApplicationCreate, ApplicationResponse, ApplicationUpdate, StudentApplicationResponse
)
from app.services.storage import Storage, find_missing_references, get_storage

router = APIRouter()

def _check_references(storage: Storage, data: dict):
    missing = find_missing_references(
        storage,
        student=data.get('student_id'),
        university=data.get('university_id'),
        program=data.get('program_id'),
        agent=data.get('agent_id'),
    )
    if missing:
        raise HTTPException(status_code=400, detail=f"Referenced {', '.join(missing)} does not exist")

@router.get("", response_model=List[ApplicationResponse])
@router.get("/", response_model=List[ApplicationResponse])
async def list_applications(
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """List all applications"""
    return storage.get_applications()

@router.get("/filter/stage/{stage}", response_model=List[ApplicationResponse])
async def filter_applications_by_stage(
    stage: str,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    return storage.get_applications_by_stage(stage)

@router.get("/student/{student_id}", response_model=List[StudentApplicationResponse])
async def list_student_applications(
    student_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Applications of one student, with university and program names"""
    result = []
    for application in storage.get_applications_by_student_id(student_id):
        item = StudentApplicationResponse.model_validate(application)
        university = storage.get_university_by_id(application.university_id)
        program = storage.get_program_by_id(application.program_id)
        item.university_name = university.name if university else None
        item.program_name = program.name if program else None
        result.append(item)
    return result

@router.get("/university/{university_id}", response_model=List[ApplicationResponse])
async def list_university_applications(
    university_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    return storage.get_applications_by_university_id(university_id)

@router.get("/program/{program_id}", response_model=List[ApplicationResponse])
async def list_program_applications(
    program_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    return storage.get_applications_by_program_id(program_id)

@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Get a specific application"""
    application = storage.get_application_by_id(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application

@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    application_data: ApplicationCreate,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Create an application; string ids and "none" were normalized by ApplicationCreate"""
    data = application_data.model_dump()
    _check_references(storage, data)
    return storage.create_application(data)

@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: int,
    application_data: ApplicationUpdate,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Partially update an application"""
    update_data = application_data.model_dump(exclude_unset=True)
    _check_references(storage, update_data)

    application = storage.update_application(application_id, update_data)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application

@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Delete an application"""
    if not storage.delete_application(application_id):
        raise HTTPException(status_code=404, detail="Application not found")
    return None
