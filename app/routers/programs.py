from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from app.models import User
from app.routers.auth import require_admin, require_authenticated
from app.schemas.catalog import ProgramCreate, ProgramResponse, ProgramUpdate
from app.services.storage import Storage, find_missing_references, get_storage

router = APIRouter()

def _check_university(storage: Storage, university_id):
    if find_missing_references(storage, university=university_id):
        raise HTTPException(status_code=400, detail="Referenced university does not exist")

@router.get("", response_model=List[ProgramResponse])
@router.get("/", response_model=List[ProgramResponse])
async def list_programs(
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """List all programs"""
    return storage.get_programs()

@router.get("/university/{university_id}", response_model=List[ProgramResponse])
async def list_university_programs(
    university_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Programs offered by one university"""
    return storage.get_programs_by_university_id(university_id)

@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program(
    program_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    program = storage.get_program_by_id(program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program

@router.post("", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
async def create_program(
    program_data: ProgramCreate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Create a program under an existing university (admin only)"""
    _check_university(storage, program_data.university_id)
    return storage.create_program(program_data.model_dump())

@router.put("/{program_id}", response_model=ProgramResponse)
async def update_program(
    program_id: int,
    program_data: ProgramUpdate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update a program (admin only)"""
    update_data = program_data.model_dump(exclude_unset=True)
    if 'university_id' in update_data:
        _check_university(storage, update_data['university_id'])

    program = storage.update_program(program_id, update_data)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program

@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_program(
    program_id: int,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete a program (admin only)"""
    if not storage.delete_program(program_id):
        raise HTTPException(status_code=404, detail="Program not found")
    return None
