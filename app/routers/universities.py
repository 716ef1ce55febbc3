from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from app.models import User
from app.routers.auth import require_admin, require_authenticated
from app.schemas.catalog import UniversityCreate, UniversityResponse, UniversityUpdate
from app.services.storage import Storage, get_storage

router = APIRouter()

@router.get("", response_model=List[UniversityResponse])
@router.get("/", response_model=List[UniversityResponse])
async def list_universities(
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """List all universities"""
    return storage.get_universities()

@router.get("/{university_id}", response_model=UniversityResponse)
async def get_university(
    university_id: int,
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Get a specific university by ID"""
    university = storage.get_university_by_id(university_id)
    if not university:
        raise HTTPException(status_code=404, detail="University not found")
    return university

@router.post("", response_model=UniversityResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=UniversityResponse, status_code=status.HTTP_201_CREATED)
async def create_university(
    university_data: UniversityCreate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Create a new university (admin only)"""
    return storage.create_university(university_data.model_dump())

@router.put("/{university_id}", response_model=UniversityResponse)
async def update_university(
    university_id: int,
    university_data: UniversityUpdate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update a university (admin only)"""
    university = storage.update_university(university_id, university_data.model_dump(exclude_unset=True))
    if not university:
        raise HTTPException(status_code=404, detail="University not found")
    return university

@router.delete("/{university_id}")
async def delete_university(
    university_id: int,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete a university (admin only)"""
    if not storage.delete_university(university_id):
        raise HTTPException(status_code=404, detail="University not found")
    return {"message": "University deleted successfully"}
