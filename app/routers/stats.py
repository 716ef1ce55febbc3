"""
Dashboard summary counts
"""
from fastapi import APIRouter, Depends
from typing import Dict
from app.models import User
from app.routers.auth import require_authenticated
from app.services.storage import Storage, get_storage

router = APIRouter()

@router.get("/students/stage-counts", response_model=Dict[str, int])
async def student_stage_counts(
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Number of students per pipeline stage; empty stages are omitted"""
    return storage.get_student_count_by_stage()

@router.get("/applications/stage-counts", response_model=Dict[str, int])
async def application_stage_counts(
    current_user: User = Depends(require_authenticated),
    storage: Storage = Depends(get_storage)
):
    """Number of applications per stage; empty stages are omitted"""
    return storage.get_application_count_by_stage()
