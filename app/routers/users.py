from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging
from app.models import User
from app.routers.auth import require_admin
from app.schemas.users import UserResponse, UserUpdate
from app.services.auth_service import get_password_hash
from app.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[UserResponse])
@router.get("/", response_model=List[UserResponse])
async def list_users(
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """List all dashboard users (admin only)"""
    return storage.get_users()

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Get a specific user (admin only)"""
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Update a user (admin only); a new password is hashed before storing"""
    update_data = user_data.model_dump(exclude_unset=True)

    # If username is being updated, check for duplicates
    if 'username' in update_data:
        existing = storage.get_user_by_username(update_data['username'])
        if existing and existing.id != user_id:
            raise HTTPException(status_code=409, detail="Username already exists")

    # Hash password if provided
    if 'password' in update_data:
        update_data['password'] = get_password_hash(update_data['password'])

    user = storage.update_user(user_id, update_data)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    storage: Storage = Depends(get_storage)
):
    """Delete a user (admin only); an admin cannot delete their own account"""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot delete the current user")
    if not storage.delete_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"User id={user_id} deleted by admin id={current_user.id}")
    return None
