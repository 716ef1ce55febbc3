from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from typing import Optional
import logging
from app.config import settings
from app.models import User
from app.schemas.users import LoginRequest, UserCreate, UserResponse
from app.services.auth_service import AuthFailure, ConflictError, register_user, verify_credentials
from app.services.session_store import SessionManager
from app.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager

def get_current_user(
    request: Request,
    storage: Storage = Depends(get_storage),
    sessions: SessionManager = Depends(get_session_manager)
) -> Optional[User]:
    """Resolve the session cookie to a user, or None for anonymous requests"""
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return sessions.resolve_session(cookie, storage)

def require_authenticated(current_user: Optional[User] = Depends(get_current_user)) -> User:
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return current_user

def require_role(role: str):
    """Dependency factory: authenticated user whose role equals `role`"""
    def role_checker(current_user: Optional[User] = Depends(get_current_user)) -> User:
        if current_user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        user_role = current_user.role.value if current_user.role else None
        if user_role != role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user
    return role_checker

require_admin = require_role("admin")

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, storage: Storage = Depends(get_storage)):
    """Create a staff/admin account"""
    try:
        return register_user(storage, user_data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

@router.post("/login", response_model=UserResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    sessions: SessionManager = Depends(get_session_manager)
):
    """Check username/password and start a session cookie"""
    try:
        user = verify_credentials(storage, credentials.username, credentials.password)
    except AuthFailure as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    logger.info(f"User id={user.id} logged in")
    cookie_value = sessions.establish_session(user)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=cookie_value,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return user

@router.get("/logout")
async def logout(
    request: Request,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager)
):
    """End the current session (a no-op for anonymous requests)"""
    try:
        sessions.destroy_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
    except Exception as e:
        logger.error(f"Error logging out: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error logging out")
    logger.info("Session ended by logout")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}

@router.get("/current-user", response_model=UserResponse)
async def current_user(user: Optional[User] = Depends(get_current_user)):
    """Get current user information"""
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user
