"""
Server-side sessions.

A login creates a random opaque token that maps to the user's id in a
SessionStore. Only the id is stored, never the user object or the password
hash. The client holds the token in a cookie, signed with python-jose so a
tampered cookie is rejected before the store is consulted.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple
import logging
import secrets
import threading

from jose import JWTError, jwt
from sqlalchemy.orm import sessionmaker

from app.models import User, UserSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionStore(ABC):
    """Token -> user id mapping with expiry"""

    @abstractmethod
    def get(self, token: str) -> Optional[int]:
        """Return the user id for a live session, None if unknown or expired"""
        pass

    @abstractmethod
    def set(self, token: str, user_id: int, max_age: int) -> None:
        pass

    @abstractmethod
    def destroy(self, token: str) -> None:
        pass


class InMemorySessionStore(SessionStore):
    """Process-local store; fine for a single worker and for tests"""

    def __init__(self):
        self._sessions: Dict[str, Tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def get(self, token: str) -> Optional[int]:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= _utcnow():
                del self._sessions[token]
                return None
            return user_id

    def set(self, token: str, user_id: int, max_age: int) -> None:
        now = _utcnow()
        with self._lock:
            # Drop abandoned sessions on every login
            expired = [t for t, (_, expires_at) in self._sessions.items() if expires_at <= now]
            for t in expired:
                del self._sessions[t]
            self._sessions[token] = (user_id, now + timedelta(seconds=max_age))

    def destroy(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)


class DatabaseSessionStore(SessionStore):
    """Sessions in the user_sessions table, shared by every worker"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, token: str) -> Optional[int]:
        db = self.session_factory()
        try:
            row = db.query(UserSession).filter(UserSession.token == token).first()
            if row is None:
                return None
            if _as_utc(row.expires_at) <= _utcnow():
                db.delete(row)
                db.commit()
                return None
            return row.user_id
        finally:
            db.close()

    def set(self, token: str, user_id: int, max_age: int) -> None:
        db = self.session_factory()
        try:
            now = _utcnow()
            db.query(UserSession).filter(UserSession.expires_at <= now).delete(synchronize_session=False)
            db.add(UserSession(
                token=token,
                user_id=user_id,
                expires_at=now + timedelta(seconds=max_age),
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def destroy(self, token: str) -> None:
        db = self.session_factory()
        try:
            db.query(UserSession).filter(UserSession.token == token).delete(synchronize_session=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class SessionManager:
    """Issues, resolves and destroys login sessions on top of a SessionStore"""

    def __init__(self, store: SessionStore, secret_key: str, algorithm: str = "HS256", max_age: int = 7 * 24 * 60 * 60):
        self.store = store
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.max_age = max_age

    def _sign(self, token: str) -> str:
        expire = _utcnow() + timedelta(seconds=self.max_age)
        return jwt.encode({"sid": token, "exp": expire}, self.secret_key, algorithm=self.algorithm)

    def _unsign(self, cookie_value: Optional[str]) -> Optional[str]:
        if not cookie_value:
            return None
        try:
            payload = jwt.decode(cookie_value, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Rejected session cookie: {e}")
            return None
        token = payload.get("sid")
        return token if isinstance(token, str) else None

    def establish_session(self, user: User) -> str:
        """Store the user's id under a fresh token; returns the signed cookie value"""
        token = secrets.token_urlsafe(32)
        self.store.set(token, user.id, self.max_age)
        return self._sign(token)

    def resolve_session(self, cookie_value: Optional[str], storage) -> Optional[User]:
        """
        Map a cookie back to its user, re-reading the user row every time.
        A session whose user has been deleted resolves to no one.
        """
        token = self._unsign(cookie_value)
        if token is None:
            return None
        user_id = self.store.get(token)
        if user_id is None:
            return None
        user = storage.get_user(user_id)
        if user is None:
            self.store.destroy(token)
        return user

    def destroy_session(self, cookie_value: Optional[str]) -> None:
        token = self._unsign(cookie_value)
        if token is not None:
            self.store.destroy(token)


def build_session_manager(settings, session_factory: Optional[sessionmaker] = None) -> SessionManager:
    if settings.SESSION_BACKEND == "memory":
        store = InMemorySessionStore()
    else:
        if session_factory is None:
            from app.database import SessionLocal
            session_factory = SessionLocal
        store = DatabaseSessionStore(session_factory)
    logger.info(f"Using {settings.SESSION_BACKEND} session store")
    return SessionManager(
        store,
        secret_key=settings.SESSION_SECRET_KEY,
        algorithm=settings.SESSION_ALGORITHM,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
    )
