"""
Script to create the default dashboard users
Run: python create_admin.py
"""
from app.database import SessionLocal, engine, Base
from app.models import UserRole
from app.schemas.users import UserCreate
from app.services.auth_service import ConflictError, register_user
from app.services.storage import DatabaseStorage

DEFAULT_USERS = [
    UserCreate(
        username="admin",
        password="admin123",
        full_name="Admin User",
        email="admin@intered.com",
        role=UserRole.ADMIN,
    ),
    UserCreate(
        username="staff",
        password="staff123",
        full_name="Staff User",
        email="staff@intered.com",
        role=UserRole.STAFF,
    ),
]

def create_default_users():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        storage = DatabaseStorage(db)
        if storage.get_users():
            print("Users already exist, skipping user creation.")
            return

        for candidate in DEFAULT_USERS:
            try:
                user = register_user(storage, candidate)
            except ConflictError:
                print(f"User '{candidate.username}' already exists!")
                continue
            print(f"✓ User created successfully!")
            print(f"  Username: {user.username}")
            print(f"  Role: {user.role.value}")
        print("Change the default passwords before going to production.")
    finally:
        db.close()

if __name__ == "__main__":
    create_default_users()
