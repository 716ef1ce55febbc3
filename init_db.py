"""
Database initialization script
Run this to create all tables
"""
from app.database import engine, Base
from app.models import *

def init_database():
    """Create all tables"""
    Base.metadata.create_all(bind=engine)
    print("Database initialized successfully!")

if __name__ == "__main__":
    init_database()
