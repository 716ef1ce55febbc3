from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.database import engine, Base
from app.routers import (
    auth, users, students, universities, programs, agents, applications, stats
)
from app.services.session_store import build_session_manager
from app.config import settings
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create database tables
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        # Don't fail startup if tables already exist
    yield
    # Shutdown: cleanup if needed
    logger.info("Shutting down...")

app = FastAPI(
    title="InterEd Admin API",
    description="Back-office API for students, agents, universities and applications",
    version="1.0.0",
    lifespan=lifespan
)

app.state.session_manager = build_session_manager(settings)

# CORS middleware
# Parse ALLOWED_ORIGINS from comma-separated string, strip whitespace
allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]

logger.info(f"CORS allowed origins: {allowed_origins}")

# Session cookies need credentials, so a wildcard origin is not an option
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())}},
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(students.router, prefix="/api/students", tags=["students"])
app.include_router(universities.router, prefix="/api/universities", tags=["universities"])
app.include_router(programs.router, prefix="/api/programs", tags=["programs"])
app.include_router(agents.router, prefix="/api/agents", tags=["agents"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])

@app.get("/")
async def root():
    return {"message": "InterEd Admin API", "status": "running"}

@app.get("/health")
async def health():
    return {"status": "healthy"}
