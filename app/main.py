# /school-backend/app/main.py

# --- Core FastAPI Imports ---
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# --- Application-specific Imports ---
from .core import config
from .core.cache import get_cache
from .core.exception_handlers import register_exception_handlers
from .core.logging_config import get_logger
from .core.middleware import RequestContextMiddleware
from .routers import (
    auth_router,
    schools_router,
    rbac_router,
    students_router,
    projects_router,
    project_grades_router,
    project_feedback_router,
    project_files_router,
    blocks_router,
    classrooms_router,
    departments_router,
)

logger = get_logger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = get_cache()
    logger.info(f"{config.PROJECT_NAME} starting ({config.ENVIRONMENT}); cache enabled: {cache.enabled}")
    yield
    logger.info(f"{config.PROJECT_NAME} shutting down")


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title=config.PROJECT_NAME,
    description="Multi-school management API: accounts, projects, grading, feedback and school configuration.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

# --- API Router Inclusion ---
api = config.API_PREFIX
app.include_router(auth_router.router, prefix=f"{api}/auth", tags=["Auth"])
app.include_router(schools_router.router, prefix=f"{api}/schools", tags=["Schools"])
app.include_router(rbac_router.router, prefix=f"{api}/rbac", tags=["RBAC"])
app.include_router(students_router.router, prefix=f"{api}/students", tags=["Students"])
app.include_router(projects_router.router, prefix=f"{api}/projects", tags=["Projects"])
app.include_router(project_grades_router.router, prefix=f"{api}/project-grades", tags=["Project Grades"])
app.include_router(project_feedback_router.router, prefix=f"{api}/project-feedback", tags=["Project Feedback"])
app.include_router(project_files_router.router, prefix=f"{api}/project-files", tags=["Project Files"])
app.include_router(blocks_router.router, prefix=f"{api}/blocks", tags=["Blocks"])
app.include_router(classrooms_router.router, prefix=f"{api}/classrooms", tags=["Classrooms"])
app.include_router(departments_router.router, prefix=f"{api}/departments", tags=["Departments"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": f"{config.PROJECT_NAME} is running!", "version": app.version}
