# /school-backend/app/core/config.py

"""
Central configuration module. Loads environment variables from the .env file
and exposes them as typed, module-level constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# --- Application ---
PROJECT_NAME: str = os.getenv("PROJECT_NAME", "School Management API")
ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
API_PREFIX: str = os.getenv("API_PREFIX", "/api/v1")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

_raw_origins = os.getenv("CORS_ORIGINS", "*")
CORS_ORIGINS: list = [origin.strip() for origin in _raw_origins.split(",") if origin.strip()]

# --- Database ---
# The second argument is a default value for local development.
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./school.db")

# --- Cache (Redis) ---
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CACHE_ENABLED: bool = os.getenv("CACHE_ENABLED", "true").lower() == "true"
CACHE_DEFAULT_TTL: int = int(os.getenv("CACHE_DEFAULT_TTL", "600"))
CACHE_STATISTICS_TTL: int = int(os.getenv("CACHE_STATISTICS_TTL", "300"))

# --- Security ---
JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# --- File Storage ---
UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_BASE_URL: str = os.getenv("UPLOAD_BASE_URL", "/uploads")
MAX_UPLOAD_SIZE: int = int(os.getenv("MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))

# --- Pagination ---
DEFAULT_PAGE_SIZE: int = 10
MAX_PAGE_SIZE: int = 100
