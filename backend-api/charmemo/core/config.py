"""
Application settings
"""

from pydantic_settings import BaseSettings
from pathlib import Path
from dotenv import load_dotenv


"""env load order
1) OS environment variables
2) repo root .env (repo/.env)
3) backend-api .env (repo/backend-api/.env)
"""

# .env pre-load; OS environment wins (override=False)
_here = Path(__file__).resolve()
_repo_root_env = _here.parents[3] / ".env"
_backend_env = _here.parents[2] / ".env"
for _p in (_repo_root_env, _backend_env):
    if _p.exists():
        load_dotenv(dotenv_path=str(_p), override=False)


DEFAULT_JWT_SECRET = "change-this-secret-in-production"


class Settings(BaseSettings):
    """Application settings"""
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite:///./data/charmemo.db"

    # JWT (tokens are issued by the identity provider; we only verify)
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'


def validate_settings(settings: Settings) -> bool:
    """Validate settings"""
    if settings.ENVIRONMENT == "production":
        if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be changed in production.")
        if settings.DATABASE_URL.startswith("sqlite"):
            raise ValueError("SQLite is not supported in production; set DATABASE_URL.")
    return True


def get_settings() -> Settings:
    """Load and validate settings from the environment"""
    settings = Settings()
    validate_settings(settings)
    return settings
