"""Module: config."""

from pydantic_settings import BaseSettings


# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    # Primary SQLAlchemy connection string for the backend database.
    database_url: str = "sqlite:///./hospital_rx.db"
    # Echo SQL statements emitted by the engine (local debugging only).
    database_echo: bool = False
    # Create missing tables on startup; disable when alembic owns the schema.
    auto_create_schema: bool = True
    # Root log level applied by configure_logging.
    log_level: str = "INFO"
    # Frontend origins allowed through CORS.
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Configure pydantic-settings to also load values from local .env file.
    class Config:
        env_file = ".env"
