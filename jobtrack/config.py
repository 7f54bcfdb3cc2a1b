"""
JobTrack configuration.

Every field can be set from the environment (or a local .env file) using the
JOBTRACK_ prefix, e.g. JOBTRACK_DATABASE_URL or JOBTRACK_SINGLE_USER_MODE.
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


_EnvConfig = SettingsConfigDict(env_prefix="JOBTRACK_", env_file=".env", extra="ignore")


class AuthSettings(BaseSettings):
    """
    Sign-in options.

    A local install runs in single-user mode: every request acts as one
    implicit account and nothing asks for a password. Hosted installs turn
    that off and must set a real secret key (e.g. `openssl rand -hex 32`).
    Google and GitHub buttons appear once both halves of their credentials
    are present.
    """
    single_user_mode: bool = True
    secret_key: str = "jobtrack-insecure-local-key"
    jwt_algorithm: str = "HS256"
    session_hours: int = 12
    reset_link_minutes: int = 60
    min_password_length: int = 6

    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    github_client_id: Optional[str] = None
    github_client_secret: Optional[str] = None

    model_config = _EnvConfig


class EmailSettings(BaseSettings):
    """Outgoing mail for password reset links. Resend is used when its key is set, SMTP otherwise."""
    resend_api_key: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    sender: str = "JobTrack <noreply@jobapplytracker.com>"

    model_config = _EnvConfig


class Settings(BaseSettings):
    auth: AuthSettings = AuthSettings()
    email: EmailSettings = EmailSettings()

    # Comma separated; "*" allows any origin
    allowed_origins: str = "*"
    # Used to build links in outgoing mail
    base_url: str = "http://localhost:8000"

    database_url: str = "sqlite:///./data/jobtrack.db"
    # Pool sizing, ignored for SQLite
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800
    # Transient-error retries for read paths
    db_retry_max_attempts: int = 3
    db_retry_base_delay: float = 0.1

    analytics_weeks: int = 12

    model_config = _EnvConfig


settings = Settings()
