"""
Environment configuration for the communications portal.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @staticmethod
    def get_secret_key_default() -> str:
        """Generate a default secret key if not provided"""
        import secrets
        return secrets.token_urlsafe(32)

    # Application configuration
    APP_NAME: str = "Communications Portal"
    API_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default=["*"])

    # Database configuration
    DATABASE_URL: str = "sqlite:///./portal.db"
    DB_POOL_SIZE: int = 10
    DB_POOL_OVERFLOW: int = 5
    DB_ECHO: bool = False
    INIT_DB_ON_STARTUP: bool = True

    # Security configuration
    JWT_SECRET_KEY: str = Field(default_factory=lambda: Settings.get_secret_key_default())
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Staff roles: email -> role, role -> ministries the role may approve
    USER_ROLES: Annotated[Dict[str, str], NoDecode] = Field(default_factory=dict)
    DEFAULT_USER_ROLE: str = "approver"
    APPROVER_SCOPES: Annotated[Dict[str, List[str]], NoDecode] = Field(
        default_factory=lambda: {
            "approver": [
                "Adult Faith Formation",
                "Adult Discipleship Retreat",
                "Adult Bible Study",
            ]
        }
    )

    # Approval workflow
    APPROVAL_MAX_BULK_SIZE: int = 100
    DEFAULT_APPROVAL_COORDINATOR: str = "adult-discipleship"
    APPROVAL_COORDINATOR_EMAILS: Annotated[Dict[str, str], NoDecode] = Field(default_factory=dict)

    # Notifications
    NOTIFICATION_BACKEND: str = "log"
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    SMTP_TIMEOUT: int = 30
    EMAIL_FROM_NAME: str = "Parish Communications"
    EMAIL_FROM_ADDRESS: Optional[str] = None

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True
    SENTRY_DSN: Optional[str] = None

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Any) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            # Handle JSON string format from .env
            if v.startswith('[') and v.endswith(']'):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return _split_csv(v)
        return v

    @field_validator('USER_ROLES', 'APPROVAL_COORDINATOR_EMAILS', mode='before')
    @classmethod
    def parse_string_mapping(cls, v: Any) -> Dict[str, str]:
        """Parse ``a=b,c=d`` or a JSON object into a mapping."""
        if isinstance(v, str):
            if v.strip().startswith('{'):
                return json.loads(v)
            mapping = {}
            for pair in _split_csv(v):
                key, _, value = pair.partition('=')
                mapping[key.strip()] = value.strip()
            return mapping
        return v

    @field_validator('USER_ROLES', mode='after')
    @classmethod
    def normalise_role_emails(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {email.strip().lower(): role for email, role in v.items()}

    @field_validator('APPROVER_SCOPES', mode='before')
    @classmethod
    def parse_approver_scopes(cls, v: Any) -> Dict[str, List[str]]:
        """Parse APPROVER_SCOPES from a JSON object of role -> ministry names"""
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator('NOTIFICATION_BACKEND')
    @classmethod
    def validate_notification_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in {"email", "log"}:
            raise ValueError("NOTIFICATION_BACKEND must be 'email' or 'log'")
        return v

    def get_database_url(self) -> str:
        return self.DATABASE_URL

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
