from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "helpdesk-tickets"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./tickets.db"
    SQL_ECHO: bool = False

    # Token Configuration
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 8

    # Startup Configuration
    SEED_ADMIN: bool = True  # Set to False to skip creating the initial technician account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_NOMBRE: str = "Administrador"
    ADMIN_EMAIL: Optional[str] = None

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    CORS_ORIGINS: str = "http://localhost,http://localhost:3000,http://localhost:4200"

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins parsed from the comma separated CORS_ORIGINS value"""
        raw = self.CORS_ORIGINS.strip().strip('"').strip("'")
        return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"  # Ignora variables extras del .env
    )
