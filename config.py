# config.py
"""
Application configuration settings.

Values come from environment variables (and a local .env file).
Usage:
     from config import settings
     settings.DATABASE_URL
"""
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env
load_dotenv()


class Settings(BaseSettings):
     """Settings loaded from environment variables."""

     model_config = SettingsConfigDict(
          env_file=".env",
          env_file_encoding="utf-8",
          extra="ignore",
     )

     # Application
     APP_NAME: str = "Lease Payments API"
     DEBUG: bool = False
     LOG_LEVEL: str = "INFO"
     PORT: int = 10000

     # Database
     DATABASE_URL: Optional[str] = None  # overrides the DB_* parts below
     DB_SERVER: Optional[str] = None
     DB_PORT: str = "1433"
     DB_USER: Optional[str] = None
     DB_PASS: Optional[str] = None
     DB_NAME: Optional[str] = None
     SQL_ECHO: bool = False
     DB_POOL_SIZE: int = 5
     DB_MAX_OVERFLOW: int = 10
     DB_POOL_TIMEOUT: int = 30
     DB_POOL_RECYCLE: int = 1800  # Recycle connections after 30 minutes

     # Security
     JWT_SECRET: str = "change-me"
     JWT_ALGORITHM: str = "HS256"

     # CORS
     CORS_ORIGINS: str = ""

     # Payments
     MAX_SCHEDULE_PERIODS: int = 10000
     DEFAULT_PAYMENT_METHOD: str = "bank_transfer"

     @property
     def database_url(self) -> str:
          """Explicit DATABASE_URL, else an MS SQL Server URL for pymssql."""
          if self.DATABASE_URL:
               return self.DATABASE_URL
          safe_user = quote_plus(self.DB_USER or "")
          safe_pass = quote_plus(self.DB_PASS or "")
          return (
               f"mssql+pymssql://{safe_user}:{safe_pass}@{self.DB_SERVER}:{self.DB_PORT}/{self.DB_NAME}"
          )

     @property
     def cors_origins(self) -> List[str]:
          return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
     """Cached settings instance."""
     return Settings()


settings = get_settings()
