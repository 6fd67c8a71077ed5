"""Settings"""
from pydantic_settings import BaseSettings
from typing import Optional
import os

from report_engine.schemas import AnalysisVariant

# Resolve project root (directory containing config/ and backend/) so .env is found regardless of cwd
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")
_SQLITE_PATH = os.path.join(_PROJECT_ROOT, "market_reports.db")

class Settings(BaseSettings):
    APP_NAME: str = "Market Report Studio"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = f"sqlite:///{_SQLITE_PATH}"
    API_PREFIX: str = "/api"
    BACKEND_CORS_ORIGINS: list = ["*"]
    # Uploads
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024
    # Spool directory for transient PDF preview files; a temp dir is created when unset
    BLOB_DIR: Optional[str] = None
    # Fixed storage keys for the whole-document key/value store
    FILES_STORAGE_KEY: str = "market_reports_files_v2"
    CUSTOMERS_STORAGE_KEY: str = "market_reports_customers_v1"
    # Analysis: anthropic | openai | gemini
    ANALYSIS_PROVIDER: str = "anthropic"
    # general | energy | customer
    ANALYSIS_VARIANT: AnalysisVariant = AnalysisVariant.GENERAL
    ANALYSIS_LANGUAGE: str = "English"
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_MAX_TOKENS: int = 8192
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-pro"

    class Config:
        case_sensitive = True
        env_file = _ENV_PATH
        env_file_encoding = "utf-8"
        extra = "ignore"

    def api_key_for(self, provider: str) -> Optional[str]:
        """Return the stripped credential for a provider, or None when unset/blank."""
        raw = {
            "anthropic": self.ANTHROPIC_API_KEY,
            "openai": self.OPENAI_API_KEY,
            "gemini": self.GEMINI_API_KEY,
        }.get(provider)
        raw = (raw or "").strip()
        return raw or None

    def model_for(self, provider: str) -> str:
        return {
            "anthropic": self.ANTHROPIC_MODEL,
            "openai": self.OPENAI_MODEL,
            "gemini": self.GEMINI_MODEL,
        }[provider]
