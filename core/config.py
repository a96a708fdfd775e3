from __future__ import annotations
import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Base .env load first
load_dotenv()

TOKEN_KEY = "ledgeros_token"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # ignore unknown env keys to avoid crashes
    )

    # Environment
    environment: Literal["development", "staging", "production", "test"] = Field(default="development")
    log_level: str = Field(default="INFO")
    app_port: int = Field(default=8501, ge=1, le=65535)

    # Backend
    backend_url: str = Field(default=os.getenv("BACKEND_URL", "http://localhost:8001"))
    api_prefix: str = Field(default="/api")
    request_timeout: float = Field(default=30.0, gt=0)

    # Upload policy
    max_upload_mb: int = Field(default=20, ge=1)
    allowed_statement_ext: tuple[str, ...] = ("pdf", "csv", "xls", "xlsx")

    # Page behaviour
    recent_txn_limit: int = Field(default=100, ge=1)
    financial_years: tuple[str, ...] = ("2024-25", "2023-24", "2022-23")
    min_password_length: int = Field(default=4, ge=1)

    # Paths
    data_dir: Path = Field(default=Path(os.getenv("DATA_DIR", "data")))
    logs_dir: Path = Field(default=Path(os.getenv("LOGS_DIR", "data/output")))
    log_file: Path | None = None
    token_key: str = TOKEN_KEY

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = str(value).upper() if value else "INFO"
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
        if level not in allowed:
            # Fallback to INFO instead of raising to avoid boot failure
            return "INFO"
        return level

    @field_validator("api_prefix", mode="before")
    @classmethod
    def _normalize_prefix(cls, value: str | None) -> str:
        prefix = str(value or "").strip().strip("/")
        return f"/{prefix}" if prefix else ""

    @model_validator(mode="after")
    def _derive_paths_and_ensure_dirs(self) -> "AppConfig":
        # Layered environment loading: .env.<ENVIRONMENT> overrides base
        env_file_variant = Path(f".env.{self.environment}")
        if env_file_variant.exists():
            load_dotenv(dotenv_path=env_file_variant, override=True)
            self.backend_url = os.getenv("BACKEND_URL", self.backend_url)

        if self.log_file is None:
            self.log_file = self.logs_dir / "app.log"

        # Ensure directories exist
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        return self

    @property
    def api_base_url(self) -> str:
        return f"{self.backend_url.rstrip('/')}{self.api_prefix}"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


config = AppConfig()
