from pydantic import model_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from pathlib import Path
import logging
import os

_logger = logging.getLogger(__name__)

# Look for .env in api directory (parent of app directory)
api_dir = Path(__file__).parent.parent.parent
env_path = api_dir / ".env"

if env_path.exists():
    load_dotenv(env_path, override=True)
    _logger.info(f"Loaded .env file from: {env_path}")
else:
    # Fallback to current directory
    current_env = Path(".env")
    if current_env.exists():
        load_dotenv(current_env, override=True)
        _logger.info(f"Loaded .env file from: {current_env.absolute()}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - hosting providers expose DATABASE_URL (uppercase)
    database_url: str = ""

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]

    # Sandbox (Piston-compatible code execution service)
    sandbox_url: str = "https://emkc.org/api/v2/piston"
    sandbox_language: str = "python"
    sandbox_version: str = "3.11"
    sandbox_run_timeout_ms: int = 10000  # Enforced by the sandbox itself
    sandbox_memory_limit_bytes: int = 100000000  # 100MB
    sandbox_request_timeout_ms: int = 15000  # Enforced by our HTTP client

    # Dashboard
    dashboard_recent_limit: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        # Ensure we read DATABASE_URL from environment (hosting providers set it uppercase)
        if not kwargs.get("database_url"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        super().__init__(**kwargs)

    @model_validator(mode="after")
    def check_sandbox_timeouts(self):
        # The sandbox must be able to report its own timeout before the transport gives up
        if self.sandbox_request_timeout_ms <= self.sandbox_run_timeout_ms:
            raise ValueError(
                "sandbox_request_timeout_ms must be greater than sandbox_run_timeout_ms "
                f"(got {self.sandbox_request_timeout_ms} <= {self.sandbox_run_timeout_ms})"
            )
        return self


# Create settings instance
settings = Settings()

# Validate required DATABASE_URL
if not settings.database_url:
    raise ValueError("DATABASE_URL environment variable is required")
