from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./clinicops.db"
    create_tables_on_startup: bool = False

    # JWT (tokens are issued by the identity service; we only verify them)
    secret_key: str = "change-me"
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Scheduling
    default_slot_minutes: int = 30
    # Upper bound on waiting for another request booking the same professional
    schedule_lock_timeout_seconds: float = 10.0

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
