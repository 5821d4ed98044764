import os
from dataclasses import dataclass, field
from pathlib import Path

def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

@dataclass(frozen=True)
class Config:
    # Storage
    BASE_DIR: Path = Path(__file__).resolve().parent
    DATA_DIR: Path = BASE_DIR / "data"

    # DB
    # Read at construction time so values from .env (loaded in app.py) are picked up.
    # Empty means "practice.db inside DATA_DIR", resolved in __post_init__.
    DATABASE_URL: str = field(default_factory=lambda: os.getenv("DATABASE_URL", ""))
    SQL_ECHO: bool = field(default_factory=lambda: _env_bool("SQL_ECHO"))

    # HTTP
    API_PREFIX: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api").rstrip("/"))
    # Comma separated list, or "*"
    CORS_ORIGINS: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))

    # Logging
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Security / limits
    MAX_CONTENT_LENGTH_BYTES: int = field(
        default_factory=lambda: int(os.getenv("MAX_CONTENT_LENGTH_BYTES", str(1024 * 1024)))  # 1 MB
    )

    def __post_init__(self) -> None:
        if not self.DATABASE_URL:
            # frozen dataclass: bypass __setattr__ for the derived default
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{(self.DATA_DIR / 'practice.db').as_posix()}")

    def cors_origins(self) -> str | list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return "*"
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

def ensure_dirs(cfg: Config) -> None:
    cfg.DATA_DIR.mkdir(parents=True, exist_ok=True)
