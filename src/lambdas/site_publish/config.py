# src/lambdas/site_publish/config.py
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError


def env(name: str, default: str = "") -> str:
    return os.environ.get(name, default)


def region() -> str:
    return env("AWS_REGION") or env("AWS_DEFAULT_REGION") or "us-east-1"


@dataclass(frozen=True)
class Settings:
    staging_root: str
    max_upload_workers: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        raw_workers = env("MAX_UPLOAD_WORKERS").strip()
        workers = None
        if raw_workers:
            try:
                workers = int(raw_workers)
            except ValueError as e:
                raise ConfigurationError(f"MAX_UPLOAD_WORKERS must be an integer, got {raw_workers!r}", e) from e
            if workers < 1:
                raise ConfigurationError(f"MAX_UPLOAD_WORKERS must be positive, got {workers}")

        return cls(
            staging_root=env("STAGING_ROOT") or tempfile.gettempdir(),
            max_upload_workers=workers,
            log_level=env("LOG_LEVEL", "INFO").upper(),
        )
