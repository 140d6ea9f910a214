"""Application settings loaded from the environment."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

_STORAGE_BACKENDS = ("memory", "postgres")


def _parse_connect_timeout(raw_value: str) -> int:
    try:
        timeout = float(raw_value)
    except ValueError as exc:
        raise ValueError("DB_CONNECT_TIMEOUT must be a number") from exc
    if timeout < 0:
        raise ValueError("DB_CONNECT_TIMEOUT must be non-negative")
    return int(math.ceil(timeout))


@dataclass(frozen=True)
class Settings:
    """Runtime settings for storage and HTTP."""

    storage_backend: str = "memory"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "sticky_reviewer"
    db_user: str = "postgres"
    db_password: Optional[str] = None
    db_connect_timeout: int = 5
    cors_origins: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def uses_postgres(self) -> bool:
        return self.storage_backend == "postgres"

    def database_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "host": self.db_host,
            "port": self.db_port,
            "dbname": self.db_name,
            "user": self.db_user,
            "connect_timeout": self.db_connect_timeout,
        }
        if self.db_password:
            params["password"] = self.db_password
        return params


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Load :class:`Settings` from environment variables."""

    env_mapping = os.environ if env is None else env

    backend = (env_mapping.get("STORAGE_BACKEND") or "memory").strip().lower()
    if backend not in _STORAGE_BACKENDS:
        raise ValueError(f"STORAGE_BACKEND must be one of {_STORAGE_BACKENDS}, got {backend!r}")

    origins = tuple(
        origin.strip()
        for origin in (env_mapping.get("CORS_ORIGINS") or "").split(",")
        if origin.strip()
    )

    return Settings(
        storage_backend=backend,
        db_host=env_mapping.get("DB_HOST", "localhost"),
        db_port=int(env_mapping.get("DB_PORT", "5432")),
        db_name=env_mapping.get("DB_NAME", "sticky_reviewer"),
        db_user=env_mapping.get("DB_USER", "postgres"),
        db_password=env_mapping.get("DB_PASSWORD") or None,
        db_connect_timeout=_parse_connect_timeout(env_mapping.get("DB_CONNECT_TIMEOUT") or "5"),
        cors_origins=origins,
    )
