"""Settings for the store-owner failure mailer."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

_Number = TypeVar("_Number", int, float)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class SMTPSettings:
    """Connection details for the SMTP relay."""

    host: str = "localhost"
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    timeout_seconds: float = 30.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class EmailConfig:
    """How failure emails are sent and how hard each caller retries.

    ``inline_attempts`` bounds the send made while a widget request is being
    answered; ``dispatch_attempts`` and ``backoff_seconds`` apply to the
    background dispatcher that re-sends pending failure-log entries.
    """

    provider_name: str = "dev"
    from_email: str = "noreply@example.com"
    dashboard_url: str = "http://localhost:5173"
    smtp: SMTPSettings = SMTPSettings()
    inline_attempts: int = 1
    dispatch_attempts: int = 3
    backoff_seconds: float = 2.0


def _flag(env: Mapping[str, str], key: str, *, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def _number(
    env: Mapping[str, str],
    key: str,
    cast: Callable[[str], _Number],
    *,
    default: _Number,
    minimum: Optional[_Number] = None,
) -> _Number:
    raw = (env.get(key) or "").strip()
    if not raw:
        value = default
    else:
        try:
            value = cast(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be a number, got {raw!r}") from exc
    if minimum is not None and value < minimum:
        return minimum
    return value


def load_smtp_settings(env: Mapping[str, str]) -> SMTPSettings:
    return SMTPSettings(
        host=env.get("SMTP_HOST") or "localhost",
        port=_number(env, "SMTP_PORT", int, default=587, minimum=1),
        username=env.get("SMTP_USER") or None,
        password=env.get("SMTP_PASS") or None,
        use_tls=_flag(env, "SMTP_USE_TLS", default=True),
        timeout_seconds=_number(env, "SMTP_TIMEOUT", float, default=30.0, minimum=1.0),
    )


def load_email_config(env: Optional[Mapping[str, str]] = None) -> EmailConfig:
    """Build an :class:`EmailConfig` from ``env`` (``os.environ`` by default)."""

    env_mapping = os.environ if env is None else env
    provider_name = (env_mapping.get("EMAIL_PROVIDER") or "").strip().lower() or "dev"
    dashboard_url = env_mapping.get("DASHBOARD_URL") or "http://localhost:5173"

    return EmailConfig(
        provider_name=provider_name,
        from_email=env_mapping.get("FROM_EMAIL") or "noreply@example.com",
        dashboard_url=dashboard_url.rstrip("/"),
        smtp=load_smtp_settings(env_mapping),
        inline_attempts=_number(env_mapping, "EMAIL_INLINE_ATTEMPTS", int, default=1, minimum=1),
        dispatch_attempts=_number(env_mapping, "EMAIL_MAX_ATTEMPTS", int, default=3, minimum=1),
        backoff_seconds=_number(env_mapping, "EMAIL_RETRY_BACKOFF", float, default=2.0, minimum=0.0),
    )


__all__ = ["EmailConfig", "SMTPSettings", "load_email_config", "load_smtp_settings"]
