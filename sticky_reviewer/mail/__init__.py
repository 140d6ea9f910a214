"""Outbound email: configuration, providers and templates."""

from .config import EmailConfig, SMTPSettings, load_email_config
from .providers import DevPrintProvider, EmailProvider, SMTPProvider, create_email_provider
from .renderer import render_provider_failure, render_subject_body

__all__ = [
    "DevPrintProvider",
    "EmailConfig",
    "EmailProvider",
    "SMTPProvider",
    "SMTPSettings",
    "create_email_provider",
    "load_email_config",
    "render_provider_failure",
    "render_subject_body",
]
