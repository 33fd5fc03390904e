"""Config validation and diagnostic reporting for mailticks."""

from __future__ import annotations

from typing import Any

from mailticks.config import Config
from mailticks.models import DetailLevel


def check_config(config: Config) -> dict[str, Any]:
    """Validate config and return a diagnostic report.

    Returns a dict with:
        detail_level: The configured analytics detail level
        event_sink: Where telemetry events are written
        errors: List of critical errors that prevent sending
        warnings: List of settings that probably aren't what you want
    """
    errors: list[dict[str, str]] = []
    warnings: list[dict[str, str]] = []
    smtp = config.smtp

    if not config.from_address:
        errors.append(
            {"field": "from_address", "message": "No from address configured"}
        )
    if not smtp.host:
        errors.append({"field": "smtp.host", "message": "No SMTP host"})
    if not 0 < smtp.port < 65536:
        errors.append(
            {
                "field": "smtp.port",
                "message": f"Port {smtp.port} is out of range",
            }
        )

    if smtp.auth and not smtp.username:
        warnings.append(
            {
                "field": "smtp.username",
                "message": "Authentication is enabled without a username",
            }
        )
    if smtp.password and config.detail_level.atleast(DetailLevel.DETAILED):
        warnings.append(
            {
                "field": "smtp.password",
                "message": (
                    "The SMTP password is included in the options field"
                    f" of events at detail level {config.detail_level.value}"
                ),
            }
        )
    if config.detail_level == DetailLevel.FULL:
        warnings.append(
            {
                "field": "detail_level",
                "message": "Complete message bodies will be logged",
            }
        )
    if not config.otel.endpoint:
        warnings.append(
            {
                "field": "otel.endpoint",
                "message": "No OTLP endpoint, spans won't be exported",
            }
        )

    return {
        "detail_level": config.detail_level.value,
        "event_sink": config.event_sink.value,
        "errors": errors,
        "warnings": warnings,
    }
