"""Health check blueprint for the dashboard API."""

from collections.abc import Callable
from typing import Any

import structlog
from flask import Blueprint, current_app, jsonify

log = structlog.get_logger()

health_bp = Blueprint("health", __name__)

HealthCheck = Callable[[], tuple[str, bool]]


@health_bp.route("/health")
def health_check() -> tuple[Any, int]:
    """Report the result of every registered check."""
    checks = {}
    all_healthy = True

    for check in current_app.extensions.get("devhud_health_checks", []):
        try:
            name, healthy = check()
        except Exception:
            log.exception("Health check raised", check=check.__name__)
            name, healthy = check.__name__, False
        checks[name] = healthy
        all_healthy = all_healthy and healthy

    status = "ok" if all_healthy else "degraded"
    return jsonify({"status": status, "service": current_app.name, "checks": checks}), (
        200 if all_healthy else 503
    )


def register_health_check(app: Any, check: HealthCheck) -> None:
    """Register a function returning a (name, is_healthy) tuple."""
    app.extensions.setdefault("devhud_health_checks", []).append(check)
