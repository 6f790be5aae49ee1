"""Flask application serving derived alerts for the dashboard.

``/api/alerts`` takes the same query parameters as the dashboard URL
(``level``, ``source``, ``term``) and returns the filtered display alerts
with the badge counts the filter controls show.
"""

from collections.abc import Callable
from typing import Any

import structlog
from flask import Flask, current_app, jsonify, request

from devhud.alerts import compute_display_alerts, number_of_alerts
from devhud.api.health import health_bp, register_health_check
from devhud.filters import (
    FilterLevel,
    FilterSet,
    LogAlert,
    filter_alerts,
    level_label,
    parse,
    source_counts,
    tag_alerts,
)
from devhud.resources import SnapshotLoadError, View

log = structlog.get_logger()

ViewLoader = Callable[[], View]


def _filter_payload(filter_set: FilterSet) -> dict[str, Any]:
    return {
        "level": filter_set.level.value,
        "source": filter_set.source.value,
        "term": filter_set.term.source_text,
        "invalid": filter_set.term.invalid,
    }


def _alert_payload(tagged: LogAlert) -> dict[str, Any]:
    alert = tagged.alert
    return {
        "alertType": alert.kind.value,
        "resourceName": alert.resource_name,
        "titleMsg": alert.title_text,
        "msg": alert.message,
        "timestamp": alert.timestamp,
        "level": tagged.level.value,
        "source": tagged.source.value,
    }


def _counts_payload(tagged: list[LogAlert]) -> dict[str, Any]:
    counts: dict[str, Any] = {}
    for level in (FilterLevel.WARN, FilterLevel.ERROR):
        by_source = source_counts(tagged, level) or {}
        counts[level.value] = {
            "label": level_label(tagged, level),
            "sources": {source.value or "all": n for source, n in by_source.items()},
        }
    return counts


def alerts_view() -> tuple[Any, int]:
    """Filtered display alerts for the current view."""
    load_view: ViewLoader = current_app.extensions["devhud_view_loader"]
    filter_set = parse(request.query_string.decode("utf-8", errors="replace"))

    try:
        view = load_view()
    except SnapshotLoadError as e:
        log.error("Failed to load view", error=str(e))
        return jsonify({"error": str(e)}), 503

    tagged = tag_alerts(compute_display_alerts(view.resources))
    shown = filter_alerts(filter_set, tagged)

    return jsonify(
        {
            "filter": _filter_payload(filter_set),
            "alerts": [_alert_payload(a) for a in shown],
            "counts": _counts_payload(tagged),
            "resourcesWithAlerts": [
                r.name for r in view.resources if number_of_alerts(r) > 0
            ],
        }
    ), 200


def create_app(
    load_view: ViewLoader,
    service_name: str = "devhud",
    *,
    enable_health: bool = True,
) -> Flask:
    """Create the dashboard API application.

    Args:
        load_view: Called on every request to get the latest view
        service_name: Flask application name, reported by /health
        enable_health: Whether to register /health endpoint

    Returns:
        Configured Flask application
    """
    app = Flask(service_name)
    app.extensions["devhud_view_loader"] = load_view
    app.add_url_rule("/api/alerts", "alerts", alerts_view)

    if enable_health:
        app.register_blueprint(health_bp)

        def view_loads() -> tuple[str, bool]:
            try:
                load_view()
            except SnapshotLoadError:
                return "view", False
            return "view", True

        register_health_check(app, view_loads)

    return app


def run_app(app: Flask, host: str = "127.0.0.1", port: int = 10350, debug: bool = False) -> None:
    """Run the application with the development server."""
    log.info("Starting dashboard API", host=host, port=port)
    app.run(host=host, port=port, debug=debug)
