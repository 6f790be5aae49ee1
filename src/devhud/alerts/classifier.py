"""Alert derivation from resource snapshots.

Two result sets are derived and they intentionally differ:

- ``compute_alerts`` is the runtime set. It only covers pod problems, and its checks are independent, so a pod in an error
  status that has also restarted yields two alerts.
- ``compute_display_alerts`` is the list shown to the user. Pod status
  error, restart and crash-rebuild form an if/elif chain (at most one of them
  per resource), followed by the build failure and every build warning.

The two are kept as separate functions. ``has_alert`` and
``number_of_alerts`` count the display list, so a resource whose only
problem is a failed build still has an alert.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from devhud.resources.models import ResourceSnapshot

log = structlog.get_logger()


class AlertKind(Enum):
    """Alert type tags. Values match the tags the dashboard has always emitted."""

    POD_STATUS_ERROR = "PodStatusError"
    POD_RESTART = "PodRestartError"
    CRASH_REBUILD = "ResourceCrashRebuild"
    BUILD_FAILED = "BuildError"
    WARNING = "Warning"


@dataclass(frozen=True)
class Alert:
    """A user-facing notice about one resource."""

    kind: AlertKind
    title_text: str
    message: str
    timestamp: str  # Opaque, formatted by the presentation layer
    resource_name: str = ""


def pod_status_error_alert(resource: ResourceSnapshot) -> Alert:
    pod = resource.pod_info
    msg = resource.crash_log if resource.is_pod_status_crash() else ""
    msg = msg or pod.pod_status_message or f"Pod has status {pod.pod_status}"
    return Alert(
        kind=AlertKind.POD_STATUS_ERROR,
        title_text=resource.name,
        message=msg,
        timestamp=pod.pod_creation_time,
        resource_name=resource.name,
    )


def pod_restart_alert(resource: ResourceSnapshot) -> Alert:
    return Alert(
        kind=AlertKind.POD_RESTART,
        title_text=f"Restarts:{resource.pod_info.pod_restarts}",
        message=resource.crash_log or "",
        timestamp=resource.pod_info.pod_creation_time,
        resource_name=resource.name,
    )


def crash_rebuild_alert(resource: ResourceSnapshot) -> Alert:
    return Alert(
        kind=AlertKind.CRASH_REBUILD,
        title_text="Pod crashed",
        message=resource.crash_log or "",
        timestamp=resource.pod_info.pod_creation_time,
        resource_name=resource.name,
    )


def build_failed_alert(resource: ResourceSnapshot) -> Alert:
    """Alert for a failed last build. Only valid when ``resource.build_failed()``."""
    last = resource.build_history[0]
    return Alert(
        kind=AlertKind.BUILD_FAILED,
        title_text=resource.name,
        message=last.log or "",
        timestamp=last.finish_time,
        resource_name=resource.name,
    )


def warning_alerts(resource: ResourceSnapshot) -> list[Alert]:
    last = resource.last_build()
    if last is None:
        return []
    return [
        Alert(
            kind=AlertKind.WARNING,
            title_text=resource.name,
            message=warning,
            timestamp=last.finish_time,
            resource_name=resource.name,
        )
        for warning in last.warnings
    ]


def compute_alerts(resource: ResourceSnapshot) -> list[Alert]:
    """Compute the runtime alerts: pod status error, restart and crash rebuild.

    Build failures and warnings are not part of this set.

    Args:
        resource: Latest snapshot of the resource

    Returns:
        Pod status error, restart and crash-rebuild alerts, each checked independently
    """
    alerts: list[Alert] = []

    if resource.is_pod_status_error():
        alerts.append(pod_status_error_alert(resource))
    if resource.pod_restarted():
        alerts.append(pod_restart_alert(resource))
    if resource.is_crash_rebuild():
        alerts.append(crash_rebuild_alert(resource))

    return alerts


def compute_display_alerts(resources: Iterable[ResourceSnapshot]) -> list[Alert]:
    """Compute the alert list shown to the user.

    Resources keep their input order. Within a resource the order is: one
    runtime alert (status error, else restart, else crash rebuild), the build
    failure, then each warning. Nothing is re-sorted by timestamp.

    Args:
        resources: Latest snapshots, in display order

    Returns:
        Alerts in display order
    """
    alerts: list[Alert] = []

    for resource in resources:
        if resource.is_pod_status_error():
            alerts.append(pod_status_error_alert(resource))
        elif resource.pod_restarted():
            alerts.append(pod_restart_alert(resource))
        elif resource.is_crash_rebuild():
            alerts.append(crash_rebuild_alert(resource))

        if resource.build_failed():
            alerts.append(build_failed_alert(resource))

        alerts.extend(warning_alerts(resource))

    log.debug("Computed display alerts", count=len(alerts))
    return alerts


def number_of_alerts(resource: ResourceSnapshot) -> int:
    """Number of alerts the resource shows, build failures and warnings included."""
    return len(compute_display_alerts([resource]))


def has_alert(resource: ResourceSnapshot) -> bool:
    return number_of_alerts(resource) > 0
