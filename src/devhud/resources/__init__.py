"""Monitored resource snapshots."""

from .loader import SnapshotLoadError, load_view, load_view_from_data, load_view_from_string
from .models import (
    POD_CRASH_STATUSES,
    POD_ERROR_STATUSES,
    ZERO_TIME,
    Build,
    PodInfo,
    ResourceSnapshot,
    View,
    pod_status_is_crash,
    pod_status_is_error,
)

__all__ = [
    # Models
    "Build",
    "PodInfo",
    "ResourceSnapshot",
    "View",
    # Pod status sets
    "POD_ERROR_STATUSES",
    "POD_CRASH_STATUSES",
    "pod_status_is_error",
    "pod_status_is_crash",
    "ZERO_TIME",
    # Loading
    "load_view",
    "load_view_from_data",
    "load_view_from_string",
    "SnapshotLoadError",
]
