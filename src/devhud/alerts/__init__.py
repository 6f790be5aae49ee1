"""Alert derivation for monitored resources.

Turns resource snapshots into ordered alert records for counts and display.
"""

from .classifier import (
    Alert,
    AlertKind,
    compute_alerts,
    compute_display_alerts,
    has_alert,
    number_of_alerts,
)

__all__ = [
    "Alert",
    "AlertKind",
    # Existence/count set
    "compute_alerts",
    "has_alert",
    "number_of_alerts",
    # Display set
    "compute_display_alerts",
]
