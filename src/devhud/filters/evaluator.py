"""Evaluate a FilterSet against alerts and log lines."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from devhud.alerts.classifier import Alert, AlertKind
from devhud.filters.codec import FilterLevel, FilterSet, FilterSource, FilterTerm

# Level and source for each alert kind
ALERT_TAGS: dict[AlertKind, tuple[FilterLevel, FilterSource]] = {
    AlertKind.POD_STATUS_ERROR: (FilterLevel.ERROR, FilterSource.RUNTIME),
    AlertKind.POD_RESTART: (FilterLevel.ERROR, FilterSource.RUNTIME),
    AlertKind.CRASH_REBUILD: (FilterLevel.ERROR, FilterSource.RUNTIME),
    AlertKind.BUILD_FAILED: (FilterLevel.ERROR, FilterSource.BUILD),
    AlertKind.WARNING: (FilterLevel.WARN, FilterSource.BUILD),
}

BUILD_SPAN_PREFIXES = ("build:", "cmdimage:")


@dataclass(frozen=True)
class LogAlert:
    """An alert tagged with the level and source the filter controls."""

    alert: Alert
    level: FilterLevel
    source: FilterSource


def tag_alert(alert: Alert) -> LogAlert:
    level, source = ALERT_TAGS[alert.kind]
    return LogAlert(alert=alert, level=level, source=source)


def tag_alerts(alerts: Iterable[Alert]) -> list[LogAlert]:
    return [tag_alert(a) for a in alerts]


def count_matching_level(alerts: Iterable[LogAlert], level: FilterLevel) -> int:
    return sum(1 for a in alerts if a.level == level)


def count_matching_level_and_source(
    alerts: Iterable[LogAlert], level: FilterLevel, source: FilterSource
) -> int:
    return sum(1 for a in alerts if a.level == level and a.source == source)


def source_counts(
    alerts: Sequence[LogAlert], level: FilterLevel
) -> dict[FilterSource, int] | None:
    """Badge counts for the source menu of a level button.

    Returns:
        Counts keyed by source, or None for ``FilterLevel.ALL`` (no badges)
    """
    if level == FilterLevel.ALL:
        return None
    return {
        FilterSource.ALL: count_matching_level(alerts, level),
        FilterSource.BUILD: count_matching_level_and_source(alerts, level, FilterSource.BUILD),
        FilterSource.RUNTIME: count_matching_level_and_source(
            alerts, level, FilterSource.RUNTIME
        ),
    }


def level_label(alerts: Sequence[LogAlert], level: FilterLevel) -> str:
    if level == FilterLevel.WARN:
        return f"Warnings ({count_matching_level(alerts, level)})"
    if level == FilterLevel.ERROR:
        return f"Errors ({count_matching_level(alerts, level)})"
    return "All Levels"


def matches_term(term: FilterTerm, text: str) -> bool:
    """True if the term has no pattern or the pattern occurs anywhere in text."""
    if term.compiled_pattern is None:
        return True
    return next(term.compiled_pattern.finditer(text), None) is not None


def matches_alert(filter_set: FilterSet, alert: LogAlert) -> bool:
    if filter_set.level != FilterLevel.ALL and alert.level != filter_set.level:
        return False
    if filter_set.source != FilterSource.ALL and alert.source != filter_set.source:
        return False
    return matches_term(filter_set.term, alert.alert.message) or matches_term(
        filter_set.term, alert.alert.title_text
    )


def filter_alerts(filter_set: FilterSet, alerts: Iterable[LogAlert]) -> list[LogAlert]:
    """Keep the alerts that pass the filter, in input order."""
    return [a for a in alerts if matches_alert(filter_set, a)]


class LogLevel(Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class LogLine:
    text: str
    level: LogLevel = LogLevel.INFO
    span_id: str = ""
    manifest_name: str = ""
    build_event: str = ""


def is_build_span_id(span_id: str) -> bool:
    return span_id.startswith(BUILD_SPAN_PREFIXES)


@dataclass(frozen=True)
class LogFilter:
    """Filter for log lines of one resource (or all resources when manifest_name is empty)."""

    source: FilterSource = FilterSource.ALL
    manifest_name: str = ""
    level: FilterLevel = FilterLevel.ALL
    term: FilterTerm | None = None

    @classmethod
    def from_filter_set(cls, filter_set: FilterSet, manifest_name: str = "") -> "LogFilter":
        return cls(
            source=filter_set.source,
            manifest_name=manifest_name,
            level=filter_set.level,
            term=filter_set.term,
        )

    def matches_level(self, line: LogLine) -> bool:
        if self.level == FilterLevel.ALL:
            return True
        return self.level.value == line.level.value

    def matches(self, line: LogLine) -> bool:
        """Check if a line passes this filter."""
        # Build event lines show which logs belong to which build
        if line.build_event:
            return True

        if self.manifest_name and self.manifest_name != line.manifest_name:
            return False

        is_build = is_build_span_id(line.span_id)
        if self.source == FilterSource.RUNTIME and is_build:
            return False
        if self.source == FilterSource.BUILD and not is_build:
            return False

        if not self.matches_level(line):
            return False

        return self.term is None or matches_term(self.term, line.text)

    def apply(self, lines: Iterable[LogLine]) -> list[LogLine]:
        return [line for line in lines if self.matches(line)]
