"""Log filter state and its query-string encoding.

The source of truth for log filters is the URL. For example::

    /r/(all)/overview?level=error&source=build&term=docker

only shows errors from the build (not from the pod) that contain ``docker``.
A FilterSet is always re-derived from the current location; edits go
through ``create_log_search`` to build the next location's query string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, urlencode

if TYPE_CHECKING:
    from devhud.filters.navigation import Location

EMPTY_TERM = ""

LEVEL_PARAM = "level"
SOURCE_PARAM = "source"
TERM_PARAM = "term"


class FilterLevel(Enum):
    """Severity filter. ``ALL`` is the default and filters nothing."""

    ALL = ""
    WARN = "warn"  # Only show warnings
    ERROR = "error"  # Only show errors


class FilterSource(Enum):
    """Log source filter. ``ALL`` is the default and filters nothing."""

    ALL = ""
    BUILD = "build"  # Only show build logs
    RUNTIME = "runtime"  # Only show runtime logs


@dataclass(frozen=True)
class FilterTerm:
    """Free-text filter.

    ``compiled_pattern`` is derived from ``source_text``. ``None`` matches
    everything, which is the case for the empty term and for text that does
    not compile (flagged with ``invalid``).
    """

    source_text: str
    compiled_pattern: re.Pattern[str] | None = None
    invalid: bool = False


# Only the non-default literals are accepted from a URL
_ACCEPTED_LEVELS = {level.value: level for level in (FilterLevel.WARN, FilterLevel.ERROR)}
_ACCEPTED_SOURCES = {
    source.value: source for source in (FilterSource.BUILD, FilterSource.RUNTIME)
}

EMPTY_FILTER_TERM = FilterTerm(source_text=EMPTY_TERM, compiled_pattern=None, invalid=False)


@dataclass(frozen=True)
class FilterSet:
    level: FilterLevel = FilterLevel.ALL
    source: FilterSource = FilterSource.ALL
    term: FilterTerm = field(default=EMPTY_FILTER_TERM)


def parse_filter_term(term: str) -> re.Pattern[str] | None:
    """Compile a filter term. Terms are case-insensitive regular expressions.

    Raises:
        re.error: If the term is not a valid pattern
    """
    if not term:
        return None
    return re.compile(term, re.IGNORECASE)


def make_filter_term(source_text: str) -> FilterTerm:
    if not source_text:
        return EMPTY_FILTER_TERM
    try:
        pattern = parse_filter_term(source_text)
    except re.error:
        return FilterTerm(source_text=source_text, compiled_pattern=None, invalid=True)
    return FilterTerm(source_text=source_text, compiled_pattern=pattern, invalid=False)


def _first_values(query: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        values.setdefault(key, value)
    return values


def parse(query: str) -> FilterSet:
    """Parse a query string (with or without the leading ``?``) into a FilterSet.

    Unknown ``level`` and ``source`` values fall back to ``ALL``. An empty or
    missing ``term`` yields the empty term.
    """
    params = _first_values(query)
    return FilterSet(
        level=_ACCEPTED_LEVELS.get(params.get(LEVEL_PARAM, ""), FilterLevel.ALL),
        source=_ACCEPTED_SOURCES.get(params.get(SOURCE_PARAM, ""), FilterSource.ALL),
        term=make_filter_term(params.get(TERM_PARAM, EMPTY_TERM)),
    )


filter_set_from_query = parse


def filter_set_from_location(location: Location) -> FilterSet:
    """Infer the filter set from a navigation location."""
    return parse(location.search)


def _param_value(value: FilterLevel | FilterSource | str) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return value


def _set_param(params: list[tuple[str, str]], key: str, value: str) -> list[tuple[str, str]]:
    # Replace the first occurrence in place and drop the rest; append if absent
    result: list[tuple[str, str]] = []
    replaced = False
    for k, v in params:
        if k != key:
            result.append((k, v))
        elif not replaced:
            result.append((key, value))
            replaced = True
    if not replaced:
        result.append((key, value))
    return result


def create_log_search(
    current_search: str,
    *,
    level: FilterLevel | str | None = None,
    source: FilterSource | str | None = None,
    term: str | None = None,
) -> str:
    """Build the next query string from the current one plus filter edits.

    Only the keys passed are overwritten; every other parameter is kept.

    Args:
        current_search: Current query string, with or without a leading ``?``
        level: New level, or None to keep the current one
        source: New source, or None to keep the current one
        term: New term, or None to keep the current one

    Returns:
        Encoded query string without the leading ``?``
    """
    params = parse_qsl(current_search.lstrip("?"), keep_blank_values=True)

    if level is not None:
        params = _set_param(params, LEVEL_PARAM, _param_value(level))
    if source is not None:
        params = _set_param(params, SOURCE_PARAM, _param_value(source))
    if term is not None:
        params = _set_param(params, TERM_PARAM, term)

    return urlencode(params)


serialize = create_log_search


def to_query(filter_set: FilterSet) -> str:
    """Encode a whole filter set onto an empty query string."""
    return create_log_search(
        "",
        level=filter_set.level,
        source=filter_set.source,
        term=filter_set.term.source_text,
    )


def filter_sets_equal(a: FilterSet, b: FilterSet) -> bool:
    """Compare filter sets. Terms are case-insensitive, so casing is ignored."""
    source_equal = a.source == b.source
    level_equal = a.level == b.level
    term_equal = a.term.source_text.lower() == b.term.source_text.lower()
    return source_equal and level_equal and term_equal
