"""Navigation state and the debounced filter-term session.

The location is the only place filter state lives. ``NavigationHistory``
holds the current location and notifies listeners on every push; the
FilterSet is re-derived from it on demand and never stored.

``FilterTermSession`` is owned by the text input. It keeps a draft term that
follows every keystroke and commits the term to the location only after the
quiet period, so log filtering does not rerun on each keystroke.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from devhud.config import HudConfig
from devhud.filters.codec import (
    EMPTY_TERM,
    FilterSet,
    create_log_search,
    filter_set_from_location,
)
from devhud.filters.debounce import DEFAULT_DEBOUNCE_SECONDS, Debouncer, TimerFactory

log = structlog.get_logger()

Listener = Callable[["Location"], None]


@dataclass(frozen=True)
class Location:
    pathname: str = "/"
    search: str = ""

    @property
    def href(self) -> str:
        search = self.search.lstrip("?")
        return f"{self.pathname}?{search}" if search else self.pathname


class NavigationHistory:
    """Current location plus push notifications."""

    def __init__(self, location: Location | None = None):
        self._location = location or Location()
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    @property
    def location(self) -> Location:
        with self._lock:
            return self._location

    @property
    def filter_set(self) -> FilterSet:
        return filter_set_from_location(self.location)

    def push(self, location: Location) -> None:
        with self._lock:
            self._location = location
            listeners = list(self._listeners)
        log.debug("Navigated", href=location.href)
        for listener in listeners:
            listener(location)

    def listen(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unlisten() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unlisten


class FilterTermSession:
    """Text-input session that commits the filter term with a trailing debounce."""

    def __init__(
        self,
        history: NavigationHistory,
        wait: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.history = history
        location = history.location
        self.draft = filter_set_from_location(location).term.source_text
        self._pathname = location.pathname
        self._debouncer: Debouncer[Location] = Debouncer(
            self.history.push, wait=wait, timer_factory=timer_factory
        )
        self._unlisten = history.listen(self._on_navigate)

    @classmethod
    def from_config(
        cls,
        history: NavigationHistory,
        config: HudConfig | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> "FilterTermSession":
        """Create a session using the configured quiet period (env config when None)."""
        config = config or HudConfig.from_env()
        return cls(history, wait=config.debounce_seconds, timer_factory=timer_factory)

    @property
    def committed(self) -> FilterSet:
        return self.history.filter_set

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def edit(self, text: str | None) -> None:
        """Update the draft now and schedule the commit of the new term."""
        term = text or EMPTY_TERM
        self.draft = term
        location = self.history.location
        search = create_log_search(location.search, term=term)
        self._debouncer.call(Location(pathname=location.pathname, search=search))

    def clear(self) -> None:
        """Clear the term immediately, dropping any pending commit."""
        self._debouncer.cancel()
        self.draft = EMPTY_TERM
        location = self.history.location
        search = create_log_search(location.search, term=EMPTY_TERM)
        self.history.push(Location(pathname=location.pathname, search=search))

    def close(self) -> None:
        """Tear down the session. A pending commit is never written afterwards."""
        self._debouncer.cancel()
        self._unlisten()

    def _on_navigate(self, location: Location) -> None:
        if location.pathname == self._pathname:
            return
        # Navigated away: the pending term belongs to the old view
        self._debouncer.cancel()
        self._pathname = location.pathname
        self.draft = filter_set_from_location(location).term.source_text

    def __enter__(self) -> "FilterTermSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
