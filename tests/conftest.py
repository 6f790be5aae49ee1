"""Shared fixtures."""

import pytest


class FakeTimer:
    """Stand-in for threading.Timer driven by FakeClock."""

    def __init__(self, clock: "FakeClock", interval, function, args=()):
        self.clock = clock
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.due = None
        self.cancelled = False
        self.fired = False

    def start(self):
        self.due = self.clock.now + self.interval
        self.clock.timers.append(self)

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Manual clock. Integer time units keep due times exact."""

    def __init__(self):
        self.now = 0
        self.timers: list[FakeTimer] = []

    def timer(self, interval, function, args=()):
        return FakeTimer(self, interval, function, args)

    def advance(self, amount):
        target = self.now + amount
        while True:
            due = [
                t
                for t in self.timers
                if t.due is not None and not t.cancelled and not t.fired and t.due <= target
            ]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            timer.fired = True
            timer.function(*timer.args)
        self.now = target

    @property
    def live_timers(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def vigoda_payload() -> dict:
    """A view payload shaped like the monitored system delivers it."""
    ts = "2024-05-01T12:00:00Z"
    return {
        "Resources": [
            {
                "Name": "vigoda",
                "DirectoriesWatched": ["foo", "bar"],
                "BuildHistory": [
                    {
                        "Edits": ["main.go", "cli.go"],
                        "Error": "the build failed!",
                        "Log": "compiling...\nmain.go:3: undefined: foo",
                        "Warnings": [],
                        "StartTime": ts,
                        "FinishTime": ts,
                    }
                ],
                "CrashLog": "",
                "ResourceInfo": {
                    "PodCreationTime": ts,
                    "PodStatus": "Running",
                    "PodStatusMessage": None,
                    "PodRestarts": 1,
                },
            }
        ]
    }
