"""Tests for resource models and alert derivation."""

import pytest

from devhud.alerts import (
    AlertKind,
    compute_alerts,
    compute_display_alerts,
    has_alert,
    number_of_alerts,
)
from devhud.resources import (
    ZERO_TIME,
    Build,
    PodInfo,
    ResourceSnapshot,
    SnapshotLoadError,
    load_view_from_data,
    load_view_from_string,
)

TS = "2024-05-01T12:00:00Z"
FINISH = "2024-05-01T12:05:00Z"


def make_resource(
    name: str = "snack",
    status: str = "Running",
    message: str = "",
    restarts: int = 0,
    crash_log: str = "",
    builds: list[Build] | None = None,
) -> ResourceSnapshot:
    return ResourceSnapshot(
        name=name,
        build_history=builds or [],
        crash_log=crash_log,
        pod_info=PodInfo(
            pod_creation_time=TS,
            pod_status=status,
            pod_status_message=message,
            pod_restarts=restarts,
        ),
    )


class TestResourcePredicates:
    """Tests for snapshot predicates."""

    def test_defaults_are_zero_values(self):
        """A resource with no pod info gets the zero-value pod."""
        r = ResourceSnapshot(name="empty")
        assert r.pod_info.pod_status == ""
        assert r.pod_info.pod_restarts == 0
        assert r.pod_info.pod_creation_time == ZERO_TIME
        assert r.build_history == []

    def test_empty_history_means_no_builds(self):
        r = make_resource()
        assert r.build_failed() is False
        assert r.is_crash_rebuild() is False
        assert r.warnings() == []
        assert r.last_build() is None

    @pytest.mark.parametrize(
        "status", ["Error", "CrashLoopBackOff", "ImagePullBackOff", "ErrImagePull"]
    )
    def test_error_statuses(self, status):
        assert make_resource(status=status).is_pod_status_error() is True

    def test_status_message_is_error(self):
        """Any status message counts as an error, whatever the status."""
        r = make_resource(status="Running", message="OOMKilled")
        assert r.is_pod_status_error() is True
        assert r.is_pod_status_crash() is False

    def test_running_is_not_error(self):
        assert make_resource(status="Running").is_pod_status_error() is False

    def test_crash_statuses_are_subset(self):
        assert make_resource(status="CrashLoopBackOff").is_pod_status_crash() is True
        assert make_resource(status="ImagePullBackOff").is_pod_status_crash() is False

    def test_only_last_build_counts(self):
        """Predicates look at build_history[0] only."""
        r = make_resource(
            builds=[
                Build(error=None, warnings=["w1"]),
                Build(error="old failure", is_crash_rebuild=True),
            ]
        )
        assert r.build_failed() is False
        assert r.is_crash_rebuild() is False
        assert r.warnings() == ["w1"]

    def test_pod_restarted(self):
        assert make_resource(restarts=0).pod_restarted() is False
        assert make_resource(restarts=3).pod_restarted() is True


class TestLoading:
    """Tests for decoding view payloads."""

    def test_aliases(self, vigoda_payload):
        view = load_view_from_data(vigoda_payload)
        r = view.resources[0]
        assert r.name == "vigoda"
        assert r.pod_info.pod_restarts == 1
        assert r.pod_info.pod_status_message == ""  # null degrades to empty
        assert r.build_history[0].error == "the build failed!"

    def test_flat_pod_fields(self):
        """Pod fields carried directly on the resource are folded into pod_info."""
        view = load_view_from_data(
            [{"Name": "old", "PodStatus": "Error", "PodRestarts": 2, "PodCreationTime": TS}]
        )
        r = view.resources[0]
        assert r.pod_info.pod_status == "Error"
        assert r.pod_info.pod_restarts == 2

    def test_nulls_degrade(self):
        view = load_view_from_data(
            {
                "Resources": [
                    {
                        "Name": "n",
                        "BuildHistory": [{"Warnings": None, "Log": None}],
                        "CrashLog": None,
                        "ResourceInfo": None,
                    }
                ]
            }
        )
        r = view.resources[0]
        assert r.crash_log == ""
        assert r.warnings() == []
        assert r.pod_info == PodInfo()

    def test_invalid_json(self):
        with pytest.raises(SnapshotLoadError):
            load_view_from_string("{not json")

    def test_invalid_payload(self):
        with pytest.raises(SnapshotLoadError):
            load_view_from_data({"Resources": [{"BuildHistory": []}]})  # no Name


class TestComputeAlerts:
    """Tests for the existence/count set."""

    def test_healthy_resource(self):
        r = make_resource()
        assert compute_alerts(r) == []
        assert has_alert(r) is False
        assert number_of_alerts(r) == 0

    def test_failed_build_only_is_not_a_runtime_alert(self):
        """Build failures and warnings are excluded from the runtime set."""
        r = make_resource(builds=[Build(error="boom", log="build log", finish_time=FINISH)])
        assert compute_alerts(r) == []

        display = compute_display_alerts([r])
        assert [a.kind for a in display] == [AlertKind.BUILD_FAILED]

    def test_error_and_restart_both_fire(self):
        """Checks are independent here, unlike the display list."""
        r = make_resource(
            status="Error",
            message="crashed",
            restarts=2,
            crash_log="panic",
            builds=[Build(is_crash_rebuild=True)],
        )
        kinds = [a.kind for a in compute_alerts(r)]
        assert kinds == [AlertKind.POD_STATUS_ERROR, AlertKind.POD_RESTART, AlertKind.CRASH_REBUILD]

    def test_crash_status_uses_crash_log(self):
        r = make_resource(status="CrashLoopBackOff", message="Back-off", crash_log="panic: nil")
        alert = compute_alerts(r)[0]
        assert alert.message == "panic: nil"
        assert alert.title_text == "snack"
        assert alert.timestamp == TS

    def test_crash_status_without_crash_log_uses_message(self):
        r = make_resource(status="Error", message="exit code 1")
        assert compute_alerts(r)[0].message == "exit code 1"

    def test_non_crash_status_uses_message(self):
        r = make_resource(status="ImagePullBackOff", message="pull failed", crash_log="ignored")
        assert compute_alerts(r)[0].message == "pull failed"

    def test_status_fallback_message(self):
        r = make_resource(status="ErrImagePull")
        assert compute_alerts(r)[0].message == "Pod has status ErrImagePull"

    def test_restart_alert(self):
        r = make_resource(restarts=4, crash_log="last words")
        alert = compute_alerts(r)[0]
        assert alert.kind == AlertKind.POD_RESTART
        assert alert.title_text == "Restarts:4"
        assert alert.message == "last words"
        assert alert.timestamp == TS

    def test_crash_rebuild_alert(self):
        r = make_resource(builds=[Build(is_crash_rebuild=True)])
        alert = compute_alerts(r)[0]
        assert alert.kind == AlertKind.CRASH_REBUILD
        assert alert.title_text == "Pod crashed"
        assert alert.message == ""


class TestComputeDisplayAlerts:
    """Tests for the display list."""

    def test_status_error_takes_priority(self):
        """Status error wins the runtime chain over restarts and crash rebuilds."""
        r = make_resource(
            status="Error",
            message="crashed",
            restarts=2,
            builds=[Build(is_crash_rebuild=True)],
        )
        display = compute_display_alerts([r])
        assert [a.kind for a in display] == [AlertKind.POD_STATUS_ERROR]
        assert display[0].message == "crashed"

    def test_restart_before_crash_rebuild(self):
        r = make_resource(restarts=1, builds=[Build(is_crash_rebuild=True)])
        assert [a.kind for a in compute_display_alerts([r])] == [AlertKind.POD_RESTART]

    def test_crash_rebuild_alone(self):
        r = make_resource(builds=[Build(is_crash_rebuild=True)])
        assert [a.kind for a in compute_display_alerts([r])] == [AlertKind.CRASH_REBUILD]

    def test_vigoda(self, vigoda_payload):
        """Running pod with one restart and a failed build."""
        r = load_view_from_data(vigoda_payload).resources[0]

        assert [a.kind for a in compute_alerts(r)] == [AlertKind.POD_RESTART]

        display = compute_display_alerts([r])
        assert [a.kind for a in display] == [AlertKind.POD_RESTART, AlertKind.BUILD_FAILED]
        build_alert = display[1]
        assert build_alert.title_text == "vigoda"
        assert build_alert.message == "compiling...\nmain.go:3: undefined: foo"
        assert build_alert.timestamp == "2024-05-01T12:00:00Z"

    def test_build_failure_then_warnings(self):
        r = make_resource(
            builds=[Build(error="boom", log="", warnings=["w1", "w2"], finish_time=FINISH)]
        )
        display = compute_display_alerts([r])
        assert [a.kind for a in display] == [
            AlertKind.BUILD_FAILED,
            AlertKind.WARNING,
            AlertKind.WARNING,
        ]
        assert display[0].message == ""
        assert [a.message for a in display[1:]] == ["w1", "w2"]
        assert all(a.timestamp == FINISH for a in display)
        assert all(a.title_text == "snack" for a in display)

    def test_resource_order_preserved(self):
        """No re-sorting across resources."""
        a = make_resource(name="a", builds=[Build(warnings=["late"], finish_time=FINISH)])
        b = make_resource(name="b", restarts=1)
        display = compute_display_alerts([a, b])
        assert [(x.resource_name, x.kind) for x in display] == [
            ("a", AlertKind.WARNING),
            ("b", AlertKind.POD_RESTART),
        ]

    def test_empty(self):
        assert compute_display_alerts([]) == []
        assert compute_display_alerts([ResourceSnapshot(name="idle")]) == []


class TestAlertCounts:
    """Tests for has_alert and number_of_alerts."""

    def test_failed_build_with_warning_counts(self):
        """A failed build and its warnings count even though the pod is healthy."""
        r = ResourceSnapshot(
            name="api", build_history=[Build(error="boom", log="x", warnings=["w"])]
        )
        assert has_alert(r) is True
        assert number_of_alerts(r) == 2

    def test_counts_follow_display_list(self):
        """Status error and restart collapse to one displayed alert."""
        r = make_resource(
            status="Error",
            message="crashed",
            restarts=2,
            builds=[Build(is_crash_rebuild=True)],
        )
        assert len(compute_alerts(r)) == 3
        assert number_of_alerts(r) == 1

    def test_warnings_only(self):
        r = make_resource(builds=[Build(warnings=["w1", "w2"])])
        assert number_of_alerts(r) == 2
