"""Data models for monitored resource snapshots.

Field aliases follow the names delivered by the monitored system's view
payload (``Name``, ``BuildHistory``, ``ResourceInfo``...). Python field names
are accepted too, so tests and callers can build snapshots directly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ZERO_TIME = "0001-01-01T00:00:00Z"

POD_STATUS_ERROR = "Error"
POD_STATUS_CRASH_LOOP_BACK_OFF = "CrashLoopBackOff"
POD_STATUS_IMAGE_PULL_BACK_OFF = "ImagePullBackOff"
POD_STATUS_ERR_IMAGE_PULL = "ErrImagePull"
POD_STATUS_RUN_CONTAINER_ERROR = "RunContainerError"
POD_STATUS_START_ERROR = "StartError"

POD_ERROR_STATUSES: frozenset[str] = frozenset(
    {
        POD_STATUS_ERROR,
        POD_STATUS_CRASH_LOOP_BACK_OFF,
        POD_STATUS_IMAGE_PULL_BACK_OFF,
        POD_STATUS_ERR_IMAGE_PULL,
        POD_STATUS_RUN_CONTAINER_ERROR,
        POD_STATUS_START_ERROR,
    }
)

# Statuses where the crash log says more than the status message
POD_CRASH_STATUSES: frozenset[str] = frozenset(
    {POD_STATUS_ERROR, POD_STATUS_CRASH_LOOP_BACK_OFF}
)

_FLAT_POD_FIELDS = ("PodCreationTime", "PodStatus", "PodStatusMessage", "PodRestarts")


def pod_status_is_error(status: str) -> bool:
    return status in POD_ERROR_STATUSES


def pod_status_is_crash(status: str) -> bool:
    return status in POD_CRASH_STATUSES


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Build(_Record):
    """One build attempt."""

    edits: list[str] = Field(default_factory=list, alias="Edits")
    error: str | None = Field(None, alias="Error")
    log: str = Field("", alias="Log")
    warnings: list[str] = Field(default_factory=list, alias="Warnings")
    start_time: str = Field(ZERO_TIME, alias="StartTime")
    finish_time: str = Field(ZERO_TIME, alias="FinishTime")
    is_crash_rebuild: bool = Field(False, alias="IsCrashRebuild")

    @field_validator("edits", "warnings", mode="before")
    @classmethod
    def null_list_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("log", mode="before")
    @classmethod
    def null_log_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class PodInfo(_Record):
    """Live pod state. The default instance is the zero value used before a pod exists."""

    pod_creation_time: str = Field(ZERO_TIME, alias="PodCreationTime")
    pod_status: str = Field("", alias="PodStatus")
    pod_status_message: str = Field("", alias="PodStatusMessage")
    pod_restarts: int = Field(0, alias="PodRestarts")

    @field_validator("pod_creation_time", mode="before")
    @classmethod
    def null_time_is_zero(cls, v: Any) -> Any:
        return ZERO_TIME if v is None else v

    @field_validator("pod_status", "pod_status_message", mode="before")
    @classmethod
    def null_text_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("pod_restarts", mode="before")
    @classmethod
    def null_restarts_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class ResourceSnapshot(_Record):
    """Normalized view of one monitored resource's current state.

    ``build_history`` is ordered most-recent-first; index 0 is the last build.
    An empty history means no builds yet.
    """

    name: str = Field(alias="Name")
    build_history: list[Build] = Field(default_factory=list, alias="BuildHistory")
    crash_log: str = Field("", alias="CrashLog")
    pod_info: PodInfo = Field(default_factory=PodInfo, alias="ResourceInfo")

    @model_validator(mode="before")
    @classmethod
    def fold_flat_pod_fields(cls, data: Any) -> Any:
        """Older view payloads carry pod fields directly on the resource."""
        if not isinstance(data, dict):
            return data
        if data.get("ResourceInfo") is not None or data.get("pod_info") is not None:
            return data
        flat = {k: data[k] for k in _FLAT_POD_FIELDS if k in data}
        if not flat:
            return data
        return {**data, "ResourceInfo": flat}

    @field_validator("build_history", mode="before")
    @classmethod
    def null_history_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("crash_log", mode="before")
    @classmethod
    def null_crash_log_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("pod_info", mode="before")
    @classmethod
    def null_pod_info_is_zero(cls, v: Any) -> Any:
        return PodInfo() if v is None else v

    def last_build(self) -> Build | None:
        return self.build_history[0] if self.build_history else None

    def is_pod_status_error(self) -> bool:
        """True if the pod status is an error status or the pod reports a status message."""
        return pod_status_is_error(self.pod_info.pod_status) or bool(
            self.pod_info.pod_status_message
        )

    def is_pod_status_crash(self) -> bool:
        return pod_status_is_crash(self.pod_info.pod_status)

    def pod_restarted(self) -> bool:
        return self.pod_info.pod_restarts > 0

    def is_crash_rebuild(self) -> bool:
        last = self.last_build()
        return last is not None and last.is_crash_rebuild

    def build_failed(self) -> bool:
        last = self.last_build()
        return last is not None and last.error is not None

    def warnings(self) -> list[str]:
        last = self.last_build()
        return list(last.warnings) if last is not None else []


class View(_Record):
    """A full dashboard payload: every monitored resource at one tick."""

    resources: list[ResourceSnapshot] = Field(default_factory=list, alias="Resources")

    @field_validator("resources", mode="before")
    @classmethod
    def null_resources_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v
