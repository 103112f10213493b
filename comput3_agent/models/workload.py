"""Workload data models for the Comput3 REST API and extracted intents."""

import time
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from comput3_agent.constants import DEFAULT_EXPIRES_MINUTES

T = TypeVar("T")


class WorkloadType(str, Enum):
    """Workload types known to the extractors.

    Declaration order is the tie-break order used by the type extractor.
    The remote service may return other values, so API models type the
    workload ``type`` as plain ``str``.
    """

    MEDIA_FAST = "media:fast"
    OLLAMA_WEBUI_CODER = "ollama_webui:coder"
    OLLAMA_WEBUI_FAST = "ollama_webui:fast"
    OLLAMA_WEBUI_LARGE = "ollama_webui:large"
    LLAMA_WEBUI_CODER = "llama_webui:coder"

    @classmethod
    def values(cls) -> list[str]:
        """Return the known type strings in declared order."""
        return [member.value for member in cls]


class CommandKind(str, Enum):
    """Command kinds that go through intent extraction."""

    LAUNCH = "launch"
    STOP = "stop"


# ========== Intents ==========


class LaunchRequest(BaseModel):
    """Request body for POST /launch.

    ``expires`` is an absolute Unix timestamp in seconds, not a duration.
    """

    type: str
    expires: int


class LaunchIntent(BaseModel):
    """Validated launch parameters extracted from a user turn."""

    type: str = Field(..., min_length=1)
    expires_minutes: int = Field(default=DEFAULT_EXPIRES_MINUTES, ge=0)

    @classmethod
    def from_candidate(cls, candidate: dict[str, Any]) -> "LaunchIntent":
        """Build an intent from a validated, default-filled candidate."""
        expires = candidate.get("expires")
        if expires is None:
            expires = DEFAULT_EXPIRES_MINUTES
        return cls(type=candidate["type"], expires_minutes=int(expires))

    def to_request(self, now: float | None = None) -> LaunchRequest:
        """Convert the relative expiry into an absolute launch request.

        Args:
            now: Current Unix time in seconds (defaults to ``time.time()``)

        Returns:
            LaunchRequest with ``expires`` set to now + expires_minutes * 60
        """
        current = int(now if now is not None else time.time())
        return LaunchRequest(type=self.type, expires=current + self.expires_minutes * 60)


class StopRequest(BaseModel):
    """Request body for POST /stop."""

    workload: str


class StopIntent(BaseModel):
    """Validated stop parameters extracted from a user turn."""

    workload_id: str = Field(..., min_length=1)

    @classmethod
    def from_candidate(cls, candidate: dict[str, Any]) -> "StopIntent":
        """Build an intent from a validated candidate."""
        return cls(workload_id=candidate["workload"])

    def to_request(self) -> StopRequest:
        """Build the stop request body."""
        return StopRequest(workload=self.workload_id)


class ListWorkloadsRequest(BaseModel):
    """Request body for POST /workloads."""

    running: bool | None = None


# ========== API responses ==========


class LaunchWorkloadResponse(BaseModel):
    """Response from POST /launch."""

    model_config = ConfigDict(extra="allow")

    node: str
    workload: str
    workload_key: str


class StopWorkloadResponse(BaseModel):
    """Response from POST /stop (usually an empty object)."""

    model_config = ConfigDict(extra="allow")

    success: bool | None = None


class WorkloadItem(BaseModel):
    """Single workload entry returned by POST /workloads."""

    model_config = ConfigDict(extra="allow")

    created: int
    expires: int
    node: str
    running: bool
    status: str
    type: str
    workload: str


class UserBalance(BaseModel):
    """Response from GET /balance."""

    balance: int | float


class UserProfile(BaseModel):
    """Response from GET /profile."""

    addr: str
    tags: list[str] = Field(default_factory=list)
    user_uuid: str


class ApiResponse(BaseModel, Generic[T]):
    """Outcome of a single Comput3 API round trip.

    Failed calls never raise; they carry ``success=False``, an error
    message and the HTTP status code (0 when no response was received).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: T | None = None
    error: str | None = None
    status_code: int | None = None
