"""Pydantic data models for the Comput3 workload agent."""

from comput3_agent.models.conversation import (
    ActionResponse,
    ConversationMessage,
    ErrorKind,
    Memory,
    MessageRole,
    ModelType,
    State,
)
from comput3_agent.models.workload import (
    ApiResponse,
    CommandKind,
    LaunchIntent,
    LaunchRequest,
    LaunchWorkloadResponse,
    ListWorkloadsRequest,
    StopIntent,
    StopRequest,
    StopWorkloadResponse,
    UserBalance,
    UserProfile,
    WorkloadItem,
    WorkloadType,
)

__all__ = [
    # Conversation models
    "ActionResponse",
    "ConversationMessage",
    "ErrorKind",
    "Memory",
    "MessageRole",
    "ModelType",
    "State",
    # Workload models
    "ApiResponse",
    "CommandKind",
    "LaunchIntent",
    "LaunchRequest",
    "LaunchWorkloadResponse",
    "ListWorkloadsRequest",
    "StopIntent",
    "StopRequest",
    "StopWorkloadResponse",
    "UserBalance",
    "UserProfile",
    "WorkloadItem",
    "WorkloadType",
]
