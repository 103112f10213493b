"""LAUNCH_WORKLOAD action."""

import structlog

from comput3_agent.agent.actions.base import WorkloadAction, format_timestamp, to_content
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import ErrorMessages
from comput3_agent.models.conversation import ActionResponse, ErrorKind, Memory, State
from comput3_agent.models.workload import (
    CommandKind,
    LaunchIntent,
    LaunchRequest,
    LaunchWorkloadResponse,
    WorkloadType,
)
from comput3_agent.services.comput3_client import Comput3Client

logger = structlog.get_logger(__name__)


def format_launch_response(
    response: LaunchWorkloadResponse,
    request: LaunchRequest,
    expires_minutes: int,
) -> str:
    """Summarize a launched workload.

    Args:
        response: Launch response from the API
        request: Request that was sent
        expires_minutes: Requested lifetime in minutes

    Returns:
        Multi-line summary with id, key, node, type and expiry
    """
    return "\n".join(
        [
            f"Successfully launched a new {request.type} workload!",
            "",
            f"Workload ID: {response.workload}",
            f"Workload Key: {response.workload_key}",
            f"Node: {response.node}",
            f"Type: {request.type}",
            f"Expires: in {expires_minutes} minutes ({format_timestamp(request.expires)})",
        ]
    )


class LaunchWorkloadAction(WorkloadAction):
    """Launch a GPU workload described in natural language or structured content."""

    name = "LAUNCH_WORKLOAD"
    similes = (
        "START_WORKLOAD",
        "CREATE_WORKLOAD",
        "LAUNCH_GPU",
        "START_GPU",
        "CREATE_GPU_WORKLOAD",
    )
    description = "Launches a new GPU workload on Comput3AI"
    operation = "launch workload"
    examples = (
        (
            {
                "name": "{{name1}}",
                "content": {
                    "text": "Launch a new GPU workload of type media:fast that expires in 10 minutes"
                },
            },
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Launching a new workload...",
                    "actions": ["LAUNCH_WORKLOAD"],
                },
            },
        ),
        (
            {
                "name": "{{name1}}",
                "content": {"text": "Start a llama_webui:coder workload that expires in 30 minutes"},
            },
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Creating a new workload for you...",
                    "actions": ["LAUNCH_WORKLOAD"],
                },
            },
        ),
    )

    async def run(
        self,
        client: Comput3Client,
        runtime: AgentRuntime,
        message: Memory,
        state: State,
    ) -> ActionResponse:
        result = await self.extractor_factory(runtime).extract(CommandKind.LAUNCH, message, state)
        if not result.succeeded:
            error = ErrorMessages.INVALID_WORKLOAD_TYPE
            known = ", ".join(WorkloadType.values())
            return self.failure(
                text=(
                    f"Failed to launch workload: {error}. "
                    f"Please specify a valid workload type ({known})."
                ),
                error=error,
                kind=ErrorKind.EXTRACTION_FAILURE,
            )

        intent = LaunchIntent.from_candidate(result.candidate)
        request = intent.to_request()
        logger.info(
            "launching_workload",
            workload_type=request.type,
            expires=request.expires,
            strategy=result.strategy.value,
        )

        response = await client.launch_workload(request)
        if not response.success or response.data is None:
            return self.remote_failure(response, request=to_content(request))

        logger.info("workload_launched", workload=response.data.workload)
        return self.success(
            text=format_launch_response(response.data, request, intent.expires_minutes),
            data=response.data,
            request=to_content(request),
        )
