"""STOP_WORKLOAD action."""

import structlog

from comput3_agent.agent.actions.base import WorkloadAction, to_content
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import ErrorMessages
from comput3_agent.models.conversation import ActionResponse, ErrorKind, Memory, State
from comput3_agent.models.workload import CommandKind, StopIntent, StopRequest
from comput3_agent.services.comput3_client import Comput3Client
from comput3_agent.services.intent_extractor import ContentKind, ExtractionResult

logger = structlog.get_logger(__name__)

ID_FORMAT_HINT = (
    'either UUID format like "7b69314d-c88d-47d9-920c-ae827f6b7844" '
    'or domain format like "name-name-name-gpu.comput3.ai"'
)


def format_stop_response(request: StopRequest) -> str:
    return "\n".join(
        [
            "Successfully stopped workload!",
            "",
            f"Workload ID: {request.workload}",
            "Status: Stopped",
        ]
    )


def extraction_failure_message(result: ExtractionResult) -> tuple[str, str]:
    """Pick the user text and error for a failed workload ID extraction.

    Args:
        result: Failed extraction result

    Returns:
        (text, error) tuple
    """
    if result.content_kind == ContentKind.FREE_TEXT:
        return (
            "Failed to identify a workload ID to stop. Please provide a specific workload ID "
            "like '7b69314d-c88d-47d9-920c-ae827f6b7844' or 'name-name-name-gpu.comput3.ai'.",
            ErrorMessages.WORKLOAD_ID_NOT_FOUND,
        )

    if result.content_kind == ContentKind.NEITHER:
        error = ErrorMessages.NO_MESSAGE_CONTENT
    else:
        error = ErrorMessages.INVALID_WORKLOAD_ID

    return (
        f"Failed to stop workload: {error}. Please specify a valid workload ID ({ID_FORMAT_HINT}).",
        error,
    )


class StopWorkloadAction(WorkloadAction):
    """Stop a workload identified by UUID, domain or another recognizable id."""

    name = "STOP_WORKLOAD"
    similes = (
        "TERMINATE_WORKLOAD",
        "END_WORKLOAD",
        "SHUTDOWN_WORKLOAD",
        "STOP_GPU",
        "TERMINATE_GPU",
    )
    description = "Stops a running GPU workload on Comput3AI"
    operation = "stop workload"
    examples = (
        (
            {"name": "{{name1}}", "content": {"text": "Stop my workload {{workload_id}}"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Stopping your workload with ID '{{workload_id}}' now...",
                    "actions": ["STOP_WORKLOAD"],
                },
            },
        ),
        (
            {"name": "{{name1}}", "content": {"text": "Terminate the GPU instance {{workload_domain}}"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Terminating the workload with ID '{{workload_domain}}' now...",
                    "actions": ["STOP_WORKLOAD"],
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
        result = await self.extractor_factory(runtime).extract(CommandKind.STOP, message, state)
        if not result.succeeded:
            text, error = extraction_failure_message(result)
            return self.failure(text=text, error=error, kind=ErrorKind.EXTRACTION_FAILURE)

        intent = StopIntent.from_candidate(result.candidate)
        request = intent.to_request()
        logger.info("stopping_workload", workload=request.workload, strategy=result.strategy.value)

        response = await client.stop_workload(request)
        if not response.success or response.data is None:
            return self.remote_failure(
                response,
                operation=f"stop workload {request.workload}",
                workload=request.workload,
            )

        logger.info("workload_stopped", workload=request.workload)
        return self.success(
            text=format_stop_response(request),
            data=response.data,
            request=to_content(request),
            workload=request.workload,
        )
