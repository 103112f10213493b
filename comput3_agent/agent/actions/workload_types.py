"""GET_WORKLOAD_TYPES action."""

from comput3_agent.agent.actions.base import WorkloadAction
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.models.conversation import ActionResponse, Memory, State
from comput3_agent.services.comput3_client import Comput3Client


def format_workload_types(types: list[str]) -> str:
    """Render the available types as a quoted, comma separated list."""
    if not types:
        return "No workload types available"
    return ", ".join(f"'{workload_type}'" for workload_type in types)


class GetWorkloadTypesAction(WorkloadAction):
    """List the GPU workload types that can be launched."""

    name = "GET_WORKLOAD_TYPES"
    similes = (
        "LIST_WORKLOAD_TYPES",
        "GET_COMPUT3_TYPES",
        "LIST_COMPUT3_TYPES",
        "SHOW_WORKLOAD_TYPES",
    )
    description = "Retrieves available GPU workload types from Comput3AI"
    operation = "retrieve workload types"
    examples = (
        (
            {"name": "{{name1}}", "content": {"text": "What workload types are available on Comput3?"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Let me check the available workload types...",
                    "actions": ["GET_WORKLOAD_TYPES"],
                },
            },
        ),
        (
            {"name": "{{name1}}", "content": {"text": "Show me the GPU workload options I can launch"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Here are the available GPU workload types...",
                    "actions": ["GET_WORKLOAD_TYPES"],
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
        response = await client.get_workload_types()
        if not response.success or response.data is None:
            return self.remote_failure(response)

        return self.success(
            text=f"Available workload types: {format_workload_types(response.data)}",
            data=response.data,
        )
