"""LIST_WORKLOADS action."""

import structlog

from comput3_agent.agent.actions.base import WorkloadAction, format_timestamp
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.models.conversation import ActionResponse, Memory, State
from comput3_agent.models.workload import ListWorkloadsRequest, WorkloadItem
from comput3_agent.services.comput3_client import Comput3Client

logger = structlog.get_logger(__name__)


def wants_running_only(message: Memory) -> bool:
    """Whether the user asked for running workloads only."""
    return "running" in (message.text or "").lower()


def format_workloads_list(workloads: list[WorkloadItem], running_only: bool) -> str:
    """Render a header line followed by one block per workload.

    Args:
        workloads: Workloads returned by the API
        running_only: Whether the listing was filtered to running workloads

    Returns:
        Formatted listing
    """
    qualifier = "running " if running_only else ""
    if not workloads:
        return f"No {qualifier}workloads found."

    plural = "s" if len(workloads) > 1 else ""
    blocks = [f"Found {len(workloads)} {qualifier}workload{plural}:"]
    for workload in workloads:
        blocks.append(
            "\n".join(
                [
                    f"\n• Workload: {workload.workload}",
                    f"  Type: {workload.type}",
                    f"  Status: {workload.status}",
                    f"  Node: {workload.node}",
                    f"  Running: {'Yes' if workload.running else 'No'}",
                    f"  Created: {format_timestamp(workload.created)}",
                    f"  Expires: {format_timestamp(workload.expires)}",
                ]
            )
        )
    return "\n".join(blocks)


class ListWorkloadsAction(WorkloadAction):
    """List the account's workloads, optionally only running ones."""

    name = "LIST_WORKLOADS"
    similes = (
        "GET_WORKLOADS",
        "SHOW_WORKLOADS",
        "LIST_MY_WORKLOADS",
        "DISPLAY_WORKLOADS",
        "SHOW_MY_WORKLOADS",
    )
    description = "Retrieves a list of user workloads from Comput3AI"
    operation = "retrieve workloads"
    examples = (
        (
            {"name": "{{name1}}", "content": {"text": "List all my Comput3 workloads"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Here are your Comput3AI workloads...",
                    "actions": ["LIST_WORKLOADS"],
                },
            },
        ),
        (
            {"name": "{{name1}}", "content": {"text": "Show me my running workloads on Comput3AI"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Let me fetch your running workloads...",
                    "actions": ["LIST_WORKLOADS"],
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
        running_only = wants_running_only(message)
        logger.debug("list_workloads_filter", running_only=running_only)

        # No filter is sent unless the user asked for running workloads
        request = ListWorkloadsRequest(running=True if running_only else None)
        response = await client.list_workloads(request)
        if not response.success or response.data is None:
            return self.remote_failure(response)

        logger.info("workloads_retrieved", count=len(response.data))
        return self.success(
            text=format_workloads_list(response.data, running_only),
            data=response.data,
        )
