"""Comput3 plugin: the action registry exposed to the agent runtime."""

from collections.abc import Iterable

import structlog

from comput3_agent.agent.actions.base import WorkloadAction
from comput3_agent.agent.actions.launch_workload import LaunchWorkloadAction
from comput3_agent.agent.actions.list_workloads import ListWorkloadsAction
from comput3_agent.agent.actions.stop_workload import StopWorkloadAction
from comput3_agent.agent.actions.user_balance import GetUserBalanceAction
from comput3_agent.agent.actions.user_profile import GetUserProfileAction
from comput3_agent.agent.actions.workload_types import GetWorkloadTypesAction
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import API_CONFIG

logger = structlog.get_logger(__name__)


def default_actions() -> list[WorkloadAction]:
    """Build the built-in actions in registration order."""
    return [
        GetWorkloadTypesAction(),
        GetUserProfileAction(),
        GetUserBalanceAction(),
        ListWorkloadsAction(),
        LaunchWorkloadAction(),
        StopWorkloadAction(),
    ]


class Comput3Plugin:
    """Registry of the Comput3 GPU workload actions."""

    name = "comput3ai"
    description = "Plugin for interacting with Comput3AI GPU services API"

    def __init__(self, actions: Iterable[WorkloadAction] | None = None):
        self.actions = list(actions) if actions is not None else default_actions()

    async def init(self, runtime: AgentRuntime) -> list[str]:
        """Check that the required settings are present.

        Missing settings are logged, not raised, so the agent can still start.

        Args:
            runtime: Agent runtime used for settings lookup

        Returns:
            Names of the missing settings
        """
        logger.info("plugin_initializing", plugin=self.name, actions=len(self.actions))

        missing = []
        for setting in API_CONFIG["REQUIRED_SETTINGS"]:
            if runtime.get_setting(setting):
                logger.debug("plugin_setting_found", setting=setting)
            else:
                logger.error("plugin_setting_missing", setting=setting)
                missing.append(setting)

        return missing

    def get_action(self, name: str) -> WorkloadAction | None:
        """Resolve an action by name or simile, case-insensitively.

        Args:
            name: Action name or simile

        Returns:
            Matching action, or None
        """
        wanted = name.strip().upper()
        for action in self.actions:
            if action.name == wanted or wanted in action.similes:
                return action
        return None
