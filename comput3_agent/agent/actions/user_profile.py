"""GET_USER_PROFILE action."""

from comput3_agent.agent.actions.base import WorkloadAction
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.models.conversation import ActionResponse, Memory, State
from comput3_agent.models.workload import UserProfile
from comput3_agent.services.comput3_client import Comput3Client


def format_user_profile(profile: UserProfile) -> str:
    """Render wallet address, user id and tags, one per line."""
    lines = [
        "User Profile Information:",
        f"Wallet Address: {profile.addr}",
        f"User UUID: {profile.user_uuid}",
        f"Tags: {', '.join(profile.tags) if profile.tags else 'None'}",
    ]
    return "\n".join(lines)


class GetUserProfileAction(WorkloadAction):
    """Report the account profile."""

    name = "GET_USER_PROFILE"
    similes = (
        "SHOW_USER_PROFILE",
        "GET_COMPUT3_PROFILE",
        "DISPLAY_USER_PROFILE",
        "MY_COMPUT3_PROFILE",
    )
    description = "Retrieves user profile information from Comput3AI"
    operation = "retrieve user profile"
    examples = (
        (
            {"name": "{{name1}}", "content": {"text": "What's my Comput3 profile?"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Let me check your Comput3AI profile information...",
                    "actions": ["GET_USER_PROFILE"],
                },
            },
        ),
        (
            {"name": "{{name1}}", "content": {"text": "Show me my Comput3AI user profile"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Here's your Comput3AI profile information...",
                    "actions": ["GET_USER_PROFILE"],
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
        response = await client.get_user_profile()
        if not response.success or response.data is None:
            return self.remote_failure(response)

        return self.success(text=format_user_profile(response.data), data=response.data)
