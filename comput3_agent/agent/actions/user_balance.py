"""GET_USER_BALANCE action."""

from comput3_agent.agent.actions.base import WorkloadAction
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.models.conversation import ActionResponse, Memory, State
from comput3_agent.models.workload import UserBalance
from comput3_agent.services.comput3_client import Comput3Client


def format_user_balance(balance: UserBalance) -> str:
    return f"Your current Comput3AI balance is: {balance.balance} tokens"


class GetUserBalanceAction(WorkloadAction):
    """Report the account token balance."""

    name = "GET_USER_BALANCE"
    similes = (
        "SHOW_USER_BALANCE",
        "CHECK_BALANCE",
        "GET_COMPUT3_BALANCE",
        "DISPLAY_USER_BALANCE",
        "MY_COMPUT3_BALANCE",
    )
    description = "Retrieves user balance information from Comput3AI"
    operation = "retrieve user balance"
    examples = (
        (
            {"name": "{{name1}}", "content": {"text": "What's my current balance on Comput3?"}},
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Let me check your Comput3AI balance...",
                    "actions": ["GET_USER_BALANCE"],
                },
            },
        ),
        (
            {
                "name": "{{name1}}",
                "content": {"text": "How many tokens do I have in my Comput3AI account?"},
            },
            {
                "name": "{{name2}}",
                "content": {
                    "text": "Let me check your current token balance...",
                    "actions": ["GET_USER_BALANCE"],
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
        response = await client.get_user_balance()
        if not response.success or response.data is None:
            return self.remote_failure(response)

        return self.success(text=format_user_balance(response.data), data=response.data)
