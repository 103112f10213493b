"""Action endpoints.

These endpoints expose the Comput3 plugin's actions over HTTP: list the
registered actions and run one against a single user turn.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from comput3_agent.agent.plugin import Comput3Plugin
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import ErrorMessages
from comput3_agent.models.conversation import (
    ActionResponse,
    ConversationMessage,
    Memory,
    State,
)
from comput3_agent.services.comput3_client import MissingCredentialError

router = APIRouter(prefix="/v1", tags=["actions"])


class ActionInfo(BaseModel):
    """Description of a registered action."""

    name: str
    similes: list[str]
    description: str


class ActionInvocation(BaseModel):
    """Request schema for running an action."""

    text: str | None = Field(None, max_length=4000, description="Free text of the user turn")
    content: dict[str, Any] = Field(
        default_factory=dict,
        description="Structured content, e.g. {'type': 'media:fast'} or {'workload': '...'}",
    )
    recent_messages: list[ConversationMessage] = Field(
        default_factory=list,
        description="Previous turns used as context for model-assisted extraction",
    )

    def to_memory(self) -> Memory:
        content = dict(self.content)
        if self.text is not None:
            content["text"] = self.text
        return Memory(content=content)


class ActionResult(BaseModel):
    """Response schema for an action run."""

    action: str = Field(..., description="Canonical action name")
    success: bool = Field(..., description="Whether the action succeeded")
    responses: list[ActionResponse] = Field(..., description="Responses delivered by the action")


def get_runtime(request: Request) -> AgentRuntime:
    """Return the runtime built at startup."""
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Agent runtime is not initialized",
        )
    return runtime


def get_plugin(request: Request) -> Comput3Plugin:
    """Return the plugin registered at startup."""
    plugin = getattr(request.app.state, "plugin", None)
    if plugin is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Comput3 plugin is not initialized",
        )
    return plugin


@router.get("/actions", response_model=list[ActionInfo])
async def list_actions(plugin: Comput3Plugin = Depends(get_plugin)) -> list[ActionInfo]:
    """List registered actions.

    Returns:
        Name, similes and description of every action
    """
    return [
        ActionInfo(
            name=action.name,
            similes=list(action.similes),
            description=action.description,
        )
        for action in plugin.actions
    ]


@router.post("/actions/{name}", response_model=ActionResult, status_code=status.HTTP_200_OK)
async def run_action(
    name: str,
    invocation: ActionInvocation,
    plugin: Comput3Plugin = Depends(get_plugin),
    runtime: AgentRuntime = Depends(get_runtime),
) -> ActionResult:
    """Run one action against a user turn.

    Args:
        name: Action name or simile
        invocation: User turn text, structured content and recent messages

    Returns:
        ActionResult with the responses delivered through the callback

    Raises:
        HTTPException: 404 for unknown actions
        MissingCredentialError: When the API key is not configured (412)
    """
    action = plugin.get_action(name)
    if action is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown action: {name}",
        )

    message = invocation.to_memory()
    if not await action.validate(runtime, message):
        raise MissingCredentialError(ErrorMessages.MISSING_API_KEY)

    responses: list[ActionResponse] = []
    success = await action.handler(
        runtime,
        message,
        State(messages=invocation.recent_messages),
        {},
        responses.append,
    )

    return ActionResult(action=action.name, success=success, responses=responses)
