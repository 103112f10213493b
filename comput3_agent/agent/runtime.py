"""Agent runtime surface consumed by the Comput3 actions."""

import os
from collections.abc import Mapping

import structlog

from comput3_agent.agent.conversation.llm_client import LLMClient
from comput3_agent.models.conversation import ModelType, State
from comput3_agent.services.prompt_templates import compose_prompt, format_recent_messages

logger = structlog.get_logger(__name__)


class ModelUnavailableError(RuntimeError):
    """Raised when a model call is requested but no model is configured."""


class AgentRuntime:
    """Settings lookup, model invocation and prompt composition for actions.

    Settings passed explicitly take precedence over environment variables.
    """

    def __init__(
        self,
        settings: Mapping[str, str] | None = None,
        llm_client: LLMClient | None = None,
    ):
        """Initialize runtime.

        Args:
            settings: Explicit settings (API key, wallet address, ...)
            llm_client: LLM client for model-assisted extraction (optional)
        """
        self.settings = dict(settings or {})
        self.llm_client = llm_client

    @classmethod
    def from_env(cls) -> "AgentRuntime":
        """Build a runtime from environment variables.

        An LLM client is attached when COMPUT3AI_LLM_CONFIG points at an
        existing file.
        """
        llm_client = None
        config_path = os.getenv("COMPUT3AI_LLM_CONFIG")
        if config_path and os.path.exists(config_path):
            llm_client = LLMClient(config_path=config_path)
            logger.info("llm_client_configured", config_path=config_path, model=llm_client.model)
        else:
            logger.info("llm_client_not_configured")

        return cls(llm_client=llm_client)

    def get_setting(self, name: str) -> str | None:
        """Look up a setting, falling back to the environment.

        Args:
            name: Setting name

        Returns:
            Setting value, or None if absent or empty
        """
        value = self.settings.get(name) or os.getenv(name)
        return value or None

    @property
    def model_available(self) -> bool:
        """Whether model-assisted extraction can run."""
        return self.llm_client is not None

    async def use_model(self, kind: ModelType, prompt: str) -> str:
        """Run a single completion.

        Args:
            kind: Model size
            prompt: Composed prompt

        Returns:
            Raw model text

        Raises:
            ModelUnavailableError: If no model is configured
        """
        if self.llm_client is None:
            raise ModelUnavailableError("No language model configured for this runtime")

        return await self.llm_client.complete(kind, prompt)

    def compose_prompt(self, template: str, state: State | None) -> str:
        """Render a prompt template with recent conversation context."""
        return compose_prompt(template, {"recentMessages": format_recent_messages(state)})

    async def close(self) -> None:
        """Release the LLM client, if any."""
        if self.llm_client is not None:
            await self.llm_client.close()
