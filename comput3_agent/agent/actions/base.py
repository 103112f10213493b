"""Shared behaviour of the Comput3 agent actions.

Every handled turn ends in exactly one callback. Failures are reported
through that callback with ``success=False``, an ``error`` message and an
``error_kind``; handlers never raise.
"""

import inspect
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel

from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import API_KEY_SETTING
from comput3_agent.models.conversation import ActionResponse, ErrorKind, Memory, State
from comput3_agent.models.workload import ApiResponse
from comput3_agent.services.comput3_client import Comput3Client, MissingCredentialError
from comput3_agent.services.error_translator import ErrorTranslator
from comput3_agent.services.intent_extractor import IntentExtractor

logger = structlog.get_logger(__name__)

ResponseCallback = Callable[[ActionResponse], Awaitable[None] | None]
ClientFactory = Callable[[AgentRuntime], Comput3Client]
ExtractorFactory = Callable[[AgentRuntime], IntentExtractor]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(seconds: int) -> str:
    """Render a Unix timestamp in local time.

    Timestamps outside the platform's datetime range (far-future expiries,
    millisecond values) are rendered as the raw number.
    """
    try:
        return datetime.fromtimestamp(seconds).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError):
        logger.warning("timestamp_out_of_range", timestamp=seconds)
        return str(seconds)


def to_content(value: Any) -> Any:
    """Convert models (or lists of models) to JSON-compatible values."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [to_content(item) for item in value]
    return value


class WorkloadAction:
    """Base class for actions backed by one Comput3 API call.

    Subclasses set the class attributes and implement ``run``.
    """

    name: str = ""
    similes: tuple[str, ...] = ()
    description: str = ""
    examples: tuple[tuple[dict[str, Any], ...], ...] = ()
    # Phrase completing "Failed to ...", e.g. "retrieve user balance"
    operation: str = ""

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        extractor_factory: ExtractorFactory | None = None,
    ):
        """Initialize action.

        Args:
            client_factory: Builds a Comput3 client for a runtime
                           (defaults to Comput3Client.from_runtime)
            extractor_factory: Builds an intent extractor for a runtime
                              (defaults to IntentExtractor)
        """
        self.client_factory = client_factory or Comput3Client.from_runtime
        self.extractor_factory = extractor_factory or IntentExtractor

    async def validate(self, runtime: AgentRuntime, message: Memory) -> bool:
        """Check that the API key is configured.

        Args:
            runtime: Agent runtime
            message: Triggering message

        Returns:
            True if the action can run
        """
        if not runtime.get_setting(API_KEY_SETTING):
            logger.error("action_validation_failed", action=self.name, reason="missing API key")
            return False

        logger.debug("action_validated", action=self.name)
        return True

    async def handler(
        self,
        runtime: AgentRuntime,
        message: Memory,
        state: State | None = None,
        options: dict[str, Any] | None = None,
        callback: ResponseCallback | None = None,
    ) -> bool:
        """Run the action and deliver exactly one response.

        Args:
            runtime: Agent runtime
            message: Triggering message
            state: Turn state with recent conversation messages
            options: Additional options (unused by the built-in actions)
            callback: Receives the single ActionResponse

        Returns:
            True on success, False otherwise
        """
        log = logger.bind(action=self.name)
        log.info("action_started")

        try:
            async with self.client_factory(runtime) as client:
                response = await self.run(client, runtime, message, state or State())
        except MissingCredentialError as e:
            log.error("action_missing_credential", error=str(e))
            response = self.failure(
                text=f"Failed to {self.operation}: {e}",
                error=str(e),
                kind=ErrorKind.MISSING_CREDENTIAL,
            )
        except Exception as e:
            log.exception("action_unexpected_error", error=str(e))
            response = self.failure(
                text=ErrorTranslator.translate_exception(self.operation, e),
                error=ErrorTranslator.describe(e),
                kind=ErrorKind.UNEXPECTED_ERROR,
            )

        log.info("action_completed", success=response.success)
        if callback is not None:
            result = callback(response)
            if inspect.isawaitable(result):
                await result

        return response.success

    async def run(
        self,
        client: Comput3Client,
        runtime: AgentRuntime,
        message: Memory,
        state: State,
    ) -> ActionResponse:
        """Perform the action and build its response."""
        raise NotImplementedError

    # ========== Responses ==========

    def success(self, text: str, data: Any, **extra: Any) -> ActionResponse:
        """Build a success response."""
        return ActionResponse(
            text=text,
            content={"success": True, "data": to_content(data), **extra},
        )

    def failure(self, text: str, error: str, kind: ErrorKind, **extra: Any) -> ActionResponse:
        """Build a failure response."""
        return ActionResponse(
            text=text,
            content={"success": False, "error": error, "error_kind": kind.value, **extra},
        )

    def remote_failure(
        self,
        response: ApiResponse,
        operation: str | None = None,
        **extra: Any,
    ) -> ActionResponse:
        """Build a failure response from a failed API call.

        Args:
            response: Failed API response
            operation: Operation phrase for the message (defaults to ``self.operation``)
            **extra: Additional content fields

        Returns:
            ActionResponse carrying the error and the HTTP status code
        """
        error = response.error or f"Failed to {self.operation}"
        logger.error(
            "action_remote_error",
            action=self.name,
            error=error,
            status_code=response.status_code,
        )
        return self.failure(
            text=ErrorTranslator.translate_api_error(
                operation or self.operation, error, response.status_code
            ),
            error=error,
            kind=ErrorKind.REMOTE_ERROR,
            status_code=response.status_code,
            **extra,
        )
