"""Error message translation service.

This service turns Comput3 API failures and unexpected action errors into
user-facing messages.
"""

from comput3_agent.constants import ErrorMessages

GATEWAY_STATUS_CODES = frozenset({502, 504})

_GATEWAY_MARKERS = ("502", "504", "Bad Gateway", "Gateway Timeout")


class ErrorTranslator:
    """Translate technical errors to user-friendly messages."""

    @staticmethod
    def translate_api_error(
        operation: str,
        error: str | None,
        status_code: int | None = None,
    ) -> str:
        """Translate a failed API response to a user-facing message.

        Args:
            operation: Operation phrase, e.g. "launch workload"
                      or "stop workload firmly-widely-proud-gpu.comput3.ai"
            error: Error message carried by the response
            status_code: HTTP status code (0 when no response was received)

        Returns:
            ``Failed to <operation>: <detail>``
        """
        if status_code in GATEWAY_STATUS_CODES:
            return ErrorTranslator._gateway_message(operation, status_code)

        return f"Failed to {operation}: {error or ErrorMessages.UNKNOWN_ERROR}"

    @staticmethod
    def translate_exception(operation: str, error: BaseException) -> str:
        """Translate an unexpected exception to a user-facing message.

        Messages mentioning a gateway failure get the gateway wording.

        Args:
            operation: Operation phrase, e.g. "launch workload"
            error: The exception that occurred

        Returns:
            ``Failed to <operation>: <detail>``
        """
        message = ErrorTranslator.describe(error)
        if any(marker in message for marker in _GATEWAY_MARKERS):
            status_code = 504 if "504" in message or "Gateway Timeout" in message else 502
            return ErrorTranslator._gateway_message(operation, status_code)

        return f"Failed to {operation}: {message}"

    @staticmethod
    def describe(error: BaseException) -> str:
        """Return the exception message, or a generic one if it has none."""
        return str(error) or ErrorMessages.UNKNOWN_ERROR

    @staticmethod
    def _gateway_message(operation: str, status_code: int) -> str:
        """Handle 502 Bad Gateway and 504 Gateway Timeout errors."""
        label = "502 Bad Gateway" if status_code == 502 else "504 Gateway Timeout"
        return (
            f"Failed to {operation}: Server error ({label}). "
            "The Comput3AI service is currently experiencing issues. "
            "Please try again later or contact Comput3AI support if the problem persists."
        )
