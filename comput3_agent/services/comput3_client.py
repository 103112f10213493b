"""Comput3 REST API client wrapper."""

import os
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from comput3_agent.constants import API_CONFIG, API_KEY_SETTING, Endpoints, ErrorMessages
from comput3_agent.models.workload import (
    ApiResponse,
    LaunchRequest,
    LaunchWorkloadResponse,
    ListWorkloadsRequest,
    StopRequest,
    StopWorkloadResponse,
    UserBalance,
    UserProfile,
    WorkloadItem,
)

logger = structlog.get_logger(__name__)

_WORKLOAD_TYPES = TypeAdapter(list[str])
_WORKLOADS = TypeAdapter(list[WorkloadItem])
_BALANCE = TypeAdapter(UserBalance)
_PROFILE = TypeAdapter(UserProfile)
_LAUNCH = TypeAdapter(LaunchWorkloadResponse)
_STOP = TypeAdapter(StopWorkloadResponse)


class MissingCredentialError(Exception):
    """Raised when no Comput3 API key is configured."""


class Comput3Client:
    """Async wrapper for the Comput3 GPU workload API.

    Every call returns an ApiResponse. HTTP errors, network failures and
    malformed payloads are reported through ``success=False`` instead of
    being raised.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = API_CONFIG["TIMEOUT_SECONDS"],
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Comput3 client.

        Args:
            api_key: Comput3 API key sent in the X-C3-API-KEY header
            base_url: API base URL (defaults to COMPUT3AI_API_URL env var)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        if not api_key:
            raise MissingCredentialError(ErrorMessages.MISSING_API_KEY)

        self.base_url = base_url or os.getenv("COMPUT3AI_API_URL", API_CONFIG["BASE_URL"])
        self.http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={
                API_CONFIG["API_KEY_HEADER"]: api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )
        logger.debug("comput3_client_initialized", base_url=self.base_url)

    @classmethod
    def from_runtime(cls, runtime: Any, **kwargs: Any) -> "Comput3Client":
        """Create a client from the runtime's API key setting.

        Args:
            runtime: Agent runtime exposing ``get_setting``
            **kwargs: Extra constructor arguments (base_url, timeout, transport)

        Returns:
            Configured client

        Raises:
            MissingCredentialError: If the API key is absent
        """
        api_key = runtime.get_setting(API_KEY_SETTING)
        if not api_key:
            logger.error("comput3_api_key_missing", setting=API_KEY_SETTING)
            raise MissingCredentialError(ErrorMessages.MISSING_API_KEY)

        return cls(api_key=api_key, **kwargs)

    async def __aenter__(self) -> "Comput3Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP client."""
        await self.http_client.aclose()

    # ========== Account ==========

    async def get_workload_types(self) -> ApiResponse[list[str]]:
        """Get the workload types that can be launched.

        Returns:
            ApiResponse carrying the list of type strings
        """
        return await self._request("GET", Endpoints.TYPES, _WORKLOAD_TYPES)

    async def get_user_balance(self) -> ApiResponse[UserBalance]:
        """Get the account token balance.

        Returns:
            ApiResponse carrying a UserBalance
        """
        return await self._request("GET", Endpoints.BALANCE, _BALANCE)

    async def get_user_profile(self) -> ApiResponse[UserProfile]:
        """Get the account profile.

        Returns:
            ApiResponse carrying a UserProfile
        """
        return await self._request("GET", Endpoints.PROFILE, _PROFILE)

    # ========== Workloads ==========

    async def launch_workload(self, request: LaunchRequest) -> ApiResponse[LaunchWorkloadResponse]:
        """Launch a new GPU workload.

        Args:
            request: Workload type and absolute expiry timestamp

        Returns:
            ApiResponse carrying the new workload's id, key and node
        """
        return await self._request("POST", Endpoints.LAUNCH, _LAUNCH, body=request)

    async def stop_workload(self, request: StopRequest) -> ApiResponse[StopWorkloadResponse]:
        """Stop a running workload.

        Args:
            request: Identifier of the workload to stop

        Returns:
            ApiResponse carrying the (usually empty) stop response
        """
        return await self._request("POST", Endpoints.STOP, _STOP, body=request)

    async def list_workloads(
        self, request: ListWorkloadsRequest | None = None
    ) -> ApiResponse[list[WorkloadItem]]:
        """List the account's workloads.

        Args:
            request: Optional filter; only running workloads when omitted

        Returns:
            ApiResponse carrying the workload items
        """
        body = request if request is not None else ListWorkloadsRequest(running=True)
        return await self._request("POST", Endpoints.WORKLOADS, _WORKLOADS, body=body)

    # ========== Transport ==========

    async def _request(
        self,
        method: str,
        endpoint: str,
        adapter: TypeAdapter,
        body: BaseModel | None = None,
    ) -> ApiResponse:
        """Send one request and map the outcome to an ApiResponse."""
        payload = body.model_dump(exclude_none=True) if body is not None else None
        logger.debug("comput3_api_request", method=method, endpoint=endpoint, body=payload)

        try:
            response = await self.http_client.request(method, endpoint, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return self._error_response(endpoint, e.response)
        except httpx.RequestError as e:
            logger.error(
                "comput3_api_no_response",
                endpoint=endpoint,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ApiResponse(success=False, error=ErrorMessages.NETWORK_ERROR, status_code=0)

        try:
            data = adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("comput3_api_malformed_payload", endpoint=endpoint, error=str(e))
            return ApiResponse(
                success=False,
                error=f"Malformed response from {endpoint}: {e}",
                status_code=response.status_code,
            )

        logger.debug("comput3_api_response", endpoint=endpoint, status_code=response.status_code)
        return ApiResponse(success=True, data=data, status_code=response.status_code)

    @staticmethod
    def _error_response(endpoint: str, response: httpx.Response) -> ApiResponse:
        """Build a failed ApiResponse from an HTTP error response."""
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            message = body["message"]

        error = message or response.reason_phrase or (
            f"Request failed with status code {response.status_code}"
        )
        logger.error(
            "comput3_api_error",
            endpoint=endpoint,
            status_code=response.status_code,
            error=error,
        )
        return ApiResponse(success=False, error=error, status_code=response.status_code)
