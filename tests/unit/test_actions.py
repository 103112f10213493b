"""Unit tests for the Comput3 agent actions."""

from unittest.mock import MagicMock

import pytest

from comput3_agent.agent.actions.launch_workload import LaunchWorkloadAction
from comput3_agent.agent.actions.list_workloads import ListWorkloadsAction, format_workloads_list
from comput3_agent.agent.actions.stop_workload import StopWorkloadAction
from comput3_agent.agent.actions.user_balance import GetUserBalanceAction
from comput3_agent.agent.actions.user_profile import GetUserProfileAction, format_user_profile
from comput3_agent.agent.actions.workload_types import GetWorkloadTypesAction, format_workload_types
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import ErrorMessages
from comput3_agent.models.conversation import Memory
from comput3_agent.models.workload import UserProfile, WorkloadItem

UUID_ID = "7b69314d-c88d-47d9-920c-ae827f6b7844"

LAUNCH_RESPONSE = {
    "node": "node-7",
    "workload": "firmly-widely-proud-gpu.comput3.ai",
    "workload_key": "secret-key",
}


def text_message(text: str) -> Memory:
    return Memory(content={"text": text})


@pytest.mark.unit
class TestValidate:
    """Unit tests for the shared API-key check."""

    async def test_valid_with_api_key(self, runtime: AgentRuntime) -> None:
        """Test actions can run with an API key."""
        assert await GetUserBalanceAction().validate(runtime, text_message("balance")) is True

    async def test_invalid_without_api_key(self, runtime_without_key: AgentRuntime) -> None:
        """Test actions refuse to run without an API key."""
        assert await LaunchWorkloadAction().validate(runtime_without_key, text_message("x")) is False


@pytest.mark.unit
class TestHandlerBoundary:
    """Unit tests for the shared handler boundary."""

    async def test_missing_credential(self, runtime_without_key: AgentRuntime, recorder) -> None:
        """Test a missing key produces one failure response and no request."""
        action = GetUserBalanceAction()

        success = await action.handler(runtime_without_key, text_message("balance"), callback=recorder)

        assert success is False
        assert len(recorder.responses) == 1
        assert recorder.last.content["error_kind"] == "missing_credential"
        assert recorder.last.content["error"] == ErrorMessages.MISSING_API_KEY

    async def test_unexpected_error(self, model_runtime: AgentRuntime, mock_llm_client: MagicMock, fake_api, recorder) -> None:
        """Test collaborator exceptions become a single failure response."""
        mock_llm_client.complete.side_effect = RuntimeError("502 Bad Gateway from model host")
        action = LaunchWorkloadAction(client_factory=fake_api.client_factory)

        success = await action.handler(model_runtime, text_message("launch media:fast"), callback=recorder)

        assert success is False
        assert len(recorder.responses) == 1
        assert recorder.last.content["error_kind"] == "unexpected_error"
        assert "Server error (502 Bad Gateway)" in recorder.last.text
        assert fake_api.requests == []

    async def test_sync_callback(self, runtime: AgentRuntime, fake_api) -> None:
        """Test plain functions work as callbacks."""
        fake_api.add("GET", "/balance", json_body={"balance": 5})
        received = []

        await GetUserBalanceAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("balance"), callback=received.append
        )

        assert len(received) == 1

    async def test_without_callback(self, runtime: AgentRuntime, fake_api) -> None:
        """Test the handler result is returned without a callback."""
        fake_api.add("GET", "/balance", json_body={"balance": 5})

        success = await GetUserBalanceAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("balance")
        )

        assert success is True


@pytest.mark.unit
class TestAccountActions:
    """Unit tests for the read-only account actions."""

    async def test_workload_types(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test the types listing."""
        fake_api.add("GET", "/types", json_body=["media:fast", "ollama_webui:coder"])

        success = await GetWorkloadTypesAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("what types?"), callback=recorder
        )

        assert success is True
        assert recorder.last.text == "Available workload types: 'media:fast', 'ollama_webui:coder'"
        assert recorder.last.content == {"success": True, "data": ["media:fast", "ollama_webui:coder"]}

    def test_empty_types(self) -> None:
        """Test wording when no types are available."""
        assert format_workload_types([]) == "No workload types available"

    async def test_balance(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test the balance wording."""
        fake_api.add("GET", "/balance", json_body={"balance": 1500})

        await GetUserBalanceAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("balance"), callback=recorder
        )

        assert recorder.last.text == "Your current Comput3AI balance is: 1500 tokens"
        assert recorder.last.content["data"] == {"balance": 1500}

    async def test_balance_remote_error(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test remote errors carry message and status code."""
        fake_api.add("GET", "/balance", status_code=401, json_body={"message": "Invalid API key"})

        success = await GetUserBalanceAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("balance"), callback=recorder
        )

        assert success is False
        assert recorder.last.text == "Failed to retrieve user balance: Invalid API key"
        assert recorder.last.content["error_kind"] == "remote_error"
        assert recorder.last.content["status_code"] == 401

    async def test_profile(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test the profile wording."""
        fake_api.add(
            "GET",
            "/profile",
            json_body={"addr": "0xabc", "tags": ["beta", "gpu"], "user_uuid": "u-1"},
        )

        await GetUserProfileAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("profile"), callback=recorder
        )

        assert recorder.last.text == (
            "User Profile Information:\nWallet Address: 0xabc\nUser UUID: u-1\nTags: beta, gpu"
        )

    def test_profile_without_tags(self) -> None:
        """Test profiles without tags."""
        text = format_user_profile(UserProfile(addr="0xabc", user_uuid="u-1"))

        assert text.endswith("Tags: None")


@pytest.mark.unit
class TestListWorkloads:
    """Unit tests for LIST_WORKLOADS."""

    async def test_running_filter(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test 'running' in the message filters to running workloads."""
        fake_api.add("POST", "/workloads", json_body=[])

        await ListWorkloadsAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("Show me my RUNNING workloads"), callback=recorder
        )

        assert fake_api.request_body() == {"running": True}
        assert recorder.last.text == "No running workloads found."

    async def test_no_filter(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test no filter is sent otherwise."""
        fake_api.add("POST", "/workloads", json_body=[])

        await ListWorkloadsAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("List all my workloads"), callback=recorder
        )

        assert fake_api.request_body() == {}
        assert recorder.last.text == "No workloads found."

    def test_formatting(self) -> None:
        """Test the listing header and per-workload block."""
        item = WorkloadItem(
            created=1700000000,
            expires=1700000600,
            node="node-1",
            running=True,
            status="running",
            type="media:fast",
            workload="wl-1",
        )

        text = format_workloads_list([item, item], running_only=False)

        assert text.startswith("Found 2 workloads:")
        assert "• Workload: wl-1" in text
        assert "  Running: Yes" in text

    def test_single_workload_header(self) -> None:
        """Test singular wording for one workload."""
        item = WorkloadItem(
            created=0, expires=0, node="n", running=False, status="stopped", type="t", workload="w"
        )

        text = format_workloads_list([item], running_only=True)

        assert text.startswith("Found 1 running workload:")
        assert "  Running: No" in text

    async def test_millisecond_timestamps(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test timestamps beyond the datetime range are listed as raw numbers."""
        fake_api.add(
            "POST",
            "/workloads",
            json_body=[
                {
                    "created": 1700000000000,
                    "expires": 1700000600000,
                    "node": "node-1",
                    "running": True,
                    "status": "running",
                    "type": "media:fast",
                    "workload": "wl-1",
                }
            ],
        )

        success = await ListWorkloadsAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("list my workloads"), callback=recorder
        )

        assert success is True
        assert "  Created: 1700000000000" in recorder.last.text
        assert "  Expires: 1700000600000" in recorder.last.text


@pytest.mark.unit
class TestLaunchWorkload:
    """Unit tests for LAUNCH_WORKLOAD."""

    async def test_launch_from_text(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test a free-text launch end to end."""
        fake_api.add("POST", "/launch", json_body=LAUNCH_RESPONSE)

        success = await LaunchWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("Launch a media:fast workload for 30 minutes"), callback=recorder
        )

        assert success is True
        body = fake_api.request_body()
        assert body["type"] == "media:fast"
        assert recorder.last.content["request"] == body
        assert recorder.last.content["data"] == LAUNCH_RESPONSE
        assert recorder.last.text.startswith("Successfully launched a new media:fast workload!")
        assert "Workload Key: secret-key" in recorder.last.text
        assert "Expires: in 30 minutes" in recorder.last.text

    async def test_launch_from_structured_content(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test structured content skips text extraction."""
        fake_api.add("POST", "/launch", json_body=LAUNCH_RESPONSE)

        await LaunchWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, Memory(content={"type": "ollama_webui:large"}), callback=recorder
        )

        assert fake_api.request_body()["type"] == "ollama_webui:large"
        assert "Expires: in 10 minutes" in recorder.last.text

    async def test_far_future_expiry_still_succeeds(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test an expiry past the datetime range is reported raw after a real launch."""
        fake_api.add("POST", "/launch", json_body=LAUNCH_RESPONSE)

        success = await LaunchWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("launch media:fast for 100000000 hours"), callback=recorder
        )

        assert success is True
        assert len(fake_api.requests) == 1
        assert len(recorder.responses) == 1
        expires = fake_api.request_body()["expires"]
        assert f"Expires: in 6000000000 minutes ({expires})" in recorder.last.text
        assert recorder.last.content["success"] is True

    async def test_invalid_structured_type_launches_nothing(
        self, model_runtime: AgentRuntime, mock_llm_client: MagicMock, fake_api, recorder
    ) -> None:
        """Test a malformed structured type fails the turn instead of asking the model."""
        mock_llm_client.complete.return_value = '{"type": "ollama_webui:large", "expires": 5}'
        fake_api.add("POST", "/launch", json_body=LAUNCH_RESPONSE)

        success = await LaunchWorkloadAction(client_factory=fake_api.client_factory).handler(
            model_runtime, Memory(content={"type": 123, "text": "hello"}), callback=recorder
        )

        assert success is False
        assert fake_api.requests == []
        mock_llm_client.complete.assert_not_awaited()
        assert recorder.last.content["error_kind"] == "extraction_failure"

    async def test_extraction_failure_sends_nothing(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test no request is sent when no type can be found."""
        success = await LaunchWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("hello there"), callback=recorder
        )

        assert success is False
        assert fake_api.requests == []
        assert recorder.last.content["error"] == ErrorMessages.INVALID_WORKLOAD_TYPE
        assert recorder.last.content["error_kind"] == "extraction_failure"
        assert "media:fast" in recorder.last.text

    async def test_gateway_error(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test 502 responses get the gateway wording."""
        fake_api.add("POST", "/launch", status_code=502, json_body={})

        await LaunchWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("launch media:fast"), callback=recorder
        )

        assert recorder.last.text.startswith("Failed to launch workload: Server error (502 Bad Gateway)")
        assert recorder.last.content["status_code"] == 502


@pytest.mark.unit
class TestStopWorkload:
    """Unit tests for STOP_WORKLOAD."""

    async def test_stop_from_text(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test a free-text stop end to end with a single response."""
        fake_api.add("POST", "/stop", json_body={})

        success = await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message(f"Stop my workload {UUID_ID}"), callback=recorder
        )

        assert success is True
        assert len(recorder.responses) == 1
        assert fake_api.request_body() == {"workload": UUID_ID}
        assert recorder.last.text == f"Successfully stopped workload!\n\nWorkload ID: {UUID_ID}\nStatus: Stopped"
        assert recorder.last.content["workload"] == UUID_ID

    async def test_stop_from_structured_content(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test a workload field is sent as-is."""
        fake_api.add("POST", "/stop", json_body={})

        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, Memory(content={"workload": "wrk_abc"}), callback=recorder
        )

        assert fake_api.request_body() == {"workload": "wrk_abc"}

    async def test_unrecognized_text(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test free text without an id."""
        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message("stop it"), callback=recorder
        )

        assert fake_api.requests == []
        assert recorder.last.content["error"] == ErrorMessages.WORKLOAD_ID_NOT_FOUND
        assert recorder.last.text.startswith("Failed to identify a workload ID to stop.")

    async def test_no_content(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test content with neither text nor workload."""
        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, Memory(content={}), callback=recorder
        )

        assert recorder.last.content["error"] == ErrorMessages.NO_MESSAGE_CONTENT
        assert "name-name-name-gpu.comput3.ai" in recorder.last.text

    async def test_invalid_structured_workload(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test an empty workload field fails without trying the text."""
        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, Memory(content={"workload": "", "text": f"stop {UUID_ID}"}), callback=recorder
        )

        assert fake_api.requests == []
        assert recorder.last.content["error"] == ErrorMessages.INVALID_WORKLOAD_ID

    async def test_non_string_workload_reads_text(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test a non-string workload field is ignored in favor of the text."""
        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, Memory(content={"workload": 42, "text": "stop it"}), callback=recorder
        )

        assert fake_api.requests == []
        assert recorder.last.content["error"] == ErrorMessages.WORKLOAD_ID_NOT_FOUND

    async def test_non_string_workload_without_text(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test a non-string workload field alone counts as no content."""
        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, Memory(content={"workload": 42}), callback=recorder
        )

        assert recorder.last.content["error"] == ErrorMessages.NO_MESSAGE_CONTENT

    async def test_remote_error_names_workload(self, runtime: AgentRuntime, fake_api, recorder) -> None:
        """Test remote errors mention the workload being stopped."""
        fake_api.add("POST", "/stop", status_code=404, json_body={"message": "Workload not found"})

        await StopWorkloadAction(client_factory=fake_api.client_factory).handler(
            runtime, text_message(f"stop {UUID_ID}"), callback=recorder
        )

        assert recorder.last.text == f"Failed to stop workload {UUID_ID}: Workload not found"
        assert recorder.last.content["workload"] == UUID_ID
        assert recorder.last.content["status_code"] == 404
