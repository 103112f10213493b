"""LLM client wrapper for model-assisted intent extraction."""

import json
import os
import re
from typing import Any

import httpx
import structlog
import yaml

from comput3_agent.models.conversation import ModelType

logger = structlog.get_logger(__name__)

_ENV_REFERENCE = re.compile(r"\$\{env\.([^}]+)\}")
_JSON_BLOCK = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


class LLMClient:
    """Wrapper for an OpenAI-compatible chat completions endpoint.

    Provider settings come from a YAML file shaped like::

        providers:
          inference:
            - type: vllm
              base_url: ${env.LLM_BASE_URL:-http://localhost:8000}
              model: llama-3.1-8b-instruct
              models:
                text_large: llama-3.3-70b-instruct
              temperature: 0.3
    """

    def __init__(
        self,
        config_path: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize LLM client.

        Args:
            config_path: Path to the provider YAML configuration
                        (ignored when base_url and model are given)
            base_url: Endpoint base URL
            model: Default model name
            api_key: Bearer token for the endpoint (defaults to LLM_API_KEY env var)
            transport: Optional httpx transport, used by tests
        """
        self.provider_config: dict[str, Any] = {}
        self.base_url = base_url
        self.model = model
        self.models: dict[str, str] = {}
        self.temperature = 0.3
        self.max_tokens = 512
        self.top_p = 0.95

        if not (base_url and model):
            self.config_path = config_path or os.getenv(
                "COMPUT3AI_LLM_CONFIG", "./llm-config.yaml"
            )
            self._load_config()

        self.api_key = api_key or os.getenv("LLM_API_KEY")
        self._initialize_client(transport)

    def _load_config(self) -> None:
        """Load provider configuration from YAML."""
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        providers = config.get("providers", {})
        inference_providers = providers.get("inference", [])

        if not inference_providers:
            raise ValueError(f"No inference providers configured in {self.config_path}")

        # Use first inference provider
        self.provider_config = inference_providers[0]
        self.base_url = self.base_url or self.provider_config.get("base_url")
        self.model = self.model or self.provider_config.get("model")
        self.models = dict(self.provider_config.get("models") or {})

        self.temperature = self.provider_config.get("temperature", self.temperature)
        self.max_tokens = self.provider_config.get("max_tokens", self.max_tokens)
        self.top_p = self.provider_config.get("top_p", self.top_p)

        if self.base_url and "${env." in self.base_url:
            self.base_url = _resolve_env_references(self.base_url)

        if not self.base_url or not self.model:
            raise ValueError(f"Inference provider in {self.config_path} needs base_url and model")

    def _initialize_client(self, transport: httpx.AsyncBaseTransport | None) -> None:
        """Initialize HTTP client for LLM endpoint."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        self.http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(30.0),
            headers=headers,
            transport=transport,
        )

    def model_for(self, kind: ModelType) -> str:
        """Return the configured model name for a model kind."""
        return self.models.get(kind.value, self.model)

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate text from LLM.

        Args:
            prompt: User prompt
            system_prompt: System prompt (optional)
            model: Model override (optional, uses config default)
            temperature: Sampling temperature (optional, uses config default)
            max_tokens: Max tokens to generate (optional, uses config default)

        Returns:
            Generated text response

        Raises:
            httpx.HTTPError: If the endpoint is unreachable or returns an error
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        request_data = {
            "model": model or self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
            "top_p": self.top_p,
        }

        logger.debug("llm_request", model=request_data["model"], prompt_chars=len(prompt))
        response = await self.http_client.post(
            "/v1/chat/completions",
            json=request_data,
        )
        response.raise_for_status()

        result = response.json()
        # content is null when the reply holds only tool calls or was filtered
        return result["choices"][0]["message"]["content"] or ""

    async def complete(self, kind: ModelType, prompt: str) -> str:
        """Single request/response completion for a model kind.

        Args:
            kind: Model size requested by the caller
            prompt: Fully composed prompt

        Returns:
            Raw model text
        """
        return await self.generate(prompt=prompt, model=self.model_for(kind))

    async def close(self) -> None:
        """Close HTTP client."""
        await self.http_client.aclose()


def _resolve_env_references(value: str) -> str:
    """Expand ``${env.NAME:-default}`` references."""
    for match in _ENV_REFERENCE.findall(value):
        parts = match.split(":-")
        env_var = parts[0]
        default = parts[1] if len(parts) > 1 else None
        value = value.replace(f"${{env.{match}}}", os.getenv(env_var, default) or "")
    return value


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Parse the first JSON object out of model output.

    Accepts a bare JSON object, a fenced ```json block, or an object embedded
    in surrounding prose.

    Args:
        text: Raw model output

    Returns:
        Parsed object, or None if no JSON object could be parsed
    """
    if not text:
        return None

    candidates = []
    block = _JSON_BLOCK.search(text)
    if block:
        candidates.append(block.group(1))
    candidates.append(text.strip())
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.debug("llm_output_not_json", output=text[:200])
    return None
