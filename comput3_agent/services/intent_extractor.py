"""Extraction orchestrator turning user turns into validated candidates.

A single orchestrator serves every command kind. Each kind is described by
an ExtractionPlan naming the ordered strategies to try, the validator that
gates them and the defaults applied to the accepted candidate:

- LAUNCH: structured input, then the model, then deterministic extraction
- STOP: structured input, then deterministic extraction, then the model

The first candidate that passes the validator wins, and structured input
that fails validation ends the chain without trying text or the model.
Each strategy runs at most once per turn, so at most one model call is made.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

import structlog

from comput3_agent.agent.conversation.llm_client import extract_json_object
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.constants import DEFAULT_EXPIRES_MINUTES
from comput3_agent.models.conversation import Memory, ModelType, State
from comput3_agent.models.workload import CommandKind
from comput3_agent.services.extractors import (
    launch_candidate_from_text,
    stop_candidate_from_text,
)
from comput3_agent.services.prompt_templates import (
    LAUNCH_WORKLOAD_TEMPLATE,
    STOP_WORKLOAD_TEMPLATE,
)
from comput3_agent.services.validators import is_launch_intent, is_stop_intent

logger = structlog.get_logger(__name__)


class ExtractionStrategy(str, Enum):
    """Ways of producing a candidate from a user turn."""

    STRUCTURED = "structured"
    DIRECT = "direct"
    MODEL = "model"


class ContentKind(str, Enum):
    """Shape of the incoming message content."""

    STRUCTURED = "structured"
    FREE_TEXT = "free_text"
    NEITHER = "neither"


@dataclass(frozen=True)
class ResolvedContent:
    """Message content resolved once at orchestrator entry.

    ``text`` is kept for structured content too, so later strategies can
    still read it.
    """

    kind: ContentKind
    candidate: dict[str, Any] | None = None
    text: str | None = None


@dataclass(frozen=True)
class ExtractionPlan:
    """Extraction configuration for one command kind."""

    kind: CommandKind
    structured_fields: tuple[str, ...]
    strategies: tuple[ExtractionStrategy, ...]
    validator: Callable[[Any], bool]
    text_extractor: Callable[[str | None], dict[str, Any] | None]
    template: str
    defaults: Mapping[str, Any] = field(default_factory=dict)
    # Decides whether the key field's value marks content as structured
    is_structured: Callable[[Any], bool] = field(default=lambda value: value is not None)
    structured_is_final: bool = True

    @property
    def key_field(self) -> str:
        """Field whose value decides whether content is structured."""
        return self.structured_fields[0]


@dataclass
class ExtractionResult:
    """Outcome of one extraction attempt chain."""

    kind: CommandKind
    content_kind: ContentKind
    candidate: dict[str, Any] | None = None
    strategy: ExtractionStrategy | None = None
    attempted: list[ExtractionStrategy] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Whether a validated candidate was produced."""
        return self.candidate is not None


LAUNCH_PLAN = ExtractionPlan(
    kind=CommandKind.LAUNCH,
    structured_fields=("type", "expires"),
    strategies=(
        ExtractionStrategy.STRUCTURED,
        ExtractionStrategy.MODEL,
        ExtractionStrategy.DIRECT,
    ),
    validator=is_launch_intent,
    text_extractor=launch_candidate_from_text,
    template=LAUNCH_WORKLOAD_TEMPLATE,
    defaults=MappingProxyType({"expires": DEFAULT_EXPIRES_MINUTES}),
)

STOP_PLAN = ExtractionPlan(
    kind=CommandKind.STOP,
    structured_fields=("workload",),
    strategies=(
        ExtractionStrategy.STRUCTURED,
        ExtractionStrategy.DIRECT,
        ExtractionStrategy.MODEL,
    ),
    validator=is_stop_intent,
    text_extractor=stop_candidate_from_text,
    template=STOP_WORKLOAD_TEMPLATE,
    is_structured=lambda value: isinstance(value, str),
)

DEFAULT_PLANS: Mapping[CommandKind, ExtractionPlan] = MappingProxyType(
    {
        CommandKind.LAUNCH: LAUNCH_PLAN,
        CommandKind.STOP: STOP_PLAN,
    }
)


class IntentExtractor:
    """Run the extraction strategies of a command kind against a user turn."""

    def __init__(
        self,
        runtime: AgentRuntime,
        plans: Mapping[CommandKind, ExtractionPlan] | None = None,
        model_type: ModelType = ModelType.TEXT_SMALL,
    ):
        """Initialize extractor.

        Args:
            runtime: Agent runtime providing model invocation and prompts
            plans: Extraction plans per command kind (defaults to DEFAULT_PLANS)
            model_type: Model size used for model-assisted extraction
        """
        self.runtime = runtime
        self.plans = plans or DEFAULT_PLANS
        self.model_type = model_type

    def resolve_content(self, plan: ExtractionPlan, message: Memory) -> ResolvedContent:
        """Classify message content by the value of the plan's key field.

        Args:
            plan: Extraction plan of the command kind
            message: Incoming user message

        Returns:
            ResolvedContent with the structured candidate and/or free text
        """
        content = message.content
        text = message.text

        if plan.is_structured(content.get(plan.key_field)):
            candidate = {
                name: content[name] for name in plan.structured_fields if name in content
            }
            return ResolvedContent(kind=ContentKind.STRUCTURED, candidate=candidate, text=text)

        if text is not None:
            return ResolvedContent(kind=ContentKind.FREE_TEXT, text=text)

        return ResolvedContent(kind=ContentKind.NEITHER)

    async def extract(
        self,
        kind: CommandKind,
        message: Memory,
        state: State | None = None,
    ) -> ExtractionResult:
        """Produce at most one validated candidate for a user turn.

        Args:
            kind: Command kind to extract
            message: Incoming user message
            state: Turn state with recent conversation messages

        Returns:
            ExtractionResult; ``candidate`` is None when every strategy failed

        Raises:
            Exception: Errors from the model collaborator are not caught here
        """
        plan = self.plans[kind]
        resolved = self.resolve_content(plan, message)
        result = ExtractionResult(kind=kind, content_kind=resolved.kind)

        log = logger.bind(command=kind.value, content_kind=resolved.kind.value)

        for strategy in plan.strategies:
            if not self._applicable(strategy, resolved):
                continue

            result.attempted.append(strategy)
            candidate = await self._run_strategy(strategy, plan, resolved, state)

            if candidate is not None and plan.validator(candidate):
                result.candidate = {**plan.defaults, **_drop_none(candidate)}
                result.strategy = strategy
                log.info("extraction_strategy_succeeded", strategy=strategy.value)
                return result

            log.debug("extraction_strategy_failed", strategy=strategy.value)

            if strategy == ExtractionStrategy.STRUCTURED and plan.structured_is_final:
                break

        log.info(
            "extraction_failed",
            attempted=[strategy.value for strategy in result.attempted],
        )
        return result

    def _applicable(self, strategy: ExtractionStrategy, resolved: ResolvedContent) -> bool:
        """Check whether a strategy has the input it needs."""
        if strategy == ExtractionStrategy.STRUCTURED:
            return resolved.kind == ContentKind.STRUCTURED
        if strategy == ExtractionStrategy.DIRECT:
            return resolved.text is not None
        return self.runtime.model_available

    async def _run_strategy(
        self,
        strategy: ExtractionStrategy,
        plan: ExtractionPlan,
        resolved: ResolvedContent,
        state: State | None,
    ) -> dict[str, Any] | None:
        """Produce an unvalidated candidate with one strategy."""
        if strategy == ExtractionStrategy.STRUCTURED:
            return dict(resolved.candidate or {})

        if strategy == ExtractionStrategy.DIRECT:
            return plan.text_extractor(resolved.text)

        prompt = self.runtime.compose_prompt(plan.template, state)
        output = await self.runtime.use_model(self.model_type, prompt) or ""
        logger.debug("model_extraction_output", command=plan.kind.value, output=output[:200])
        return extract_json_object(output)


def _drop_none(candidate: Mapping[str, Any]) -> dict[str, Any]:
    """Remove null values so plan defaults apply to them."""
    return {key: value for key, value in candidate.items() if value is not None}
