"""Deterministic field extractors for workload commands.

Each extractor is a pure function of the input text. They accept any
string (including empty or None), never raise, and match case-insensitively.
"""

from typing import Any

import structlog

from comput3_agent.constants import DEFAULT_EXPIRES_MINUTES
from comput3_agent.models.workload import WorkloadType
from comput3_agent.services.patterns import (
    DOMAIN_PATTERN,
    EXPIRATION_PATTERNS,
    HEURISTIC_RULES,
    UUID_PATTERN,
    WORKLOAD_ID_FALLBACK_PATTERNS,
    WORKLOAD_TYPE_PATTERNS,
)

logger = structlog.get_logger(__name__)


def extract_workload_type(text: str | None) -> WorkloadType | None:
    """Extract a workload type from text.

    Direct patterns are tried first, type by type in declared order; keyword
    heuristics are the fallback.

    Args:
        text: User message text

    Returns:
        Matched WorkloadType or None
    """
    if not text:
        return None

    for workload_type, patterns in WORKLOAD_TYPE_PATTERNS.items():
        for pattern in patterns:
            if pattern.search(text):
                logger.debug(
                    "workload_type_matched",
                    workload_type=workload_type.value,
                    pattern=pattern.pattern,
                )
                return workload_type

    for pattern, workload_type in HEURISTIC_RULES:
        if pattern.search(text):
            logger.debug("workload_type_inferred", workload_type=workload_type.value)
            return workload_type

    return None


def extract_expiration_minutes(text: str | None, default: int = DEFAULT_EXPIRES_MINUTES) -> int:
    """Extract an expiration duration in minutes from text.

    The value stays relative; it is converted to a timestamp only when the
    launch request is built.

    Args:
        text: User message text
        default: Minutes returned when no duration is mentioned

    Returns:
        Duration in minutes
    """
    if not text:
        return default

    for pattern, multiplier in EXPIRATION_PATTERNS:
        match = pattern.search(text)
        if match:
            minutes = int(match.group(1)) * multiplier
            logger.debug(
                "expiration_extracted",
                value=int(match.group(1)),
                minutes=minutes,
            )
            return minutes

    logger.debug("expiration_defaulted", minutes=default)
    return default


def extract_workload_id(text: str | None) -> str | None:
    """Extract a workload identifier from text.

    Tried in order: UUID, ``*.comput3.ai`` domain, then the looser
    ``wrk_``/``workload:``/hyphenated-token forms.

    Args:
        text: User message text

    Returns:
        Workload identifier or None
    """
    if not text:
        return None

    match = UUID_PATTERN.search(text)
    if match:
        logger.debug("workload_id_extracted", form="uuid", workload=match.group(1))
        return match.group(1)

    match = DOMAIN_PATTERN.search(text)
    if match:
        logger.debug("workload_id_extracted", form="domain", workload=match.group(1))
        return match.group(1)

    for pattern, reprefix in WORKLOAD_ID_FALLBACK_PATTERNS:
        match = pattern.search(text)
        if match:
            workload_id = f"wrk_{match.group(1)}" if reprefix else match.group(1)
            logger.debug("workload_id_extracted", form="fallback", workload=workload_id)
            return workload_id

    return None


def launch_candidate_from_text(text: str | None) -> dict[str, Any] | None:
    """Build a launch candidate from free text.

    Args:
        text: User message text

    Returns:
        ``{"type", "expires"}`` candidate, or None when no type is found
    """
    workload_type = extract_workload_type(text)
    if workload_type is None:
        logger.debug("launch_text_extraction_failed")
        return None

    return {"type": workload_type.value, "expires": extract_expiration_minutes(text)}


def stop_candidate_from_text(text: str | None) -> dict[str, Any] | None:
    """Build a stop candidate from free text.

    Args:
        text: User message text

    Returns:
        ``{"workload"}`` candidate, or None when no identifier is found
    """
    workload_id = extract_workload_id(text)
    if workload_id is None:
        logger.debug("stop_text_extraction_failed")
        return None

    return {"workload": workload_id}
