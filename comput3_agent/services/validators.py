"""Structural validators gating extracted candidates.

Validation checks shape only. A launch candidate naming a workload type the
extractors do not know still passes; the remote service decides whether it
exists.
"""

import math
from collections.abc import Mapping
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def is_launch_intent(candidate: Any) -> bool:
    """Check that a candidate can become a launch request.

    Args:
        candidate: Candidate produced by any extraction path

    Returns:
        True if ``type`` is a non-empty string and ``expires`` is absent or a
        non-negative finite number
    """
    if not isinstance(candidate, Mapping):
        logger.debug("launch_candidate_rejected", reason="not a mapping")
        return False

    workload_type = candidate.get("type")
    if not isinstance(workload_type, str) or not workload_type:
        logger.debug("launch_candidate_rejected", reason="missing or invalid workload type")
        return False

    expires = candidate.get("expires")
    if expires is None:
        return True

    if isinstance(expires, bool) or not isinstance(expires, int | float):
        logger.debug("launch_candidate_rejected", reason="expires must be a number")
        return False

    if not math.isfinite(expires) or expires < 0:
        logger.debug("launch_candidate_rejected", reason="expires out of range", expires=expires)
        return False

    return True


def is_stop_intent(candidate: Any) -> bool:
    """Check that a candidate can become a stop request.

    Args:
        candidate: Candidate produced by any extraction path

    Returns:
        True if ``workload`` is a non-empty string
    """
    if not isinstance(candidate, Mapping):
        logger.debug("stop_candidate_rejected", reason="not a mapping")
        return False

    workload = candidate.get("workload")
    if not isinstance(workload, str) or not workload:
        logger.debug("stop_candidate_rejected", reason="missing or invalid workload id")
        return False

    return True
