"""Pattern library for recognizing workload commands in natural language.

All tables are built once at import time and never mutated. Every pattern
is compiled case-insensitive.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType

from comput3_agent.constants import WORKLOAD_DOMAIN_SUFFIX
from comput3_agent.models.workload import WorkloadType


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


# Direct mentions of each workload type. Iterated in WorkloadType declaration
# order; the first type with a matching pattern wins.
WORKLOAD_TYPE_PATTERNS: Mapping[WorkloadType, tuple[re.Pattern[str], ...]] = MappingProxyType(
    {
        WorkloadType.MEDIA_FAST: _compile(
            r"media:fast",
            r"media fast",
            r"fast media",
            r"media.*fast",
        ),
        WorkloadType.OLLAMA_WEBUI_CODER: _compile(
            r"ollama_webui:coder",
            r"ollama webui:coder",
            r"ollama webui coder",
            r"ollama.*coder",
            r"coder workload",
            r"coding workload",
            r"workload.*coding",
            r"workload.*code",
        ),
        WorkloadType.OLLAMA_WEBUI_FAST: _compile(
            r"ollama_webui:fast",
            r"ollama webui:fast",
            r"ollama webui fast",
            r"ollama.*fast",
            r"ollama fast",
            r"fast ollama",
        ),
        WorkloadType.OLLAMA_WEBUI_LARGE: _compile(
            r"ollama_webui:large",
            r"ollama webui:large",
            r"ollama webui large",
            r"ollama.*large",
            r"large ollama",
            r"ollama large",
        ),
        WorkloadType.LLAMA_WEBUI_CODER: _compile(
            r"llama_webui:coder",
            r"llama webui:coder",
            r"llama webui coder",
            r"llama.*coder",
            r"llama coder",
        ),
    }
)

# Keyword inference applied only when no direct pattern matched, in priority order
HEURISTIC_RULES: tuple[tuple[re.Pattern[str], WorkloadType], ...] = (
    (re.compile(r"coder|coding|code|developer|development", re.IGNORECASE), WorkloadType.OLLAMA_WEBUI_CODER),
    (re.compile(r"media|video|audio|streaming", re.IGNORECASE), WorkloadType.MEDIA_FAST),
    (re.compile(r"large|big|powerful", re.IGNORECASE), WorkloadType.OLLAMA_WEBUI_LARGE),
    (re.compile(r"fast|quick|speed", re.IGNORECASE), WorkloadType.OLLAMA_WEBUI_FAST),
)

# (pattern, minutes per captured unit); first match wins
EXPIRATION_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"expires? in (\d+)\s*min(?:ute)?s?", re.IGNORECASE), 1),
    (re.compile(r"for (\d+)\s*min(?:ute)?s?", re.IGNORECASE), 1),
    (re.compile(r"(\d+)\s*min(?:ute)?s? expir", re.IGNORECASE), 1),
    (re.compile(r"(\d+)\s*min(?:ute)?s?", re.IGNORECASE), 1),
    (re.compile(r"(\d+)\s*hours?", re.IGNORECASE), 60),
)

UUID_PATTERN = re.compile(
    r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})",
    re.IGNORECASE,
)

DOMAIN_PATTERN = re.compile(rf"([a-z0-9-]+{re.escape(WORKLOAD_DOMAIN_SUFFIX)})", re.IGNORECASE)

# Looser identifier forms tried after UUID and domain. The boolean marks
# patterns whose capture drops the "wrk_" prefix and must be re-prefixed.
# The four-token hyphenated form also matches ordinary phrases such as
# "state-of-the-art"; it is kept for parity with existing conversations.
WORKLOAD_ID_FALLBACK_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (re.compile(r"wrk_([a-z0-9]+)", re.IGNORECASE), True),
    (re.compile(r"workload[:\s]+([a-z0-9_-]+)", re.IGNORECASE), False),
    (re.compile(r"([a-z]+-[a-z]+-[a-z]+-[a-z]+)", re.IGNORECASE), False),
)
