"""Prompt templates for model-assisted intent extraction."""

import re
from collections.abc import Mapping

from comput3_agent.models.conversation import State
from comput3_agent.models.workload import WorkloadType

RECENT_MESSAGES_LIMIT = 3

_PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")

_KNOWN_TYPES = ", ".join(f'"{value}"' for value in WorkloadType.values())

LAUNCH_WORKLOAD_TEMPLATE = f"""Analyze the most recent user message to extract information about launching a GPU workload on Comput3AI.
Respond with a JSON markdown block containing only the extracted values. Use null for any values that cannot be determined.

Example responses:
```json
{{
   "type": "ollama_webui:coder",
   "expires": 10
}}
```

```json
{{
   "type": "media:fast",
   "expires": 30
}}
```

```json
{{
   "type": "llama_webui:coder",
   "expires": 15
}}
```

{{{{recentMessages}}}}

Extract the following information about the requested workload launch:
- Workload type: Must be exactly one of these strings: {_KNOWN_TYPES}
- Expiration time in minutes (default to 10 if not specified) - this will be converted to a Unix timestamp later

If the workload type is unclear, try to infer from context (e.g., "coding" -> "ollama_webui:coder", "fast media" -> "media:fast").
"""

STOP_WORKLOAD_TEMPLATE = """Analyze the most recent user message to extract information about stopping a GPU workload on Comput3AI.
Respond with a JSON markdown block containing only the extracted values.

Example responses:
```json
{
   "workload": "7b69314d-c88d-47d9-920c-ae827f6b7844"
}
```

```json
{
   "workload": "firmly-widely-proud-gpu.comput3.ai"
}
```

{{recentMessages}}

Extract the following information about the requested workload to stop:
- Workload ID to stop (can be either in UUID format like "7b69314d-c88d-47d9-920c-ae827f6b7844" or domain format like "something-something-something-gpu.comput3.ai")

Look for either UUID format strings (8-4-4-4-12 format) or strings ending in ".comput3.ai" or any identifier that appears to be a workload ID.
"""


def format_recent_messages(state: State | None, limit: int = RECENT_MESSAGES_LIMIT) -> str:
    """Render the last turns of a conversation for a prompt.

    Args:
        state: Turn state holding the conversation messages
        limit: Number of most recent messages to include

    Returns:
        ``role: text`` blocks separated by blank lines
    """
    if state is None or not state.messages:
        return ""

    lines = []
    for message in state.messages[-limit:]:
        text = message.text
        lines.append(f"{message.role.value}: {text}" if text is not None else "")
    return "\n\n".join(lines)


def compose_prompt(template: str, values: Mapping[str, str]) -> str:
    """Substitute ``{{key}}`` placeholders in a template.

    Placeholders without a value are left untouched.

    Args:
        template: Prompt template text
        values: Placeholder values

    Returns:
        Final prompt text
    """

    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return _PLACEHOLDER_PATTERN.sub(replace, template)
