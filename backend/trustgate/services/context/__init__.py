"""Local model context assembly.

Turns a routed cache scope and the authoritative snapshot into the minimal
prompt a constrained local model answers from.
"""

from trustgate.services.context.assembler import (
    LOCAL_MODEL_SYSTEM_PROMPT,
    assemble_prompt,
    build_context_sections,
    estimate_token_count,
    format_sync_age,
)
from trustgate.services.context.sanitize import (
    SanitizedInput,
    sanitize_for_context,
    sanitize_query,
)

__all__ = [
    "LOCAL_MODEL_SYSTEM_PROMPT",
    "SanitizedInput",
    "assemble_prompt",
    "build_context_sections",
    "estimate_token_count",
    "format_sync_age",
    "sanitize_for_context",
    "sanitize_query",
]
