from __future__ import annotations

from partychat.prompts.assistant import (
    REFUSAL_ENGLISH,
    REFUSAL_TAMIL,
    build_grounding_instruction,
    build_system_prompt,
    format_context_block,
)

__all__ = [
    "REFUSAL_ENGLISH",
    "REFUSAL_TAMIL",
    "build_grounding_instruction",
    "build_system_prompt",
    "format_context_block",
]
