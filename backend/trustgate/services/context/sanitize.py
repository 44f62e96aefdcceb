"""Sanitization of questions and record values before they enter a prompt."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum

from trustgate.config import settings

# Code point ranges of characters that render as nothing.
INVISIBLE_RANGES = (
    (0x200B, 0x200F),  # zero-width characters
    (0x202A, 0x202E),  # directional formatting
    (0x2060, 0x2064),  # invisible operators
    (0x2066, 0x2069),  # directional isolates
    (0xFEFF, 0xFEFF),  # byte order mark
    (0x00AD, 0x00AD),  # soft hyphen
    (0x034F, 0x034F),  # combining grapheme joiner
    (0x061C, 0x061C),  # arabic letter mark
    (0x180E, 0x180E),  # mongolian vowel separator
)

INVISIBLE_CHARACTERS = re.compile(
    "[" + "".join(f"{chr(low)}-{chr(high)}" for low, high in INVISIBLE_RANGES) + "]"
)

INJECTION_PATTERNS = (
    re.compile(
        r"ignore\s+(?:previous|above|all\s+prior|the\s+above)\s+(?:instructions?|rules?|prompts?)",
        re.IGNORECASE,
    ),
    re.compile(r"forget\s+(?:everything|all|your)\s+(?:previous|prior)?", re.IGNORECASE),
    re.compile(r"new\s+instructions?:", re.IGNORECASE),
    re.compile(r"you\s+are\s+now\s+(?:a|an)\s+", re.IGNORECASE),
    re.compile(r"system\s*:", re.IGNORECASE),
    re.compile(r"assistant\s*:", re.IGNORECASE),
    re.compile(r"<<SYS>>"),
    re.compile(r"\[INST\]"),
    re.compile(r"<\|im_start\|>"),
    re.compile(r"<\|im_end\|>"),
    re.compile(r"(?:DAN|do\s+anything\s+now)\s+mode", re.IGNORECASE),
    re.compile(
        r"pretend\s+(?:you\s+are|to\s+be)\s+(?:a|an)\s+(?:doctor|physician|medical)",
        re.IGNORECASE,
    ),
    re.compile(r"act\s+as\s+(?:a|an|my)\s+(?:doctor|physician|medical)", re.IGNORECASE),
)

FILTERED_MARKER = "[FILTERED]"

ROLE_TAG_PATTERN = re.compile(r"\b(?:system|assistant|user|human):", re.IGNORECASE)


class ModificationKind(str, Enum):
    INVISIBLE_UNICODE_REMOVED = "invisible_unicode_removed"
    CONTROL_CHARACTER_REMOVED = "control_character_removed"
    INJECTION_PATTERN_REMOVED = "injection_pattern_removed"
    EXCESSIVE_LENGTH_TRUNCATED = "excessive_length_truncated"


@dataclass(frozen=True)
class InputModification:
    kind: ModificationKind
    description: str


@dataclass(frozen=True)
class SanitizedInput:
    text: str
    modifications: tuple[InputModification, ...] = field(default_factory=tuple)

    @property
    def was_modified(self) -> bool:
        return bool(self.modifications)


def sanitize_query(raw_query: str, max_length: int | None = None) -> SanitizedInput:
    """Clean a user question before it is placed in a local model prompt."""
    max_length = max_length or settings.max_query_length
    text = raw_query or ""
    modifications: list[InputModification] = []

    cleaned = INVISIBLE_CHARACTERS.sub("", text)
    if cleaned != text:
        modifications.append(
            InputModification(
                ModificationKind.INVISIBLE_UNICODE_REMOVED,
                "Stripped non-visible Unicode characters",
            )
        )
        text = cleaned

    cleaned = remove_control_characters(text)
    if cleaned != text:
        modifications.append(
            InputModification(
                ModificationKind.CONTROL_CHARACTER_REMOVED,
                "Stripped control characters",
            )
        )
        text = cleaned

    cleaned = remove_injection_patterns(text)
    if cleaned != text:
        modifications.append(
            InputModification(
                ModificationKind.INJECTION_PATTERN_REMOVED,
                "Removed potential prompt injection patterns",
            )
        )
        text = cleaned

    if len(text) > max_length:
        original_length = len(text)
        text = truncate_at_word_boundary(text, max_length)
        modifications.append(
            InputModification(
                ModificationKind.EXCESSIVE_LENGTH_TRUNCATED,
                f"Truncated from {original_length} to {len(text)} characters",
            )
        )

    return SanitizedInput(text=text.strip(), modifications=tuple(modifications))


def sanitize_for_context(value: object, max_length: int | None = None) -> str:
    """Make a saved record value safe to embed in a prompt."""
    max_length = max_length or settings.context_value_max_length
    text = re.sub(r"[\r\n\t]+", " ", str(value if value is not None else ""))
    text = remove_control_characters(text, keep_newlines=False)
    text = ROLE_TAG_PATTERN.sub("", text)
    text = re.sub(r"\s{3,}", "  ", text)
    return text[:max_length]


def remove_control_characters(text: str, keep_newlines: bool = True) -> str:
    """Remove control characters, optionally keeping newline and tab."""
    kept = {"\n", "\t"} if keep_newlines else set()
    return "".join(
        ch for ch in text if ch in kept or unicodedata.category(ch) != "Cc"
    )


def remove_injection_patterns(text: str) -> str:
    for pattern in INJECTION_PATTERNS:
        text = pattern.sub(FILTERED_MARKER, text)
    return text


def truncate_at_word_boundary(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    cut = max((truncated.rfind(ch) for ch in (" ", "\n", "\t")), default=-1)
    return truncated[:cut] if cut > 0 else truncated


def wrap_query_for_prompt(sanitized_query: str) -> str:
    """Wrap a sanitized question in delimiters the system prompt refers to."""
    return f"<PATIENT_QUERY>\n{sanitized_query}\n</PATIENT_QUERY>"
