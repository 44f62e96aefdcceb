"""Clean-up of raw model output before it is scanned."""

import re

UNUSED_TOKEN_PATTERN = re.compile(r"<unused\d+>")
THOUGHT_MARKER = "thought\n"
TERMINAL_CHARACTERS = frozenset('.!?:")]')

TRUNCATION_DISCLAIMER = (
    "This response may be incomplete. For comprehensive information about this "
    "topic, please consult your care team."
)


def sanitize_model_output(raw: str) -> str:
    """Strip thinking blocks and stray ``<unusedN>`` tokens from model output."""
    text = raw or ""

    start = text.find("<unused")
    if start != -1:
        thought = text.find(THOUGHT_MARKER, start)
        if thought != -1:
            text = text[thought + len(THOUGHT_MARKER):]
            # A closing token ends the thinking block; without one it runs to the answer.
            closing = UNUSED_TOKEN_PATTERN.search(text)
            if closing is not None:
                text = text[closing.end():]

    text = UNUSED_TOKEN_PATTERN.sub("", text)
    return text.strip()


def is_likely_truncated(text: str) -> bool:
    """Heuristic check for a response cut off mid-sentence or mid-list."""
    trimmed = (text or "").strip()
    if not trimmed:
        return False

    if trimmed[-1] not in TERMINAL_CHARACTERS:
        return True

    last_line = trimmed.splitlines()[-1].strip()
    if last_line.startswith(("-", "*")) and len(last_line) < 20:
        return True

    return False
