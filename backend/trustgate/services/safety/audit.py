"""Audit trail and process-wide counters for safety outcomes.

Entries never carry the raw text, only a fingerprint of it.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import ClassVar

from trustgate.logging import text_fingerprint
from trustgate.services.safety.types import Blocked, FilterOutcome, Passed, Rephrased


@dataclass(frozen=True)
class SafetyAuditEntry:
    timestamp: str
    text_hash: str
    outcome: str
    violations_count: int
    grounding_issues_count: int
    categories: tuple[str, ...]


class SafetyAuditor:
    """Records filter and routing events for telemetry."""

    _global_counters: ClassVar[Counter[str]] = Counter()

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("trustgate")

    def record(self, outcome: FilterOutcome, text: str) -> SafetyAuditEntry:
        """Log one filter outcome and count it."""
        if isinstance(outcome, Passed):
            violations, grounding_issues = (), ()
        elif isinstance(outcome, (Rephrased, Blocked)):
            violations, grounding_issues = outcome.violations, outcome.grounding_issues
        else:
            raise TypeError(f"Unknown filter outcome: {type(outcome).__name__}")

        categories = sorted(
            {v.category.value for v in violations} | {issue.kind for issue in grounding_issues}
        )
        entry = SafetyAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            text_hash=text_fingerprint(text),
            outcome=outcome.outcome,
            violations_count=len(violations),
            grounding_issues_count=len(grounding_issues),
            categories=tuple(categories),
        )

        self.count(f"filter_{entry.outcome}")
        for category in entry.categories:
            self.count(f"flag_{category}")

        self.logger.info(
            "Safety audit outcome=%s text_hash=%s violations=%d grounding_issues=%d categories=%s",
            entry.outcome,
            entry.text_hash,
            entry.violations_count,
            entry.grounding_issues_count,
            ",".join(entry.categories) or "-",
        )
        return entry

    def count(self, event: str) -> None:
        self._global_counters[event] += 1

    @classmethod
    def get_global_counters(cls) -> dict[str, int]:
        """Expose process-wide counters for the metrics endpoint."""
        return dict(cls._global_counters)

    @classmethod
    def reset_counters(cls) -> None:
        cls._global_counters.clear()
