from __future__ import annotations
from collections import Counter
from typing import Dict
from grammar_assistant.models.report import StatisticsReport
from grammar_assistant.models.suggestion import Suggestion


def error_category(s: Suggestion) -> str | None:
    """Statistics bucket for a suggestion, or None if it is not an error."""
    if s.message.startswith("AI:"):
        return s.message
    if s.message.startswith("Spelling:") or s.is_localized:
        return s.message.split(":")[0]
    return None


class StatisticsCollector:
    def __init__(self):
        self._errors: Counter = Counter()
        self.total_checks = 0
        self.total_errors = 0

    def record_check(self) -> None:
        self.total_checks += 1

    def record_error(self, category: str) -> None:
        self._errors[category] += 1
        self.total_errors += 1

    def top_errors(self, n: int = 10) -> Dict[str, int]:
        # most_common keeps first-encountered order among equal counts
        return dict(self._errors.most_common(n))

    @property
    def average_errors_per_check(self) -> float:
        return self.total_errors / self.total_checks if self.total_checks else 0.0

    def report(self, n: int = 5) -> StatisticsReport:
        return StatisticsReport(
            total_checks=self.total_checks,
            total_errors=self.total_errors,
            average_errors_per_check=self.average_errors_per_check,
            top_errors=self.top_errors(n),
        )
