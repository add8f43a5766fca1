from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import Dict

NOT_APPLICABLE = "Not applicable"

# (lower bound on Flesch Reading Ease, label), checked top-down
READABILITY_BANDS = [
    (90, "Very Easy (5th grade)"),
    (80, "Easy (6th grade)"),
    (70, "Fairly Easy (7th grade)"),
    (60, "Standard (8th-9th grade)"),
    (50, "Fairly Difficult (10th-12th grade)"),
    (30, "Difficult (College)"),
]
HARDEST_BAND = "Very Difficult (College graduate)"


def readability_level(reading_ease: float) -> str:
    for bound, label in READABILITY_BANDS:
        if reading_ease >= bound:
            return label
    return HARDEST_BAND


class ReadabilityScore(BaseModel):
    word_count: int = 0
    sentence_count: int = 0
    syllable_count: int = 0
    flesch_reading_ease: float = 0.0
    flesch_kincaid_grade: float = 0.0
    average_words_per_sentence: float = 0.0
    smog_index: float = 0.0
    automated_readability_index: float = 0.0

    @property
    def is_applicable(self) -> bool:
        return self.word_count > 0 and self.sentence_count > 0

    @property
    def level(self) -> str:
        if not self.is_applicable:
            return NOT_APPLICABLE
        return readability_level(self.flesch_reading_ease)


class HistoryEntry(BaseModel):
    original_text: str
    corrected_text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StatisticsReport(BaseModel):
    total_checks: int
    total_errors: int
    average_errors_per_check: float
    top_errors: Dict[str, int]
