from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
from grammar_assistant.models.suggestion import Suggestion

log = logging.getLogger("corrector")

CORRECTION_MESSAGE = "✓ Corrected Version Available"


def build_corrected_text(text: str, suggestions: Iterable[Suggestion]) -> Tuple[str, int]:
    """Apply every fixable suggestion to ``text``, highest offset first.

    Going right-to-left keeps the offsets of the remaining (lower) fixes valid
    when a replacement changes length. Overlapping spans are not detected: the
    later-applied fix may clobber part of an earlier one.
    """
    fixes = sorted((s for s in suggestions if s.is_fixable), key=lambda s: s.start_index, reverse=True)
    corrected = text
    applied = 0
    for fix in fixes:
        if fix.end_index > len(corrected):
            continue
        corrected = corrected[:fix.start_index] + fix.replacement_text + corrected[fix.end_index:]
        applied += 1
    return corrected, applied


def authoritative_correction(suggestions: Iterable[Suggestion]) -> Optional[Suggestion]:
    return next((s for s in suggestions if s.corrected_text), None)


def merge(text: str, *passes: Iterable[Suggestion]) -> List[Suggestion]:
    """Concatenate suggestion passes and lead with the whole-text correction.

    When a pass already carries a corrected text (e.g. from the AI provider)
    that one is kept as the authoritative correction; otherwise one is built
    from the fixable suggestions, if it changes anything.
    """
    merged: List[Suggestion] = [s for p in passes for s in p]
    if authoritative_correction(merged) is not None:
        return merged

    corrected, applied = build_corrected_text(text, merged)
    if corrected == text:
        return merged
    lead = Suggestion(
        message=CORRECTION_MESSAGE,
        detail=f"Found {applied} fixable issues. Apply all to fix them.",
        corrected_text=corrected,
    )
    return [lead] + merged


def apply_suggestion(text: str, suggestion: Suggestion) -> Optional[str]:
    """Substitute one suggestion's fix into ``text``; None if it does not fit."""
    if not suggestion.is_fixable or suggestion.end_index > len(text):
        log.debug("Rejected apply at %d+%d on text of length %d",
                  suggestion.start_index, suggestion.length, len(text))
        return None
    return text[:suggestion.start_index] + suggestion.replacement_text + text[suggestion.end_index:]


class ActiveSuggestions:
    """The suggestions currently shown for a text; applied ones are consumed."""

    def __init__(self, suggestions: Sequence[Suggestion] = ()):
        self._items: List[Suggestion] = list(suggestions)

    def replace(self, suggestions: Iterable[Suggestion]) -> None:
        self._items = list(suggestions)

    def clear(self) -> None:
        self._items = []

    def apply(self, text: str, suggestion: Suggestion) -> Optional[str]:
        updated = apply_suggestion(text, suggestion)
        if updated is not None and suggestion in self._items:
            self._items.remove(suggestion)
        return updated

    def __contains__(self, suggestion: Suggestion) -> bool:
        return suggestion in self._items

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
