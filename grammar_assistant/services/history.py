from __future__ import annotations
from collections import deque
from typing import Deque, List, Optional
from grammar_assistant.core.config import HISTORY_MAX
from grammar_assistant.models.report import HistoryEntry


class HistoryManager:
    """Linear undo/redo over accepted corrections and rewrites."""

    def __init__(self, max_size: int = HISTORY_MAX):
        self.max_size = max_size
        # right end is the top of each stack; full deques drop from the left
        self._undo: Deque[HistoryEntry] = deque(maxlen=max_size)
        self._redo: Deque[HistoryEntry] = deque(maxlen=max_size)

    def record(self, original_text: str, corrected_text: str) -> HistoryEntry:
        entry = HistoryEntry(original_text=original_text, corrected_text=corrected_text)
        self._undo.append(entry)
        self._redo.clear()
        return entry

    def undo(self) -> Optional[HistoryEntry]:
        if not self._undo:
            return None
        entry = self._undo.pop()
        self._redo.append(entry)
        return entry

    def redo(self) -> Optional[HistoryEntry]:
        if not self._redo:
            return None
        entry = self._redo.pop()
        self._undo.append(entry)
        return entry

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def entries(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """Undo stack, most recent first."""
        items = list(reversed(self._undo))
        return items if limit is None else items[:limit]
