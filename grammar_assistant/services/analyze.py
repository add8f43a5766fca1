from __future__ import annotations
from typing import Iterable, List, Optional
import logging
from grammar_assistant.core import config
from grammar_assistant.models.report import HistoryEntry, ReadabilityScore, StatisticsReport
from grammar_assistant.models.suggestion import CheckMode, CheckResult, Suggestion
from grammar_assistant.services import readability
from grammar_assistant.services.cache import ResultCache
from grammar_assistant.services.corrector import ActiveSuggestions, authoritative_correction, merge
from grammar_assistant.services.history import HistoryManager
from grammar_assistant.services.llm import AIOk, AIProvider, load_api_key, outcome_suggestions
from grammar_assistant.services.rules import RuleEngine
from grammar_assistant.services.spelling import DictionaryProvider, spell_checker_for
from grammar_assistant.services.statistics import StatisticsCollector, error_category

log = logging.getLogger("analyze")

NOTHING_TO_CHECK = Suggestion(message="Nothing to check. Paste or type some text first.")


class GrammarAssistant:
    """Owns every analysis component for one interactive session.

    The quick path (``quick_check``) never suspends; only ``ai_check`` and
    ``rewrite`` await the provider. A caller that abandons an AI call simply
    drops its result: cache, history and statistics are keyed by content.
    """

    def __init__(
        self,
        rules: Optional[RuleEngine] = None,
        spell_checker=None,
        ai: Optional[AIProvider] = None,
        cache: Optional[ResultCache] = None,
        history: Optional[HistoryManager] = None,
        statistics: Optional[StatisticsCollector] = None,
    ):
        self.rules = rules if rules is not None else RuleEngine()
        self.spell_checker = spell_checker if spell_checker is not None else spell_checker_for(None)
        self.ai = ai if ai is not None else AIProvider()
        self.cache = cache if cache is not None else ResultCache()
        self.history = history if history is not None else HistoryManager()
        self.statistics = statistics if statistics is not None else StatisticsCollector()
        self.active = ActiveSuggestions()

    # -- checks ---------------------------------------------------------

    def local_suggestions(self, text: str) -> List[Suggestion]:
        return list(self.spell_checker.check(text)) + list(self.rules.check(text))

    def _result(self, mode: CheckMode, suggestions: List[Suggestion], from_cache: bool) -> CheckResult:
        self.active.replace(suggestions)
        lead = authoritative_correction(suggestions)
        return CheckResult(
            mode=mode,
            suggestions=suggestions,
            corrected_text=lead.corrected_text if lead else None,
            from_cache=from_cache,
        )

    def _record(self, suggestions: Iterable[Suggestion], only_ai: bool = False) -> None:
        for s in suggestions:
            if only_ai and not s.message.startswith("AI:"):
                continue
            category = error_category(s)
            if category:
                self.statistics.record_error(category)
        self.statistics.record_check()

    def quick_check(self, text: str) -> CheckResult:
        if not text or not text.strip():
            self.active.clear()
            return CheckResult(mode="quick", suggestions=[NOTHING_TO_CHECK])

        cached = self.cache.lookup(text, "quick")
        if cached is not None:
            self.statistics.record_check()
            return self._result("quick", cached, from_cache=True)

        suggestions = merge(text, self.local_suggestions(text))
        log.info("Quick check: %d suggestions for %d chars", len(suggestions), len(text))
        self._record(suggestions)
        self.cache.store(text, suggestions, "quick")
        return self._result("quick", suggestions, from_cache=False)

    async def ai_check(self, text: str) -> CheckResult:
        if not text or not text.strip():
            self.active.clear()
            return CheckResult(mode="ai", suggestions=[NOTHING_TO_CHECK])

        cached = self.cache.lookup(text, "ai")
        if cached is not None:
            self.statistics.record_check()
            return self._result("ai", cached, from_cache=True)

        # local pass first, so positions exist even if the provider fails
        local = self.local_suggestions(text)
        outcome = await self.ai.check_text(text)
        ai_suggestions = outcome_suggestions(outcome)
        suggestions = merge(text, ai_suggestions, local)
        log.info("AI check: %s, %d suggestions", type(outcome).__name__, len(suggestions))

        self._record(ai_suggestions, only_ai=True)
        if isinstance(outcome, AIOk):
            self.cache.store(text, suggestions, "ai")
        return self._result("ai", suggestions, from_cache=False)

    async def rewrite(self, text: str, style: str = "professional") -> Optional[str]:
        return await self.ai.rewrite_text(text, style)

    def readability(self, text: str) -> ReadabilityScore:
        return readability.score(text)

    # -- edits ----------------------------------------------------------

    def apply_suggestion(self, text: str, suggestion: Suggestion) -> Optional[str]:
        """New text with one fix applied, or None if its span no longer fits."""
        return self.active.apply(text, suggestion)

    def accept(self, original_text: str, corrected_text: str) -> HistoryEntry:
        self.active.clear()
        return self.history.record(original_text, corrected_text)

    def undo(self) -> Optional[HistoryEntry]:
        return self.history.undo()

    def redo(self) -> Optional[HistoryEntry]:
        return self.history.redo()

    def report(self, n: int = 5) -> StatisticsReport:
        return self.statistics.report(n)


def build_assistant(
    dictionary_dir: str = config.DICTIONARY_DIR,
    dictionary_name: str = config.DICTIONARY_NAME,
    api_key: Optional[str] = None,
) -> GrammarAssistant:
    provider = DictionaryProvider.from_directory(dictionary_dir, dictionary_name)
    return GrammarAssistant(
        spell_checker=spell_checker_for(provider, dictionary_name),
        ai=AIProvider(api_key=api_key if api_key is not None else load_api_key()),
        cache=ResultCache(config.CACHE_TTL_SECONDS, config.CACHE_CAPACITY),
        history=HistoryManager(config.HISTORY_MAX),
    )
