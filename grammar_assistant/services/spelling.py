from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Protocol, Set, Tuple
import logging
import re
from spellchecker import SpellChecker
from grammar_assistant.core.config import MAX_SUGGESTIONS, MIN_WORD_LENGTH
from grammar_assistant.models.suggestion import Suggestion

log = logging.getLogger("spelling")

WORD = re.compile(r"\b[a-zA-Z']+\b")


class SpellProvider(Protocol):
    @property
    def is_available(self) -> bool: ...

    def check(self, word: str) -> bool: ...

    def suggest(self, word: str) -> List[str]: ...


# --------------------------------------------------------------------
# Hunspell word list + affix rules
# --------------------------------------------------------------------
class AffixRule(NamedTuple):
    strip: str
    add: str
    condition: Optional[re.Pattern[str]]


class AffixClass(NamedTuple):
    kind: str  # "PFX" or "SFX"
    cross_product: bool
    rules: List[AffixRule]

    def apply(self, word: str) -> Iterator[str]:
        for rule in self.rules:
            if self.kind == "SFX":
                if word.endswith(rule.strip) and (rule.condition is None or rule.condition.search(word)):
                    yield word[:len(word) - len(rule.strip)] + rule.add
            elif word.startswith(rule.strip) and (rule.condition is None or rule.condition.match(word)):
                yield rule.add + word[len(rule.strip):]


def _condition(kind: str, cond: str) -> Optional[re.Pattern[str]]:
    if cond == ".":
        return None
    try:
        return re.compile(f"(?:{cond})$" if kind == "SFX" else cond)
    except re.error:
        log.debug("Unsupported affix condition %r", cond)
        return None


class AffixTable:
    """PFX/SFX classes from a Hunspell ``.aff`` file, keyed by flag."""

    def __init__(self, flag_format: str = "short"):
        self.flag_format = flag_format
        self.classes: Dict[Tuple[str, str], AffixClass] = {}

    def split_flags(self, flags: str) -> List[str]:
        if self.flag_format == "long":
            return [flags[i:i + 2] for i in range(0, len(flags), 2)]
        if self.flag_format == "num":
            return [f for f in flags.split(",") if f]
        return list(flags)

    def expand(self, word: str, flags: str = "") -> Set[str]:
        """The word plus every form its affix flags generate.

        Cross-product prefixes are also applied to the suffixed forms.
        """
        forms = {word}
        flag_list = self.split_flags(flags)
        crossable: List[str] = []
        for flag in flag_list:
            cls = self.classes.get(("SFX", flag))
            if cls is None:
                continue
            for form in cls.apply(word):
                forms.add(form)
                if cls.cross_product:
                    crossable.append(form)
        for flag in flag_list:
            cls = self.classes.get(("PFX", flag))
            if cls is None:
                continue
            forms.update(cls.apply(word))
            if cls.cross_product:
                for form in crossable:
                    forms.update(cls.apply(form))
        forms.discard("")
        return forms


def read_affix_table(aff_path: Path) -> AffixTable:
    table = AffixTable()
    with open(aff_path, "r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            parts = line.split()
            if not parts or parts[0].startswith("#"):
                continue
            if parts[0] == "FLAG" and len(parts) > 1:
                table.flag_format = parts[1].lower()
                continue
            if parts[0] not in ("PFX", "SFX") or len(parts) < 4:
                continue
            kind, flag = parts[0], parts[1]
            cls = table.classes.get((kind, flag))
            if cls is None:
                # header: PFX <flag> <Y|N> <count>
                table.classes[(kind, flag)] = AffixClass(kind, parts[2] == "Y", [])
                continue
            strip = "" if parts[2] == "0" else parts[2]
            add = parts[3].split("/")[0]
            add = "" if add == "0" else add
            cond = parts[4] if len(parts) > 4 else "."
            cls.rules.append(AffixRule(strip, add, _condition(kind, cond)))
    return table


def read_dic_entries(dic_path: Path) -> Iterator[Tuple[str, str]]:
    """``(word, flags)`` pairs from a Hunspell ``.dic`` file; the count header is skipped."""
    with open(dic_path, "r", encoding="utf-8", errors="ignore") as f:
        next(f, None)
        for line in f:
            fields = line.split()
            if not fields:
                continue
            word, _, flags = fields[0].partition("/")
            if word:
                yield word, flags


def read_dic_words(dic_path: Path) -> Set[str]:
    """Base forms from a Hunspell ``.dic`` file (count header skipped, ``/FLAGS`` stripped)."""
    return {word for word, _ in read_dic_entries(dic_path)}


def load_word_forms(dic_path: Path, aff_path: Path) -> Set[str]:
    table = read_affix_table(aff_path)
    forms: Set[str] = set()
    for word, flags in read_dic_entries(dic_path):
        forms.update(table.expand(word, flags))
    return forms


class DictionaryProvider:
    """Dictionary lookup and ranked suggestions over a Hunspell word list.

    The ``.dic`` base forms are expanded with the ``.aff`` prefix and suffix
    rules; lookups and edit-distance suggestions are done by pyspellchecker
    over the expanded forms.
    """

    def __init__(self, words: Optional[Set[str]] = None):
        self._spell: Optional[SpellChecker] = None
        if words:
            self._spell = SpellChecker(language=None, case_sensitive=False)
            self._spell.word_frequency.load_words(words)

    @classmethod
    def from_directory(cls, directory: str | Path, name: str = "en_US") -> "DictionaryProvider":
        base = Path(directory)
        dic, aff = base / f"{name}.dic", base / f"{name}.aff"
        if not (dic.is_file() and aff.is_file()):
            log.warning("Dictionary %s not found in %s; spell checking disabled", name, base)
            return cls()
        try:
            words = load_word_forms(dic, aff)
        except OSError as e:
            log.warning("Could not read dictionary %s: %s", dic, e)
            return cls()
        log.info("Loaded %d word forms from %s", len(words), dic)
        return cls(words)

    @property
    def is_available(self) -> bool:
        return self._spell is not None

    def check(self, word: str) -> bool:
        return self._spell is not None and word in self._spell

    def suggest(self, word: str) -> List[str]:
        if self._spell is None:
            return []
        candidates = self._spell.candidates(word) or set()
        lowered = word.lower()
        ranked = sorted(
            (c for c in candidates if c.lower() != lowered),
            key=lambda c: (-self._spell.word_usage_frequency(c), c),
        )
        return [_like(word, c) for c in ranked]


def _like(token: str, word: str) -> str:
    if token.isupper() and len(token) > 1:
        return word.upper()
    if token[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


class UnavailableSpellChecker:
    def __init__(self, dictionary_name: str = "en_US"):
        self.dictionary_name = dictionary_name

    def check(self, text: str) -> Iterator[Suggestion]:
        yield Suggestion(
            message="Dictionary not loaded",
            detail=f"Place {self.dictionary_name}.dic and {self.dictionary_name}.aff in the dictionaries folder",
        )


class ReadySpellChecker:
    def __init__(self, provider: SpellProvider, max_suggestions: int = MAX_SUGGESTIONS,
                 min_length: int = MIN_WORD_LENGTH):
        self.provider = provider
        self.max_suggestions = max_suggestions
        self.min_length = min_length

    def check(self, text: str) -> Iterator[Suggestion]:
        seen: Set[str] = set()
        for m in WORD.finditer(text):
            word = m.group(0)
            key = word.lower()
            if len(word) < self.min_length or key in seen:
                continue
            seen.add(key)
            if self.provider.check(word):
                continue

            alternatives = list(self.provider.suggest(word))[: self.max_suggestions]
            yield Suggestion(
                message=f"Spelling: '{word}' may be misspelled",
                detail=f"Did you mean: {', '.join(alternatives)}" if alternatives else "No suggestions available",
                start_index=m.start(),
                length=len(word),
                replacement_text=alternatives[0] if alternatives else None,
            )


def spell_checker_for(provider: Optional[SpellProvider], dictionary_name: str = "en_US"):
    if provider is None or not provider.is_available:
        return UnavailableSpellChecker(dictionary_name)
    return ReadySpellChecker(provider)
