from __future__ import annotations
from typing import Callable, Iterable, Iterator, List, Optional, Protocol
import re
from grammar_assistant.core.config import CONTEXT_RADIUS
from grammar_assistant.models.suggestion import Suggestion

Fix = Callable[[str], Optional[str]]


class Rule(Protocol):
    def evaluate(self, text: str) -> Iterator[Suggestion]: ...


def context_snippet(text: str, start: int, length: int, radius: int = CONTEXT_RADIUS) -> str:
    """``...before[match]after...`` with ellipses only where the text was cut."""
    lo = max(0, start - radius)
    hi = min(len(text), start + length + radius)
    prefix = "..." if lo > 0 else ""
    suffix = "..." if hi < len(text) else ""
    return f"{prefix}{text[lo:start]}[{text[start:start + length]}]{text[start + length:hi]}{suffix}"


def _match_case(template: str, word: str) -> str:
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


def swap(old: str, new: str) -> Fix:
    """Fix replacing every ``old`` (case-insensitive) with ``new``, keeping a leading capital."""
    pattern = re.compile(re.escape(old), re.IGNORECASE)
    return lambda s: pattern.sub(lambda m: _match_case(m.group(0), new), s)


def swap_article(article: str) -> Fix:
    def fix(s: str) -> str:
        old, rest = re.match(r"(\w+)(\s+.*)", s, re.DOTALL).groups()
        return _match_case(old, article) + rest
    return fix


def first_word(s: str) -> str:
    return re.split(r"\s+", s, maxsplit=1)[0]


class PatternRule:
    """Regex heuristic: every non-overlapping match is one Suggestion.

    ``fix`` receives the matched substring and returns its replacement, or
    the rule is diagnostic only when ``fix`` is None.
    """

    def __init__(self, pattern: str, message: str, advice: str,
                 fix: Optional[Fix] = None, flags: int = re.IGNORECASE):
        self.pattern = re.compile(pattern, flags)
        self.message = message
        self.advice = advice
        self.fix = fix

    def evaluate(self, text: str) -> Iterator[Suggestion]:
        for m in self.pattern.finditer(text):
            found = m.group(0)
            yield Suggestion(
                message=f"{self.message}: '{found}'",
                detail=f"{self.advice}\nContext: {context_snippet(text, m.start(), len(found))}",
                start_index=m.start(),
                length=len(found),
                replacement_text=self.fix(found) if self.fix else None,
            )

    def __repr__(self) -> str:
        return f"PatternRule({self.message!r}, {self.pattern.pattern!r})"


class SentenceCapitalizationRule:
    # start of string, or sentence punctuation followed by whitespace
    pattern = re.compile(r"(?:^|[.!?]\s+)([a-z])")

    def evaluate(self, text: str) -> Iterator[Suggestion]:
        for m in self.pattern.finditer(text):
            start = m.start(1)
            yield Suggestion(
                message="Sentence should start with a capital letter",
                detail=f"Capitalize the first letter\nContext: {context_snippet(text, start, 1)}",
                start_index=start,
                length=1,
                replacement_text=m.group(1).upper(),
            )


class LowercaseIRule:
    pattern = re.compile(r"(?<![A-Za-z])i(?![A-Za-z])")

    def evaluate(self, text: str) -> Iterator[Suggestion]:
        for m in self.pattern.finditer(text):
            yield Suggestion(
                message="The pronoun 'I' should be capitalized",
                detail="Use 'I' instead of 'i'",
                start_index=m.start(),
                length=1,
                replacement_text="I",
            )


# Evaluation order is part of the output contract; do not sort.
DEFAULT_RULES: List[Rule] = [
    # subject-verb agreement
    PatternRule(r"\b(I)\s+is\b", "Subject-verb agreement error",
                "Use 'I am' instead of 'I is'", swap(" is", " am")),
    PatternRule(r"\b(he|she|it)\s+are\b", "Subject-verb agreement error",
                "Use 'is' instead of 'are'", swap(" are", " is")),
    PatternRule(r"\b(I|you|we|they)\s+(is|was|has)\b", "Subject-verb agreement error",
                "Use 'am/are/were/have' with this subject"),
    PatternRule(r"\b(he|she|it)\s+(are|were|have)\b", "Subject-verb agreement error",
                "Use 'is/was/has' with this subject"),
    # articles, by first letter only
    PatternRule(r"\ba\s+([aeiou]\w+)\b", "Article error",
                "Use 'an' before words starting with a vowel sound", swap_article("an")),
    PatternRule(r"\ban\s+([^aeiou\s]\w+)\b", "Article error",
                "Use 'a' before words starting with a consonant sound", swap_article("a")),
    PatternRule(r"\b(don't|doesn't|didn't|won't|wouldn't|can't|couldn't)\s+\w*\s*(no|nothing|nobody|nowhere|never)\b",
                "Double negative", "Avoid using two negatives together"),
    # common mistakes
    PatternRule(r"\bshould of\b", "Common error",
                "Use 'should have' instead of 'should of'", swap(" of", " have")),
    PatternRule(r"\bcould of\b", "Common error",
                "Use 'could have' instead of 'could of'", swap(" of", " have")),
    PatternRule(r"\bwould of\b", "Common error",
                "Use 'would have' instead of 'would of'", swap(" of", " have")),
    PatternRule(r"\bmust of\b", "Common error",
                "Use 'must have' instead of 'must of'", swap(" of", " have")),
    # confusions
    PatternRule(r"\btheir\s+(is|are|was|were)\b", "Possible confusion",
                "Did you mean 'there is/are'?", swap("their", "there")),
    PatternRule(r"\bthere\s+(car|house|book|dog|cat|friend|mother|father|child)\b", "Possible confusion",
                "Did you mean 'their' (possessive)?", swap("there", "their")),
    PatternRule(r"\bits\s+(a|the|very|really|so|quite)\b", "Possible confusion",
                "Did you mean 'it's' (it is)?", swap("its", "it's")),
    PatternRule(r"\byour\s+(welcome|right|wrong|correct|going|coming|doing)\b", "Possible confusion",
                "Did you mean 'you're' (you are)?", swap("your", "you're")),
    PatternRule(r"\b(more|less|better|worse|bigger|smaller|faster|slower)\s+then\b", "Then/than confusion",
                "Use 'than' for comparisons", swap("then", "than")),
    PatternRule(r"\b(\w+)\s+\1\b", "Repeated word", "Remove the duplicate word", first_word),
    # whitespace, flagged only
    PatternRule(r"[.!?][A-Z]", "Missing space", "Add a space after punctuation", flags=0),
    PatternRule(r"[ \t]{2,}", "Multiple spaces", "Use a single space", flags=0),
    PatternRule(r"\bthe\s+affect\b", "Affect/effect confusion",
                "Did you mean 'the effect' (noun)?", swap("affect", "effect")),
    PatternRule(r"\bwill\s+effect\b", "Affect/effect confusion",
                "Did you mean 'will affect' (verb)?", swap("effect", "affect")),
]

CAPITALIZATION_RULES: List[Rule] = [SentenceCapitalizationRule(), LowercaseIRule()]


class RuleEngine:
    """Runs the pattern rules, then the capitalization pass, in declaration order.

    Stateless; overlapping matches from different rules are all reported.
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None,
                 capitalization: Optional[Iterable[Rule]] = None):
        self.rules = list(DEFAULT_RULES if rules is None else rules)
        self.capitalization = list(CAPITALIZATION_RULES if capitalization is None else capitalization)

    def check(self, text: str) -> Iterator[Suggestion]:
        if not text or not text.strip():
            return
        for rule in self.rules:
            yield from rule.evaluate(text)
        for rule in self.capitalization:
            yield from rule.evaluate(text)
