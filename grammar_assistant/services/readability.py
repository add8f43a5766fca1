from __future__ import annotations
import re
import textstat
from grammar_assistant.models.report import ReadabilityScore

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WORD = re.compile(r"\b\w+\b")
_SILENT_ENDING = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_RUN = re.compile(r"[aeiouy]+")


def count_syllables(word: str) -> int:
    word = word.lower().strip()
    if len(word) <= 3:
        return 1
    word = _SILENT_ENDING.sub("", word)
    word = _LEADING_Y.sub("", word)
    return max(len(_VOWEL_RUN.findall(word)), 1)


def count_sentences(text: str) -> int:
    return sum(1 for s in _SENTENCE_SPLIT.split(text) if s.strip())


def score(text: str) -> ReadabilityScore:
    """Flesch Reading Ease and Flesch-Kincaid Grade for ``text``.

    Empty text, or text without words or sentences, gives the zero score
    (its ``level`` is "Not applicable").
    """
    if not text or not text.strip():
        return ReadabilityScore()

    sentences = count_sentences(text)
    words = _WORD.findall(text)
    if sentences == 0 or not words:
        return ReadabilityScore()

    syllables = max(sum(count_syllables(w) for w in words), 1)
    words_per_sentence = len(words) / sentences
    syllables_per_word = syllables / len(words)

    reading_ease = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    grade = 0.39 * words_per_sentence + 11.8 * syllables_per_word - 15.59

    return ReadabilityScore(
        word_count=len(words),
        sentence_count=sentences,
        syllable_count=syllables,
        flesch_reading_ease=max(0.0, min(100.0, reading_ease)),
        flesch_kincaid_grade=max(0.0, grade),
        average_words_per_sentence=words_per_sentence,
        # supplementary indices, not part of the level banding
        smog_index=textstat.smog_index(text),
        automated_readability_index=textstat.automated_readability_index(text),
    )
