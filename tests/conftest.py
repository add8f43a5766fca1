# tests/conftest.py
from __future__ import annotations
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from grammar_assistant.main import create_app
from grammar_assistant.models.suggestion import Suggestion
from grammar_assistant.services.analyze import GrammarAssistant
from grammar_assistant.services.llm import AIOk, AIResult
from grammar_assistant.services.spelling import DictionaryProvider, spell_checker_for

WORDS = [
    "a", "an", "and", "apple/S", "are", "big", "book/S", "car/S", "cat/S", "dog/S", "egg/S",
    "going", "gone", "happy/U", "has", "have", "he", "hello", "here", "house/S", "i",
    "is", "it", "its", "letter/S", "mat", "my", "on", "receive", "sat", "she",
    "should", "than", "the", "their", "then", "there", "this", "walk/DGS", "was", "we",
    "welcome", "world", "your", "you",
]

AFFIXES = """SET UTF-8
TRY esianrtolcdugmphbyfvkwzESIANRTOLCDUGMPHBYFVKWZ'

PFX U Y 1
PFX U   0     un         .

SFX S Y 4
SFX S   y     ies        [^aeiou]y
SFX S   0     s          [aeiou]y
SFX S   0     es         [sxzh]
SFX S   0     s          [^sxzhy]

SFX D Y 4
SFX D   0     d          e
SFX D   y     ied        [^aeiou]y
SFX D   0     ed         [^ey]
SFX D   0     ed         [aeiou]y

SFX G Y 2
SFX G   e     ing        e
SFX G   0     ing        [^e]
"""


# --------------------------------------------------------------------
# A tiny Hunspell dictionary pair on disk
# --------------------------------------------------------------------
def write_dictionary(directory: Path, words: List[str], name: str = "en_US") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    lines = [str(len(words))] + list(words)
    (directory / f"{name}.dic").write_text("\n".join(lines) + "\n", encoding="utf-8")
    (directory / f"{name}.aff").write_text(AFFIXES, encoding="utf-8")
    return directory


@pytest.fixture
def make_dictionary():
    return write_dictionary


@pytest.fixture(scope="session")
def dictionary_dir(tmp_path_factory) -> Path:
    return write_dictionary(tmp_path_factory.mktemp("dictionaries"), WORDS)


@pytest.fixture(scope="session")
def provider(dictionary_dir) -> DictionaryProvider:
    return DictionaryProvider.from_directory(dictionary_dir)


# --------------------------------------------------------------------
# Stand-in for the AI provider: no network, canned outcomes
# --------------------------------------------------------------------
class FakeAI:
    def __init__(self, result: Optional[AIResult] = None, configured: bool = True):
        self.result = result
        self.configured = configured
        self.calls: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def check_text(self, text: str) -> AIResult:
        self.calls.append(text)
        if self.result is not None:
            return self.result
        return AIOk(suggestions=[Suggestion(message="✓ No issues found")])

    async def rewrite_text(self, text: str, style: str) -> Optional[str]:
        if not self.configured:
            return None
        return f"[{style}] {text}"


@pytest.fixture
def fake_ai() -> FakeAI:
    return FakeAI()


@pytest.fixture
def assistant(provider, fake_ai) -> GrammarAssistant:
    return GrammarAssistant(spell_checker=spell_checker_for(provider), ai=fake_ai)


# --------------------------------------------------------------------
# FastAPI test client over the same assistant
# --------------------------------------------------------------------
@pytest.fixture
def client(assistant) -> TestClient:
    return TestClient(create_app(assistant))
