# tests/test_spelling.py
from grammar_assistant.services.spelling import (
    DictionaryProvider,
    ReadySpellChecker,
    UnavailableSpellChecker,
    load_word_forms,
    read_affix_table,
    read_dic_entries,
    read_dic_words,
    spell_checker_for,
)


class _StubProvider:
    def __init__(self, known, alternatives=None):
        self.known = {w.lower() for w in known}
        self.alternatives = alternatives or {}
        self.checked = []

    @property
    def is_available(self):
        return True

    def check(self, word):
        self.checked.append(word)
        return word.lower() in self.known

    def suggest(self, word):
        return self.alternatives.get(word.lower(), [])


def test_missing_dictionary_degrades(tmp_path):
    provider = DictionaryProvider.from_directory(tmp_path / "nowhere")
    assert not provider.is_available
    checker = spell_checker_for(provider)
    assert isinstance(checker, UnavailableSpellChecker)
    out = list(checker.check("Anything at all, even mispeled"))
    assert len(out) == 1
    assert out[0].message == "Dictionary not loaded"
    assert "en_US.dic" in out[0].detail and "en_US.aff" in out[0].detail
    assert not out[0].is_localized


def test_affix_file_required(tmp_path, make_dictionary):
    make_dictionary(tmp_path, ["cat", "dog"])
    (tmp_path / "en_US.aff").unlink()
    assert not DictionaryProvider.from_directory(tmp_path).is_available


def test_read_dic_words_strips_flags_and_header(tmp_path):
    dic = tmp_path / "x.dic"
    dic.write_text("3\nhello/MS\nworld\n\nlinger/DG\n", encoding="utf-8")
    assert read_dic_words(dic) == {"hello", "world", "linger"}


def test_read_dic_entries_keeps_flags_and_drops_morphology(tmp_path):
    dic = tmp_path / "x.dic"
    dic.write_text("2\nwalk/DGS\tpo:verb\nthe\n", encoding="utf-8")
    assert list(read_dic_entries(dic)) == [("walk", "DGS"), ("the", "")]


def test_affix_expansion_with_cross_product(tmp_path, make_dictionary):
    make_dictionary(tmp_path, ["lock/UD"])
    table = read_affix_table(tmp_path / "en_US.aff")
    assert table.expand("lock", "UD") == {"lock", "locked", "unlock", "unlocked"}
    assert table.expand("try", "SD") == {"try", "tries", "tried"}
    assert table.expand("make", "G") == {"make", "making"}
    assert table.expand("box", "S") == {"box", "boxes"}


def test_long_flag_format(tmp_path):
    (tmp_path / "x.aff").write_text("FLAG long\nSFX Aa Y 1\nSFX Aa 0 s .\n", encoding="utf-8")
    (tmp_path / "x.dic").write_text("2\ncat/Aa\ndog/AaZz\n", encoding="utf-8")
    assert load_word_forms(tmp_path / "x.dic", tmp_path / "x.aff") == {"cat", "cats", "dog", "dogs"}


def test_affix_derived_forms_are_known(provider):
    for word in ("cats", "walked", "walking", "walks", "houses", "unhappy"):
        assert provider.check(word), word
    assert not provider.check("happys")
    assert list(spell_checker_for(provider).check("The cats walked")) == []


def test_unchecked_long_token_is_not_its_own_suggestion(provider):
    token = "Supercalifragilisticexpialidocious"
    assert provider.suggest(token) == []
    s = list(spell_checker_for(provider).check(token))[0]
    assert s.replacement_text is None


def test_provider_lookup_and_suggest(provider):
    assert provider.is_available
    assert provider.check("Receive")
    assert not provider.check("recieve")
    assert provider.suggest("recieve")[0] == "receive"
    assert provider.suggest("Teh")[0] == "The"


def test_flags_misspellings_with_spans(provider):
    text = "I recieve teh letter"
    out = list(spell_checker_for(provider).check(text))
    assert [s.message for s in out] == [
        "Spelling: 'recieve' may be misspelled",
        "Spelling: 'teh' may be misspelled",
    ]
    first, second = out
    assert (first.start_index, first.length, first.replacement_text) == (2, 7, "receive")
    assert text[second.start_index:second.end_index] == "teh"
    assert second.replacement_text == "the"
    assert second.detail.startswith("Did you mean: the")


def test_each_distinct_word_checked_once():
    stub = _StubProvider(known=["cat"])
    out = list(ReadySpellChecker(stub).check("Zorp cat zorp ZORP"))
    assert len(out) == 1
    assert out[0].start_index == 0
    assert [w.lower() for w in stub.checked] == ["zorp", "cat"]


def test_short_tokens_skipped():
    stub = _StubProvider(known=[])
    out = list(ReadySpellChecker(stub).check("x y z"))
    assert out == []
    assert stub.checked == []


def test_at_most_five_alternatives():
    stub = _StubProvider(known=[], alternatives={"wrod": ["word", "wood", "rod", "ward", "wore", "world"]})
    s = list(ReadySpellChecker(stub).check("wrod"))[0]
    assert s.detail == "Did you mean: word, wood, rod, ward, wore"
    assert s.replacement_text == "word"


def test_no_alternatives_leaves_unfixed():
    stub = _StubProvider(known=[])
    s = list(ReadySpellChecker(stub).check("qwxz"))[0]
    assert s.detail == "No suggestions available"
    assert s.replacement_text is None
    assert (s.start_index, s.length) == (0, 4)


def test_apostrophes_are_part_of_words():
    stub = _StubProvider(known=["don't"])
    assert list(ReadySpellChecker(stub).check("don't")) == []
