# tests/test_rules.py
from grammar_assistant.services.rules import (
    DEFAULT_RULES,
    LowercaseIRule,
    PatternRule,
    RuleEngine,
    SentenceCapitalizationRule,
    context_snippet,
    swap,
)

engine = RuleEngine()


def _with_prefix(suggestions, prefix):
    return [s for s in suggestions if s.message.startswith(prefix)]


def _apply(text, s):
    return text[:s.start_index] + s.replacement_text + text[s.end_index:]


def test_repeated_word_keeps_first():
    found = _with_prefix(engine.check("the the cat"), "Repeated word")
    assert len(found) == 1
    s = found[0]
    assert (s.start_index, s.length, s.replacement_text) == (0, 7, "the")


def test_article_fix_at_exact_offset():
    text = "I has a apple"
    articles = _with_prefix(engine.check(text), "Article error")
    assert len(articles) == 1
    s = articles[0]
    assert text[s.start_index:s.end_index] == "a apple"
    assert s.replacement_text == "an apple"
    assert _apply(text, s) == "I has an apple"


def test_i_has_is_flagged_without_fix():
    agreement = _with_prefix(engine.check("I has a apple"), "Subject-verb agreement error")
    assert [s.replacement_text for s in agreement] == [None]


def test_i_is_gets_fixed_and_generic_rule_also_reports():
    agreement = _with_prefix(engine.check("I is happy"), "Subject-verb agreement error")
    # both the fixing rule and the generic one match the same span
    assert [s.replacement_text for s in agreement] == ["I am", None]
    assert {(s.start_index, s.length) for s in agreement} == {(0, 4)}


def test_article_keeps_capital():
    s = _with_prefix(engine.check("A apple fell."), "Article error")[0]
    assert s.replacement_text == "An apple"


def test_an_before_consonant():
    s = _with_prefix(engine.check("It was an book."), "Article error")[0]
    assert s.replacement_text == "a book"


def test_confusions():
    text = "Their is a car. I should of known. Its a trap. Your welcome. Bigger then that."
    fixes = {text[s.start_index:s.end_index]: s.replacement_text
             for s in engine.check(text) if s.replacement_text and s.length > 1}
    assert fixes["Their is"] == "There is"
    assert fixes["should of"] == "should have"
    assert fixes["Its a"] == "It's a"
    assert fixes["Your welcome"] == "You're welcome"
    assert fixes["Bigger then"] == "Bigger than"


def test_affect_effect():
    text = "The affect was large and it will effect us."
    fixes = [s.replacement_text for s in _with_prefix(engine.check(text), "Affect/effect")]
    assert fixes == ["The effect", "will affect"]


def test_diagnostic_only_rules():
    text = "I don't have no time.Then  we left."
    found = list(engine.check(text))
    double = _with_prefix(found, "Double negative")
    missing = _with_prefix(found, "Missing space")
    spaces = _with_prefix(found, "Multiple spaces")
    assert len(double) == 1 and double[0].replacement_text is None
    assert len(missing) == 1 and text[missing[0].start_index:missing[0].end_index] == ".T"
    assert len(spaces) == 1 and spaces[0].length == 2 and spaces[0].replacement_text is None


def test_paragraph_breaks_are_not_multiple_spaces():
    assert _with_prefix(engine.check("One.\n\nTwo."), "Multiple spaces") == []


def test_sentence_capitalization_fixes_one_letter():
    text = "hello world. this is fine! ok"
    caps = list(SentenceCapitalizationRule().evaluate(text))
    assert [(s.start_index, s.length, s.replacement_text) for s in caps] == [
        (0, 1, "H"), (13, 1, "T"), (27, 1, "O"),
    ]


def test_lowercase_i_only_when_standalone():
    text = "this is it, i think i'm right"
    found = list(LowercaseIRule().evaluate(text))
    assert [s.start_index for s in found] == [12, 20]
    assert all(s.replacement_text == "I" for s in found)


def test_pattern_rules_come_before_capitalization():
    found = list(engine.check("he are here. i is happy"))
    cap_positions = [i for i, s in enumerate(found)
                     if s.message.startswith(("Sentence should", "The pronoun"))]
    rule_positions = [i for i, s in enumerate(found) if s.message.startswith("Subject-verb")]
    assert rule_positions and cap_positions
    assert max(rule_positions) < min(cap_positions)


def test_output_follows_declaration_order():
    text = "the the dog. He are here."
    found = [s for s in engine.check(text) if not s.message.startswith(("Sentence", "The pronoun"))]
    order = [next(i for i, r in enumerate(DEFAULT_RULES) if s.message.startswith(r.message)) for s in found]
    assert order == sorted(order)


def test_check_is_deterministic():
    text = "i has a apple.their is the the dog  here"
    assert list(engine.check(text)) == list(engine.check(text))


def test_fix_does_not_reflag():
    text = "She should of gone."
    s = _with_prefix(engine.check(text), "Common error")[0]
    fixed = _apply(text, s)
    assert fixed == "She should have gone."
    assert _with_prefix(engine.check(fixed), "Common error") == []


def test_empty_and_short_text():
    assert list(engine.check("")) == []
    assert list(engine.check("   ")) == []
    # sentence start and the standalone pronoun both flag a one-letter text
    assert [s.replacement_text for s in engine.check("i")] == ["I", "I"]


def test_context_snippet():
    assert context_snippet("a bad word", 2, 3) == "a [bad] word"
    long = "x" * 30 + "ERR" + "y" * 30
    snippet = context_snippet(long, 30, 3)
    assert snippet == "..." + "x" * 20 + "[ERR]" + "y" * 20 + "..."


def test_context_attached_to_detail():
    s = _with_prefix(engine.check("the the cat"), "Repeated word")[0]
    assert "Context: [the the] cat" in s.detail


def test_single_rule_in_isolation():
    rule = PatternRule(r"\bteh\b", "Typo", "Use 'the'", swap("teh", "the"))
    found = list(rule.evaluate("Teh end of teh road"))
    assert [(s.start_index, s.replacement_text) for s in found] == [(0, "The"), (11, "the")]
