from scrap_abbrev.core.errors import ScrapParsingError, ScrapSemanticError
from scrap_abbrev.core.expand.expand_many import ExpansionInput, expand_many, expand_pair
from scrap_abbrev.core.model import ParsingContext


def test_expand_pair_without_options():
    assert expand_pair("{a,b}", "{x,y}") == [("a", "x"), ("b", "y")]


def test_expand_pair_with_casing():
    out = expand_pair("pre{a,b}", "{x,y}post", {"all_caps": True})
    assert out == [
        ("prea", "xpost"),
        ("PREA", "XPOST"),
        ("preb", "ypost"),
        ("PREB", "YPOST"),
    ]


def test_expand_many_uses_default_options():
    out = expand_many([ExpansionInput("teh", "the")])
    assert out == [("teh", "the"), ("Teh", "The")]


def test_expand_many_entry_options_override_defaults():
    entries = [
        ExpansionInput("a", "b"),
        ExpansionInput("c", "d", options={"capitalized": False}),
    ]
    out = expand_many(entries, {"capitalized": True})
    assert out == [("a", "b"), ("A", "B"), ("c", "d")]


def test_expand_many_concatenates_in_input_order():
    entries = [ExpansionInput("{a,b,c}", "{x,y}"), ExpansionInput("foo", "bar")]
    out = expand_many(entries, {})
    assert out == [("a", "x"), ("b", "y"), ("c", "x"), ("foo", "bar")]


def test_expand_many_custom_context():
    ctx = ParsingContext(left_delimiter="<", right_delimiter=">", separator="|")
    out = expand_many([ExpansionInput("<a|b>{", "<1|2>")], {}, context=ctx)
    assert out == [("a{", "1"), ("b{", "2")]


def test_expand_many_parse_error_is_labelled():
    entries = [ExpansionInput("ok", "ok"), ExpansionInput("fine", "{x,y")]
    try:
        expand_many(entries, file="abbrevs.yaml")
        assert False, "expected ScrapParsingError"
    except ScrapParsingError as e:
        assert e.code == "E_PARSE_UNCLOSED_DELIMITER"
        assert e.file == "abbrevs.yaml"
        assert e.path == "abbreviations[1].right"
        assert e.text == "{x,y"
        assert str(e).startswith("abbrevs.yaml:abbreviations[1].right: E_PARSE_UNCLOSED_DELIMITER")


def test_expand_many_semantic_error_is_labelled():
    entries = [ExpansionInput("{a,b}", "plain")]
    try:
        expand_many(entries, file="abbrevs.yaml")
        assert False, "expected ScrapSemanticError"
    except ScrapSemanticError as e:
        assert e.code == "E_EXPAND_UNMATCHED_LEFT"
        assert e.path == "abbreviations[0]"
        assert e.source is not None
        assert e.source.text == "{a,b}"


def test_expand_many_left_error_wins_over_right():
    try:
        expand_many([ExpansionInput("}", "{")])
        assert False, "expected ScrapParsingError"
    except ScrapParsingError as e:
        assert e.path == "abbreviations[0].left"
        assert e.code == "E_PARSE_UNOPENED_DELIMITER"


def test_expand_many_entry_alias_disables_default():
    out = expand_many([ExpansionInput("teh", "the", options={"capitalized_case": False})])
    assert out == [("teh", "the")]
