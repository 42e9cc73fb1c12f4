from scrap_abbrev.core.errors import ScrapSemanticError
from scrap_abbrev.core.expand.expand_scrap import expand
from scrap_abbrev.core.parse.parse_scrap import parse


def _seq(text):
    seq, err = parse(text)
    assert err is None, err
    return seq


def _expand(left, right, **kwargs):
    return expand(_seq(left), _seq(right), **kwargs)


def _expect_error(left, right, **kwargs) -> ScrapSemanticError:
    try:
        _expand(left, right, **kwargs)
    except ScrapSemanticError as e:
        return e
    assert False, "expected ScrapSemanticError"


def test_plain_pair():
    assert _expand("foo", "bar") == [("foo", "bar")]


def test_empty_pair():
    assert _expand("", "") == [("", "")]


def test_parallel_alternations():
    assert _expand("{a,b}", "{x,y}") == [("a", "x"), ("b", "y")]


def test_cyclic_alignment_when_right_is_shorter():
    assert _expand("{a,b,c}", "{x,y}") == [("a", "x"), ("b", "y"), ("c", "x")]


def test_right_longer_extra_branches_are_ignored():
    assert _expand("{a,b}", "{x,y,z}") == [("a", "x"), ("b", "y")]


def test_literals_on_different_sides():
    assert _expand("pre{a,b}", "{x,y}post") == [("prea", "xpost"), ("preb", "ypost")]


def test_empty_right_alternation_mirrors_left():
    assert _expand("{a,b}", "x{}y") == [("a", "xay"), ("b", "xby")]


def test_trailing_empty_branch():
    assert _expand("foo{s,}", "bar{s,}") == [("foos", "bars"), ("foo", "bar")]


def test_sequential_alternations_are_cartesian():
    assert _expand("{a,b}{1,2}", "{A,B}{one,two}") == [
        ("a1", "Aone"),
        ("a2", "Atwo"),
        ("b1", "Bone"),
        ("b2", "Btwo"),
    ]


def test_nested_alternations():
    assert _expand("{x{1,2},y}", "{X{one,two},Y}") == [
        ("x1", "Xone"),
        ("x2", "Xtwo"),
        ("y", "Y"),
    ]


def test_left_alternation_without_right_match():
    e = _expect_error("{a,b}", "plain")
    assert e.code == "E_EXPAND_UNMATCHED_LEFT"
    assert e.source is not None
    assert e.source.start == 1
    assert e.source.length == 5


def test_right_alternation_without_left_match():
    e = _expect_error("plain", "x{a,b}")
    assert e.code == "E_EXPAND_UNMATCHED_RIGHT"
    assert e.source is not None
    assert e.source.start == 2
    assert e.source.text == "x{a,b}"


def test_empty_left_alternation():
    e = _expect_error("{}", "{x}")
    assert e.code == "E_EXPAND_EMPTY_LEFT"
    assert e.source is not None
    assert e.source.length == 2


def test_empty_left_alternation_against_plain_right():
    e = _expect_error("{}", "x")
    assert e.code == "E_EXPAND_EMPTY_LEFT"


def test_max_pairs_guard():
    assert len(_expand("{a,b}{c,d}", "{a,b}{c,d}", max_pairs=4)) == 4
    e = _expect_error("{a,b}{c,d}", "{a,b}{c,d}", max_pairs=3)
    assert e.code == "E_EXPAND_TOO_MANY_PAIRS"


def test_max_depth_guard():
    left = "{a}" * 10
    assert _expand(left, left, max_depth=10) == [("a" * 10, "a" * 10)]
    e = _expect_error(left, left, max_depth=9)
    assert e.code == "E_EXPAND_TOO_DEEP"
    assert "recurses through more than 9 alternations" in e.message


def test_many_single_branch_alternations_within_default_depth():
    left = "{a}" * 300
    assert _expand(left, "{b}" * 300) == [("a" * 300, "b" * 300)]
