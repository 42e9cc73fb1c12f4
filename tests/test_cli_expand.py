import json

from typer.testing import CliRunner

from scrap_abbrev.cli import app

runner = CliRunner()


def test_cli_expand_plain():
    r = runner.invoke(app, ["expand", "{a,b,c}", "{x,y}", "--plain"])
    assert r.exit_code == 0, r.output
    assert r.stdout.splitlines() == ["a\tx", "b\ty", "c\tx"]


def test_cli_expand_default_casing_adds_capitalized():
    r = runner.invoke(app, ["expand", "teh", "the"])
    assert r.exit_code == 0, r.output
    assert r.stdout.splitlines() == ["teh\tthe", "Teh\tThe"]


def test_cli_expand_extra_casing_json():
    r = runner.invoke(
        app, ["expand", "my-word", "other-word", "--plain", "--casing", "snake", "--format", "json"]
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.stdout)
    assert payload["ok"] is True
    assert payload["pairs"] == [["my-word", "other-word"], ["my_word", "other_word"]]


def test_cli_expand_unknown_casing():
    r = runner.invoke(app, ["expand", "a", "b", "--casing", "wavy"])
    assert r.exit_code == 2
    assert "E_EXPAND_UNKNOWN_CASING" in r.output


def test_cli_expand_semantic_error_json():
    r = runner.invoke(app, ["expand", "{a,b}", "plain", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    assert payload["error_count"] == 1
    err = payload["errors"][0]
    assert err["code"] == "E_EXPAND_UNMATCHED_LEFT"
    assert err["source"] == "expand"
    assert err["position"] == 1
    assert err["length"] == 5


def test_cli_expand_parse_error_text():
    r = runner.invoke(app, ["expand", "ok", "{x"])
    assert r.exit_code == 2
    assert "right: E_PARSE_UNCLOSED_DELIMITER" in r.output


def test_cli_expand_max_pairs():
    r = runner.invoke(app, ["expand", "{a,b,c}", "{x}", "--plain", "--max-pairs", "2"])
    assert r.exit_code == 2
    assert "E_EXPAND_TOO_MANY_PAIRS" in r.output


def test_cli_casings_lists_all():
    r = runner.invoke(app, ["casings"])
    assert r.exit_code == 0, r.output
    assert "Casings:" in r.stdout
    assert "- snake: my_word" in r.stdout
    assert "- camel: myWord" in r.stdout
    assert "- capitalized: My-word (default)" in r.stdout


def test_cli_expand_casing_alias_is_not_duplicated():
    r = runner.invoke(app, ["expand", "teh", "the", "--casing", "Capitalized"])
    assert r.exit_code == 0, r.output
    assert r.stdout.splitlines() == ["teh\tthe", "Teh\tThe"]
