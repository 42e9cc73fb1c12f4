from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
import yaml

from scrap_abbrev.core.errors import ScrapError, ScrapLoadError, ScrapParsingError, ScrapSemanticError
from scrap_abbrev.core.expand.casing import (
    DEFAULT_CASING_OPTIONS,
    TRANSFORMS,
    Casing,
    merged_options,
    resolve_casing,
)
from scrap_abbrev.core.expand.expand_many import expand_many, expand_pair
from scrap_abbrev.core.io.load_abbreviations import load_abbreviations
from scrap_abbrev.core.model import (
    DEFAULT_CONTEXT,
    Abbreviation,
    AlternationScrap,
    LiteralScrap,
    ParsingContext,
    ScrapSequence,
)
from scrap_abbrev.core.parse.parse_scrap import parse, show_sequence
from scrap_abbrev.core.render import format_error

app = typer.Typer(add_completion=False, no_args_is_help=True)

_CASING_EXAMPLE = "my-word"


@app.callback()
def _callback() -> None:
    """Scrap CLI: expand brace patterns into abbreviation pairs."""
    return


@app.command("parse")
def parse_cmd(
    text: str = typer.Argument(..., help="Pattern to parse, e.g. 'pre{a,b}post'"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    left: str = typer.Option(DEFAULT_CONTEXT.left_delimiter, "--left", help="Opening delimiter"),
    right: str = typer.Option(DEFAULT_CONTEXT.right_delimiter, "--right", help="Closing delimiter"),
    separator: str = typer.Option(DEFAULT_CONTEXT.separator, "--separator", help="Branch separator"),
    escape: str = typer.Option(DEFAULT_CONTEXT.escape, "--escape", help="Escape marker"),
) -> None:
    """Parse a pattern and print its scrap tree."""
    _check_format(format, ("text", "json"), code="E_PARSE_UNKNOWN_FORMAT")

    try:
        context = ParsingContext(
            left_delimiter=left, right_delimiter=right, separator=separator, escape=escape
        )
    except ValueError as e:
        _print_errors([ScrapLoadError(code="E_INVALID_CONTEXT", message=str(e), path="context")])
        raise typer.Exit(code=2)

    seq, err = parse(text, context)
    if err is not None:
        _print_errors([err])
        raise typer.Exit(code=2)

    assert seq is not None

    if format == "json":
        payload = {
            "tool": "scrap",
            "command": "parse",
            "ok": True,
            "normalized": show_sequence(seq, context),
            "tree": _sequence_to_json(seq),
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    typer.echo(show_sequence(seq, context))
    for line in _outline(seq, indent=0):
        typer.echo(line)


@app.command("expand")
def expand_cmd(
    left: str = typer.Argument(..., help="Left pattern (what gets typed)"),
    right: str = typer.Argument(..., help="Right pattern (what it expands to)"),
    casing: Optional[list[str]] = typer.Option(
        None, "--casing", help="Enable a casing variant (repeatable), e.g. snake"
    ),
    plain: bool = typer.Option(False, "--plain", help="Ignore the default casing options"),
    max_pairs: Optional[int] = typer.Option(None, "--max-pairs", help="Fail if expansion exceeds N pairs"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Expand a single (left, right) pattern pair."""
    _check_format(format, ("text", "json"), code="E_EXPAND_UNKNOWN_FORMAT")

    overrides: dict[str, bool] = {}
    for name in casing or []:
        if resolve_casing(name) is None:
            _print_errors(
                [
                    ScrapLoadError(
                        code="E_EXPAND_UNKNOWN_CASING",
                        message=f"unknown casing: {name} (choose one of: {', '.join(c.value for c in Casing)})",
                        path="casing",
                    )
                ]
            )
            raise typer.Exit(code=2)
        overrides[name] = True

    options = merged_options({} if plain else DEFAULT_CASING_OPTIONS, overrides)

    try:
        pairs = expand_pair(left, right, options, max_pairs=max_pairs)
    except (ScrapParsingError, ScrapSemanticError) as e:
        if format == "json":
            _emit_json("expand", ok=False, pairs=[], errors=[e], exit_code=2)
        _print_errors([e])
        raise typer.Exit(code=2)

    if format == "json":
        _emit_json("expand", ok=True, pairs=pairs, errors=[], exit_code=0)
    _echo_pairs(pairs)


@app.command("expand-file")
def expand_file_cmd(
    path: str = typer.Argument(..., help="Path to an abbreviation file (.yaml/.yml/.json)"),
    out: Optional[str] = typer.Option(None, "--out", help="Write pairs to this file instead of stdout"),
    format: str = typer.Option("text", "--format", help="Output format: text|json|yaml"),
    max_pairs: Optional[int] = typer.Option(
        None, "--max-pairs", help="Fail if any single entry expands to more than N pairs"
    ),
) -> None:
    """Expand every entry of an abbreviation file (fails on the first error)."""
    _check_format(format, ("text", "json", "yaml"), code="E_EXPAND_UNKNOWN_FORMAT")

    try:
        doc = load_abbreviations(path)
    except ScrapLoadError as e:
        if format == "json" and out is None:
            _emit_json("expand-file", ok=False, pairs=[], errors=[e], exit_code=1)
        _print_errors([e])
        raise typer.Exit(code=1)

    try:
        pairs = expand_many(
            doc.entries,
            doc.options,
            context=doc.context,
            file=doc.file,
            max_pairs=max_pairs,
        )
    except (ScrapParsingError, ScrapSemanticError) as e:
        if format == "json" and out is None:
            _emit_json("expand-file", ok=False, pairs=[], errors=[e], exit_code=2)
        _print_errors([e])
        raise typer.Exit(code=2)

    if out is not None:
        _write_pairs(out, pairs, format)
        typer.echo(f"OK: wrote {len(pairs)} abbreviations to {out}")
        return

    if format == "json":
        _emit_json("expand-file", ok=True, pairs=pairs, errors=[], exit_code=0)
    if format == "yaml":
        typer.echo(_pairs_yaml(pairs), nl=False)
        return
    _echo_pairs(pairs)


@app.command("casings")
def casings_cmd() -> None:
    """List available casing variants."""
    typer.echo("Casings:")
    for c in Casing:
        default = DEFAULT_CASING_OPTIONS.get(c.value)
        marker = " (default)" if default else ""
        typer.echo(f"- {c.value}: {TRANSFORMS[c](_CASING_EXAMPLE)}{marker}")


def _check_format(format: str, allowed: tuple[str, ...], *, code: str) -> None:
    if format not in allowed:
        _print_errors(
            [
                ScrapLoadError(
                    code=code,
                    message=f"unknown format: {format} (choose one of: {', '.join(allowed)})",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)


def _to_item(e: ScrapError) -> dict[str, Any]:
    if isinstance(e, ScrapLoadError):
        source = "load"
    elif isinstance(e, ScrapParsingError):
        source = "parse"
    else:
        source = "expand"
    item: dict[str, Any] = {
        "code": e.code,
        "message": e.message,
        "file": e.file,
        "path": e.path,
        "severity": "error",
        "source": source,
    }
    if e.source is not None:
        item["position"] = e.source.start
        item["length"] = e.source.length
    return item


def _emit_json(
    command: str,
    *,
    ok: bool,
    pairs: list[Abbreviation],
    errors: list[ScrapError],
    exit_code: int,
) -> None:
    payload = {
        "tool": "scrap",
        "command": command,
        "ok": ok,
        "pair_count": len(pairs),
        "pairs": [list(p) for p in pairs],
        "error_count": len(errors),
        "errors": [_to_item(e) for e in errors],
    }
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    raise typer.Exit(code=exit_code)


def _echo_pairs(pairs: list[Abbreviation]) -> None:
    for src, dst in pairs:
        typer.echo(f"{src}\t{dst}")


def _pairs_yaml(pairs: list[Abbreviation]) -> str:
    data = [{"from": src, "to": dst} for src, dst in pairs]
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def _write_pairs(path: str, pairs: list[Abbreviation], format: str) -> None:
    p = Path(path)
    if str(p.parent) not in (".", ""):
        p.parent.mkdir(parents=True, exist_ok=True)
    if format == "yaml":
        text = _pairs_yaml(pairs)
    elif format == "json":
        text = json.dumps([list(pair) for pair in pairs], indent=2) + "\n"
    else:
        text = "".join(f"{src}\t{dst}\n" for src, dst in pairs)
    p.write_text(text, encoding="utf-8")


def _sequence_to_json(seq: ScrapSequence) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for scrap in seq:
        node: dict[str, Any] = {"start": scrap.source.start, "length": scrap.source.length}
        if isinstance(scrap, LiteralScrap):
            node["kind"] = "literal"
            node["value"] = scrap.value
        else:
            node["kind"] = "alternation"
            node["branches"] = [_sequence_to_json(b) for b in scrap.branches]
        out.append(node)
    return out


def _outline(seq: ScrapSequence, *, indent: int) -> list[str]:
    pad = "  " * indent
    lines: list[str] = []
    for scrap in seq:
        if isinstance(scrap, AlternationScrap):
            lines.append(f"{pad}alternation @{scrap.source.start} ({len(scrap.branches)} branches)")
            for i, branch in enumerate(scrap.branches):
                lines.append(f"{pad}  [{i}]")
                lines.extend(_outline(branch, indent=indent + 2))
        else:
            lines.append(f"{pad}literal @{scrap.source.start} {scrap.value!r}")
    return lines


def _print_errors(errors: list[ScrapError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(format_error(e), err=True)


def main() -> None:
    app(prog_name="scrap")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
