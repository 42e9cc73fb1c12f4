from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from scrap_abbrev.core.errors import ScrapLoadError
from scrap_abbrev.core.expand.expand_many import ExpansionInput
from scrap_abbrev.core.model import DEFAULT_CONTEXT, ParsingContext


_CONTEXT_KEYS = ("left_delimiter", "right_delimiter", "separator", "escape")


@dataclass(frozen=True)
class AbbreviationFile:
    file: str
    entries: list[ExpansionInput]
    options: Optional[dict[str, bool]] = None
    context: ParsingContext = DEFAULT_CONTEXT


def load_abbreviations(path: str) -> AbbreviationFile:
    """Load a YAML/JSON abbreviation file.

    Accepted shapes:

      - [left, right]                   # bare list of entries
      - {left: ..., right: ..., options: {...}}

      or a mapping:

      options: {capitalized: true}      # optional, batch defaults
      context: {left_delimiter: "{"}    # optional
      abbreviations: [...]              # required
    """

    p = Path(path)
    if not p.exists():
        raise ScrapLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise ScrapLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise ScrapLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml and .json",
                file=str(p),
            )
    except ScrapLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise ScrapLoadError(code=code, message=str(e), file=str(p)) from e

    return parse_abbreviation_document(data, file=str(p))


def parse_abbreviation_document(data: Any, *, file: str = "<document>") -> AbbreviationFile:
    """Validate an already-decoded document (see load_abbreviations for the shape)."""

    options: Optional[dict[str, bool]] = None
    context = DEFAULT_CONTEXT

    if isinstance(data, list):
        raw_entries: Any = data
    elif isinstance(data, dict):
        if "abbreviations" not in data:
            raise ScrapLoadError(
                code="E_INVALID_TOP_LEVEL",
                message="abbreviations is required",
                file=file,
                path="abbreviations",
            )
        raw_entries = data.get("abbreviations")
        if "options" in data:
            options = _parse_options(data.get("options"), file=file, path="options")
        if "context" in data:
            context = _parse_context(data.get("context"), file=file)
    else:
        raise ScrapLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a list of entries or a mapping",
            file=file,
        )

    if not isinstance(raw_entries, list):
        raise ScrapLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="abbreviations must be an array",
            file=file,
            path="abbreviations",
        )

    entries = [_parse_entry(raw, file=file, path=f"abbreviations[{i}]") for i, raw in enumerate(raw_entries)]
    return AbbreviationFile(file=file, entries=entries, options=options, context=context)


def _parse_entry(raw: Any, *, file: str, path: str) -> ExpansionInput:
    if isinstance(raw, list):
        if len(raw) != 2 or not all(isinstance(x, str) for x in raw):
            raise ScrapLoadError(
                code="E_INVALID_ENTRY",
                message="list entries must be [left, right] strings",
                file=file,
                path=path,
            )
        return ExpansionInput(left=raw[0], right=raw[1])

    if not isinstance(raw, dict):
        raise ScrapLoadError(
            code="E_INVALID_ENTRY",
            message="entry must be a mapping or a [left, right] list",
            file=file,
            path=path,
        )

    for side in ("left", "right"):
        if not isinstance(raw.get(side), str):
            raise ScrapLoadError(
                code="E_INVALID_ENTRY",
                message=f"{side} is required and must be a string",
                file=file,
                path=f"{path}.{side}",
            )

    options = None
    if raw.get("options") is not None:
        options = _parse_options(raw["options"], file=file, path=f"{path}.options")

    return ExpansionInput(left=raw["left"], right=raw["right"], options=options)


def _parse_options(raw: Any, *, file: str, path: str) -> dict[str, bool]:
    if not isinstance(raw, dict):
        raise ScrapLoadError(
            code="E_INVALID_OPTIONS",
            message="options must be a mapping of casing name -> bool",
            file=file,
            path=path,
        )
    out: dict[str, bool] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or not k.strip():
            raise ScrapLoadError(
                code="E_INVALID_OPTIONS",
                message="option names must be non-empty strings",
                file=file,
                path=path,
            )
        if not isinstance(v, bool):
            raise ScrapLoadError(
                code="E_INVALID_OPTIONS",
                message=f"option '{k}' must be true or false",
                file=file,
                path=f"{path}.{k}",
            )
        out[k.strip()] = v
    return out


def _parse_context(raw: Any, *, file: str) -> ParsingContext:
    if not isinstance(raw, dict):
        raise ScrapLoadError(
            code="E_INVALID_CONTEXT",
            message="context must be a mapping",
            file=file,
            path="context",
        )
    unknown = sorted(str(k) for k in raw if k not in _CONTEXT_KEYS)
    if unknown:
        raise ScrapLoadError(
            code="E_INVALID_CONTEXT",
            message=f"unknown context keys: {', '.join(unknown)} (choose from: {', '.join(_CONTEXT_KEYS)})",
            file=file,
            path="context",
        )
    try:
        return ParsingContext(**raw)
    except ValueError as e:
        raise ScrapLoadError(code="E_INVALID_CONTEXT", message=str(e), file=file, path="context") from e
