from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from scrap_abbrev.core.errors import ScrapParsingError
from scrap_abbrev.core.model import (
    DEFAULT_CONTEXT,
    AlternationScrap,
    LiteralScrap,
    ParsingContext,
    Scrap,
    ScrapSequence,
    SourceSlice,
)


@dataclass
class _Frame:
    """An open delimiter scope waiting for its closing delimiter."""

    start: int  # one-based column of the opening delimiter
    enclosing: list[Scrap]
    branches: list[list[Scrap]] = field(default_factory=list)


def parse(
    text: str, context: ParsingContext = DEFAULT_CONTEXT
) -> tuple[Optional[ScrapSequence], Optional[ScrapParsingError]]:
    """Parse `text` into a scrap sequence.

    Returns (sequence, error). Sequence is None when an error is returned.

    Quirk kept on purpose:
      - {a,} has two branches: "a" and ""
      - {} has no branches at all (not one empty branch)
    so a closing delimiter only records the pending branch when it is non-empty
    or when a separator already recorded one.
    """

    left = context.left_delimiter
    right = context.right_delimiter
    separator = context.separator
    escapable = (context.escape, left, right)

    stack: list[_Frame] = []
    current: list[Scrap] = []
    escaped = False

    pos = 0
    while pos < len(text):
        column = pos + 1

        if not escaped and text.startswith(context.escape, pos):
            if _match_any(text, pos + len(context.escape), escapable) is not None:
                escaped = True
                pos += len(context.escape)
                continue

        if not escaped and text.startswith(left, pos):
            stack.append(_Frame(start=column, enclosing=current))
            current = []
            pos += len(left)
            continue

        if not escaped and text.startswith(right, pos):
            if not stack:
                return None, ScrapParsingError(
                    code="E_PARSE_UNOPENED_DELIMITER",
                    message=f"Delimiter {right} never opened",
                    position=column,
                    text=text,
                )

            frame = stack.pop()
            if current or frame.branches:
                frame.branches.append(current)

            end = column + len(right) - 1
            node = AlternationScrap(
                branches=tuple(tuple(b) for b in frame.branches),
                source=SourceSlice(text, frame.start, end - frame.start + 1),
            )
            current = frame.enclosing
            current.append(node)
            pos += len(right)
            continue

        if not escaped and stack and text.startswith(separator, pos):
            stack[-1].branches.append(current)
            current = []
            pos += len(separator)
            continue

        # Plain character, or the token right after an escape marker.
        if escaped:
            token = _match_any(text, pos, escapable) or text[pos]
            start = column - len(context.escape)
            width = len(token) + len(context.escape)
        else:
            token = text[pos]
            start = column
            width = 1

        last = current[-1] if current else None
        if isinstance(last, LiteralScrap):
            current[-1] = last.extended(token, width)
        else:
            current.append(LiteralScrap(value=token, source=SourceSlice(text, start, width)))

        escaped = False
        pos += len(token)

    if stack:
        return None, ScrapParsingError(
            code="E_PARSE_UNCLOSED_DELIMITER",
            message=f"Delimiter {left} never closed",
            position=stack[-1].start,
            text=text,
        )

    return tuple(current), None


def show_sequence(seq: ScrapSequence, context: ParsingContext = DEFAULT_CONTEXT) -> str:
    """Render a scrap sequence back into the mini-language (debug helper)."""

    out: list[str] = []
    for scrap in seq:
        if isinstance(scrap, LiteralScrap):
            out.append(_escape_literal(scrap.value, context))
        else:
            rendered = [show_sequence(b, context) for b in scrap.branches]
            out.append(context.left_delimiter + context.separator.join(rendered) + context.right_delimiter)
    return "".join(out)


def _match_any(text: str, pos: int, tokens: tuple[str, ...]) -> Optional[str]:
    """Return the longest token found at `pos`, if any."""
    best: Optional[str] = None
    for token in tokens:
        if text.startswith(token, pos) and (best is None or len(token) > len(best)):
            best = token
    return best


def _escape_literal(value: str, context: ParsingContext) -> str:
    # The separator cannot be escaped, so a literal separator only round-trips
    # at top level.
    escapable = (context.escape, context.left_delimiter, context.right_delimiter)
    out: list[str] = []
    pos = 0
    while pos < len(value):
        token = _match_any(value, pos, escapable)
        if token is None:
            out.append(value[pos])
            pos += 1
            continue
        out.append(context.escape + token)
        pos += len(token)
    return "".join(out)
