from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Iterable, Optional

from scrap_abbrev.core.errors import ScrapParsingError, ScrapSemanticError
from scrap_abbrev.core.expand.casing import CasingOptions, merged_options, with_casing
from scrap_abbrev.core.expand.expand_scrap import expand
from scrap_abbrev.core.model import DEFAULT_CONTEXT, Abbreviation, ParsingContext
from scrap_abbrev.core.parse.parse_scrap import parse


@dataclass(frozen=True)
class ExpansionInput:
    left: str
    right: str
    options: Optional[dict[str, bool]] = None


def expand_pair(
    left: str,
    right: str,
    options: Optional[CasingOptions] = None,
    *,
    context: ParsingContext = DEFAULT_CONTEXT,
    max_pairs: Optional[int] = None,
) -> list[Abbreviation]:
    """Parse, expand and add casing variants for a single (left, right) entry.

    `options` are used as-is; pass merged_options(...) to layer defaults.
    Raises ScrapParsingError (path "left" or "right") or ScrapSemanticError.
    """

    left_seq, err = parse(left, context)
    if err is not None:
        raise dataclasses.replace(err, path="left")
    right_seq, err = parse(right, context)
    if err is not None:
        raise dataclasses.replace(err, path="right")

    assert left_seq is not None and right_seq is not None

    out: list[Abbreviation] = []
    for pair in expand(left_seq, right_seq, max_pairs=max_pairs):
        out.extend(with_casing(pair, options or {}))
    return out


def expand_many(
    entries: Iterable[ExpansionInput],
    options: Optional[CasingOptions] = None,
    *,
    context: ParsingContext = DEFAULT_CONTEXT,
    file: Optional[str] = None,
    max_pairs: Optional[int] = None,
) -> list[Abbreviation]:
    """Parse and expand a batch of entries, in order.

    Per-entry options override `options` (DEFAULT_CASING_OPTIONS when None).
    The first parse or semantic error aborts the batch; it is re-raised with
    `file` and an `abbreviations[i]` path attached.

    `max_pairs` bounds the pairs produced by each entry before casing.
    """

    defaults = merged_options(options)
    results: list[Abbreviation] = []

    for i, entry in enumerate(entries):
        entry_options = merged_options(defaults, entry.options)
        try:
            results.extend(
                expand_pair(
                    entry.left,
                    entry.right,
                    entry_options,
                    context=context,
                    max_pairs=max_pairs,
                )
            )
        except ScrapParsingError as e:
            raise dataclasses.replace(e, file=file, path=f"abbreviations[{i}].{e.path}") from None
        except ScrapSemanticError as e:
            raise dataclasses.replace(e, file=file, path=f"abbreviations[{i}]") from None

    return results
