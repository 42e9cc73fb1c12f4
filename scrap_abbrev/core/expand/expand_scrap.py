from __future__ import annotations

from typing import Optional

from scrap_abbrev.core.errors import ScrapSemanticError
from scrap_abbrev.core.model import Abbreviation, AlternationScrap, LiteralScrap, ScrapSequence


# Every alternation on the path, nested or sequential, adds one recursion level;
# literal runs do not.
MAX_DEPTH = 512


def expand(
    left: ScrapSequence,
    right: ScrapSequence,
    *,
    max_pairs: Optional[int] = None,
    max_depth: int = MAX_DEPTH,
) -> list[Abbreviation]:
    """Expand a (left, right) pair of scrap sequences into (from, to) string pairs.

    Alternations on both sides are walked together: branch i on the left is
    paired with branch i (mod n) on the right. When the right alternation has no
    branches, the left branch is reused for the right side as well.

    Output order follows branch order and is deterministic.
    Raises ScrapSemanticError when the two sides cannot be aligned.
    """

    out: list[Abbreviation] = []
    _expand(tuple(left), tuple(right), ("", ""), out, 0, max_pairs, max_depth)
    return out


def _expand(
    from_seq: ScrapSequence,
    to_seq: ScrapSequence,
    context: Abbreviation,
    out: list[Abbreviation],
    depth: int,
    max_pairs: Optional[int],
    max_depth: int,
) -> None:
    ctx_from, ctx_to = context

    # Peel literal heads, left side first.
    while True:
        if from_seq and isinstance(from_seq[0], LiteralScrap):
            ctx_from += from_seq[0].value
            from_seq = from_seq[1:]
        elif to_seq and isinstance(to_seq[0], LiteralScrap):
            ctx_to += to_seq[0].value
            to_seq = to_seq[1:]
        else:
            break

    if not from_seq and not to_seq:
        if max_pairs is not None and len(out) >= max_pairs:
            raise ScrapSemanticError(
                code="E_EXPAND_TOO_MANY_PAIRS",
                message=f"expansion produces more than {max_pairs} pairs",
            )
        out.append((ctx_from, ctx_to))
        return

    # Checked before alignment: "{}" against plain text reports the empty alternation.
    if from_seq and isinstance(from_seq[0], AlternationScrap) and not from_seq[0].branches:
        raise ScrapSemanticError(
            code="E_EXPAND_EMPTY_LEFT",
            message="empty alternatives on the left hand side would halt expansion",
            slice=from_seq[0].source,
        )

    if not from_seq:
        raise ScrapSemanticError(
            code="E_EXPAND_UNMATCHED_RIGHT",
            message="alternative on the right hand side has no match on the left",
            slice=to_seq[0].source,
        )
    if not to_seq:
        raise ScrapSemanticError(
            code="E_EXPAND_UNMATCHED_LEFT",
            message="alternative on the left hand side has no match on the right",
            slice=from_seq[0].source,
        )

    head_from = from_seq[0]
    head_to = to_seq[0]
    assert isinstance(head_from, AlternationScrap)
    assert isinstance(head_to, AlternationScrap)

    if depth >= max_depth:
        raise ScrapSemanticError(
            code="E_EXPAND_TOO_DEEP",
            message=f"expansion recurses through more than {max_depth} alternations",
            slice=head_from.source,
        )

    from_tail = from_seq[1:]
    to_tail = to_seq[1:]
    for i, when in enumerate(head_from.branches):
        replacement = head_to.branches[i % len(head_to.branches)] if head_to.branches else when
        _expand(
            when + from_tail,
            replacement + to_tail,
            (ctx_from, ctx_to),
            out,
            depth + 1,
            max_pairs,
            max_depth,
        )
