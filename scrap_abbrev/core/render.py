from __future__ import annotations

from scrap_abbrev.core.errors import ScrapError
from scrap_abbrev.core.model import SourceSlice


def format_slice(source: SourceSlice) -> str:
    """Show the source text with carets under the slice."""
    return source.text + "\n" + " " * (source.start - 1) + "^" * max(source.length, 1)


def format_error(err: ScrapError) -> str:
    if err.source is None:
        return str(err)
    return str(err) + "\n" + format_slice(err.source)
