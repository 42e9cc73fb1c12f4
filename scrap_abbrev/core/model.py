from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class SourceSlice:
    text: str
    start: int  # one-based
    length: int


@dataclass(frozen=True)
class LiteralScrap:
    value: str
    source: SourceSlice

    def extended(self, value: str, width: int) -> LiteralScrap:
        """Return a copy with `value` appended, covering `width` more source columns."""
        grown = SourceSlice(self.source.text, self.source.start, self.source.length + width)
        return LiteralScrap(value=self.value + value, source=grown)


@dataclass(frozen=True)
class AlternationScrap:
    branches: tuple[ScrapSequence, ...]
    source: SourceSlice


Scrap = Union[LiteralScrap, AlternationScrap]
ScrapSequence = Tuple[Scrap, ...]

# (from, to)
Abbreviation = Tuple[str, str]


@dataclass(frozen=True)
class ParsingContext:
    left_delimiter: str = "{"
    right_delimiter: str = "}"
    separator: str = ","
    escape: str = "\\"

    def __post_init__(self) -> None:
        for name in ("left_delimiter", "right_delimiter", "separator", "escape"):
            token = getattr(self, name)
            if not isinstance(token, str) or not token:
                raise ValueError(f"{name} must be a non-empty string")


DEFAULT_CONTEXT = ParsingContext()
