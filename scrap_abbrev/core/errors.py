from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from scrap_abbrev.core.model import SourceSlice


@dataclass(frozen=True)
class ScrapError(Exception):
    """Base error envelope. Core code raises/returns these; only the CLI prints them."""

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<input>"
        return f"{loc}: {self.code}: {self.message}"

    @property
    def source(self) -> Optional[SourceSlice]:
        return None


class ScrapLoadError(ScrapError):
    pass


@dataclass(frozen=True)
class ScrapParsingError(ScrapError):
    """Syntax error at a single one-based character position of `text`."""

    position: int = 1
    text: str = ""

    @property
    def source(self) -> Optional[SourceSlice]:
        return SourceSlice(text=self.text, start=self.position, length=1)


@dataclass(frozen=True)
class ScrapSemanticError(ScrapError):
    """Expansion error pointing at the offending node's slice."""

    slice: Optional[SourceSlice] = None

    @property
    def source(self) -> Optional[SourceSlice]:
        return self.slice
