from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Mapping, Optional

from scrap_abbrev.core.model import Abbreviation


CasingOptions = Mapping[str, bool]


class Casing(str, Enum):
    CAMEL = "camel"
    MIXED = "mixed"
    SNAKE = "snake"
    UPPER = "upper"
    DASH = "dash"
    SPACE = "space"
    DOT = "dot"
    ALL_CAPS = "all_caps"
    CAPITALIZED = "capitalized"


DEFAULT_CASING_OPTIONS: dict[str, bool] = {
    # Keep this stable: batch output for files without options depends on it.
    "capitalized": True,
    "all_caps": False,
}


_LOWER_RE = re.compile(r"[a-z]")
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_HUMP_RE = re.compile(r"([a-z\d])([A-Z])")
_PUNCT_RE = re.compile(r"[.\-]")


def camel_case(word: str) -> str:
    word = word.replace("-", "_")
    if "_" not in word and _LOWER_RE.search(word):
        return word[:1].lower() + word[1:]
    head, *rest = word.split("_")
    return head.lower() + "".join(capitalized(part.lower()) for part in rest)


def mixed_case(word: str) -> str:
    return capitalized(camel_case(word))


def snake_case(word: str) -> str:
    word = word.replace("::", "/")
    word = _ACRONYM_RE.sub(r"\1_\2", word)
    word = _HUMP_RE.sub(r"\1_\2", word)
    word = _PUNCT_RE.sub("_", word)
    return word.lower()


def upper_case(word: str) -> str:
    return snake_case(word).upper()


def dash_case(word: str) -> str:
    return snake_case(word).replace("_", "-")


def space_case(word: str) -> str:
    return snake_case(word).replace("_", " ")


def dot_case(word: str) -> str:
    return snake_case(word).replace("_", ".")


def all_caps(word: str) -> str:
    return word.upper()


def capitalized(word: str) -> str:
    return word[:1].upper() + word[1:]


TRANSFORMS: dict[Casing, Callable[[str], str]] = {
    Casing.CAMEL: camel_case,
    Casing.MIXED: mixed_case,
    Casing.SNAKE: snake_case,
    Casing.UPPER: upper_case,
    Casing.DASH: dash_case,
    Casing.SPACE: space_case,
    Casing.DOT: dot_case,
    Casing.ALL_CAPS: all_caps,
    Casing.CAPITALIZED: capitalized,
}


def resolve_casing(name: str) -> Optional[Casing]:
    """Map an option key to a Casing.

    Accepts "snake", "snake_case" and camelCase keys such as "allCaps".
    Returns None for names with no registered transform.
    """
    key = _HUMP_RE.sub(r"\1_\2", name.strip()).lower().replace("-", "_")
    if key.endswith("_case"):
        key = key[: -len("_case")]
    try:
        return Casing(key)
    except ValueError:
        return None


def with_casing(pair: Abbreviation, options: CasingOptions) -> list[Abbreviation]:
    """Return the pair itself followed by one variant per enabled transform.

    Spellings of the same casing count once; the last one given wins.
    """
    src, dst = pair
    out: list[Abbreviation] = [(src, dst)]
    for name, active in normalized_options(options).items():
        casing = resolve_casing(name)
        if not active or casing is None:
            continue
        transform = TRANSFORMS[casing]
        out.append((transform(src), transform(dst)))
    return out


def normalized_options(options: CasingOptions) -> dict[str, bool]:
    """Key options by Casing value; unknown names are kept verbatim."""
    out: dict[str, bool] = {}
    for k, v in options.items():
        casing = resolve_casing(k)
        out[casing.value if casing is not None else k] = bool(v)
    return out


def merged_options(
    defaults: Optional[CasingOptions] = None, overrides: Optional[CasingOptions] = None
) -> dict[str, bool]:
    """Return defaults merged with overrides; override keys win.

    Keys are normalized first, so "snake_case" in overrides replaces "snake"
    in defaults.
    """
    merged = normalized_options(DEFAULT_CASING_OPTIONS if defaults is None else defaults)
    if overrides:
        merged.update(normalized_options(overrides))
    return merged
