"""Class names and the spelling of student names."""

from __future__ import annotations

import re
from collections.abc import Iterable

FALLBACK_CLASS = (9, "Z")

_INTEGER = re.compile(r"[+-]?\d+")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


def sort_classnames(class_names: Iterable[str]) -> list[str]:
    """Class names ordered by length first and alphabetically among equal lengths."""
    return sorted(class_names, key=lambda name: (len(name), name))


def _to_int(text: str) -> int:
    text = text.strip()
    if not _INTEGER.fullmatch(text):
        return 0
    value = int(text)
    return value if _INT_MIN <= value <= _INT_MAX else 0


def parse_class_name(class_name: str) -> tuple[int, str]:
    """Split a name such as "9-A" into its grade and section.

    A name without a dash yields the fallback class 9-Z; a grade that is
    not a number reads as 0.
    """
    tokens = class_name.split("-")
    if len(tokens) < 2:
        return FALLBACK_CLASS
    return _to_int(tokens[0]), tokens[1]


def turkish_upper(text: str) -> str:
    """Upper-case with Turkish rules (i becomes İ, ı becomes I), trimming the ends."""
    return text.strip().replace("i", "İ").upper()


def turkish_lower(text: str) -> str:
    """Lower-case with Turkish rules (I becomes ı, İ becomes i), trimming the ends."""
    return text.strip().replace("I", "ı").replace("İ", "i").lower()


def format_first_name(raw: str) -> str:
    """Collapse whitespace and capitalise every word with Turkish rules."""
    words = " ".join(turkish_lower(raw).split()).split(" ")
    return " ".join(turkish_upper(word[0])[:1] + word[1:] if word else word for word in words)


def format_last_name(raw: str) -> str:
    """A last name is written entirely in capitals."""
    return turkish_upper(raw)