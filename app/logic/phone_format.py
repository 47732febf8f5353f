# app/logic/phone_format.py
"""
Phone normalization (raw -> "+<country><number>") and display formatting.

Country handling covers Portugal, UK and US/Canada. Anything else keeps its
bare digits.
Neither step ever drops a digit.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_NOT_PHONE_CHARS_RE = re.compile(r"[^0-9+]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")


def clean_phone(raw: str) -> str:
    """Keep digits plus a single leading '+'."""
    if not raw:
        return ""
    cleaned = _NOT_PHONE_CHARS_RE.sub("", raw)
    if cleaned.startswith("+"):
        return "+" + cleaned[1:].replace("+", "")
    return cleaned.replace("+", "")


def digit_count(value: Optional[str]) -> int:
    return len(_NON_DIGIT_RE.sub("", value or ""))


def normalize_phone(raw: str) -> str:
    cleaned = clean_phone(raw)
    if not digit_count(cleaned):
        return ""

    if cleaned.startswith("+"):
        return cleaned

    # Portugal
    if cleaned.startswith("00351"):
        return "+" + cleaned[2:]
    # a 9-digit number that happens to start with 351 is a local PT number,
    # handled by the next rule
    if cleaned.startswith("351") and len(cleaned) > 9:
        return "+" + cleaned
    if len(cleaned) == 9 and cleaned[0] in "923":
        return "+351" + cleaned

    # UK: trunk prefix 0 (mobile 07... and landlines alike)
    if cleaned.startswith("0") and not cleaned.startswith("00") and len(cleaned) in (10, 11):
        return "+44" + cleaned[1:]

    # US / Canada
    if len(cleaned) == 10 and cleaned[0] in "23456789":
        return "+1" + cleaned

    return cleaned


def format_phone(normalized: str) -> str:
    if not normalized or not normalized.startswith("+"):
        return normalized or ""

    cleaned = clean_phone(normalized)

    if cleaned.startswith("+351"):
        rest = cleaned[4:]
        if len(rest) == 9:
            return f"+351 {rest[:3]} {rest[3:6]} {rest[6:]}"
    elif cleaned.startswith("+44"):
        rest = cleaned[3:]
        if len(rest) == 10:
            return f"+44 {rest[:4]} {rest[4:]}"
    elif cleaned.startswith("+1"):
        rest = cleaned[2:]
        if len(rest) == 10:
            return f"+1 ({rest[:3]}) {rest[3:6]}-{rest[6:]}"

    return normalized


@dataclass(frozen=True)
class PhoneCandidate:
    raw: str
    normalized: str
    formatted: str

    @classmethod
    def from_raw(cls, raw: str) -> "PhoneCandidate":
        normalized = normalize_phone(raw)
        return cls(raw=raw, normalized=normalized, formatted=format_phone(normalized))

    @property
    def has_country_code(self) -> bool:
        return self.normalized.startswith("+")
