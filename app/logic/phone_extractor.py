# app/logic/phone_extractor.py
"""
Phone number candidate extraction.

Patterns go from most to least specific. Each is tried on the whole text,
then on lines that look like contact lines, then we fall back to raw digit
runs. The result is the raw matched text (trimmed); normalization happens
in app.logic.phone_format.
"""
import re
from typing import List, Optional, Pattern, Tuple

# Every pattern refuses to start or end in the middle of a longer digit run,
# so e.g. the "00" inside "2008-2012" is not read as an international prefix
# and a 10-digit number is never cut down to a 9-digit one. Separators are
# horizontal only: a number never continues onto the next line.
_NO_DIGIT_BEFORE = r"(?<!\d)"
_NO_DIGIT_AFTER = r"(?!\d)"
_SEP = r"[ \t\-.]?"
_SEP_NO_DOT = r"[ \t\-]?"

INTL_PHONE_RE = re.compile(
    _NO_DIGIT_BEFORE + r"(?:\+|00)[0-9]{1,4}" + _SEP + r"(?:\(?\d+\)?" + _SEP + r"){1,5}" + _NO_DIGIT_AFTER
)
PT_PHONE_RE = re.compile(
    _NO_DIGIT_BEFORE + r"(?:\+351|00351)?" + _SEP + r"[923](?:\d" + _SEP + r"){7}\d" + _NO_DIGIT_AFTER
)
UK_PHONE_RE = re.compile(
    _NO_DIGIT_BEFORE + r"(?:\+44|0044|0)" + _SEP_NO_DOT + r"(?:\d{2,5}|\(\d{2,5}\))"
    + _SEP_NO_DOT + r"\d{3,4}" + _SEP_NO_DOT + r"\d{3,4}" + _NO_DIGIT_AFTER
)
US_PHONE_RE = re.compile(
    _NO_DIGIT_BEFORE + r"(?:\+1|1)?" + _SEP + r"\(?\d{3}\)?" + _SEP + r"\d{3}" + _SEP + r"\d{4}" + _NO_DIGIT_AFTER
)
GENERIC_PHONE_RE = re.compile(_NO_DIGIT_BEFORE + r"(?:\d" + _SEP + r"){10,15}" + _NO_DIGIT_AFTER)

PHONE_PATTERNS: List[Tuple[str, Pattern]] = [
    ("international", INTL_PHONE_RE),
    ("portugal", PT_PHONE_RE),
    ("uk", UK_PHONE_RE),
    ("us_canada", US_PHONE_RE),
    ("generic", GENERIC_PHONE_RE),
]

_PT_MOBILE_RE = re.compile(r"\b9\d{8}\b")
_CONTEXT_KEYWORDS = ("mobile", "phone", "tel", "contact")
_MIN_LINE_DIGITS = 9

# shortest digit count we accept from a pattern match
MIN_CANDIDATE_DIGITS = 7

_TRIM_CHARS = " \t\r\n-."


def _digits(s: str) -> int:
    return sum(ch.isdigit() for ch in s)


def _first_match(text: str) -> Tuple[Optional[str], Optional[str]]:
    for name, pattern in PHONE_PATTERNS:
        for m in pattern.finditer(text):
            candidate = m.group(0).strip(_TRIM_CHARS)
            if _digits(candidate) >= MIN_CANDIDATE_DIGITS:
                return candidate, name
    return None, None


def _contact_lines(text: str) -> List[str]:
    return [ln for ln in text.split("\n") if any(k in ln.lower() for k in _CONTEXT_KEYWORDS)]


def extract_phone_with_strategy(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (raw_phone, strategy_name); (None, None) when nothing fits."""
    if not text:
        return None, None

    found, name = _first_match(text)
    if found:
        return found, name

    lines = _contact_lines(text)
    for line in lines:
        found, name = _first_match(line)
        if found:
            return found, f"{name}_line"

    for line in lines:
        digits = re.sub(r"[^\d+]", "", line)
        if _digits(digits) >= _MIN_LINE_DIGITS:
            return digits, "line_digits"

    m = _PT_MOBILE_RE.search(text)
    if m:
        return "+351 " + m.group(0), "pt_mobile"

    return None, None


def extract_phone(text: str) -> Optional[str]:
    return extract_phone_with_strategy(text)[0]
