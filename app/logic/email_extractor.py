# app/logic/email_extractor.py
"""
Email address candidate extraction.

Strategies are tried in order and the first one that finds something wins.
Within a strategy the first occurrence in the text is taken. If nothing
matches we return None rather than guess.
"""
import re
from typing import Callable, List, Optional, Tuple

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# U+FF20 FULLWIDTH COMMERCIAL AT shows up in text pasted from CJK layouts
_FULLWIDTH_AT = "＠"
_FULLWIDTH_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+[@＠][A-Za-z0-9.-]+\.[A-Za-z]{2,}")

_AT_TOKEN = r"\s*[\[(]at[\])]\s*"
_DOT_TOKEN = r"\s*[\[(]dot[\])]\s*"
_OBFUSCATED_EMAIL_RE = re.compile(
    rf"[A-Za-z0-9._%+-]+{_AT_TOKEN}[A-Za-z0-9.-]+(?:{_DOT_TOKEN}[A-Za-z0-9-]+)*{_DOT_TOKEN}[A-Za-z]{{2,}}",
    re.IGNORECASE,
)
_AT_TOKEN_RE = re.compile(_AT_TOKEN, re.IGNORECASE)
_DOT_TOKEN_RE = re.compile(_DOT_TOKEN, re.IGNORECASE)

_CONTEXT_KEYWORDS = ("email", "e-mail", "mail", "contact")

# "local@domain.tld": no whitespace, at least one dot after the @
_EMAIL_SHAPE_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def looks_like_email(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(_EMAIL_SHAPE_RE.fullmatch(value.strip()))


def _standard(text: str) -> Optional[str]:
    m = EMAIL_RE.search(text)
    return m.group(0) if m else None


def _fullwidth_at(text: str) -> Optional[str]:
    m = _FULLWIDTH_EMAIL_RE.search(text)
    return m.group(0).replace(_FULLWIDTH_AT, "@") if m else None


def _obfuscated(text: str) -> Optional[str]:
    m = _OBFUSCATED_EMAIL_RE.search(text)
    if not m:
        return None
    email = _AT_TOKEN_RE.sub("@", m.group(0))
    return _DOT_TOKEN_RE.sub(".", email)


def _contact_lines(text: str) -> Optional[str]:
    for line in text.split("\n"):
        low = line.lower()
        if not any(k in low for k in _CONTEXT_KEYWORDS):
            continue
        found = _standard(line)
        if found:
            return found
    return None


EMAIL_STRATEGIES: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("standard", _standard),
    ("fullwidth_at", _fullwidth_at),
    ("obfuscated", _obfuscated),
    ("contact_lines", _contact_lines),
]


def extract_email_with_strategy(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (email, strategy_name); (None, None) when every strategy misses."""
    if not text:
        return None, None
    for name, strategy in EMAIL_STRATEGIES:
        found = strategy(text)
        if found:
            found = found.strip()
            if looks_like_email(found):
                return found, name
    return None, None


def extract_email(text: str) -> Optional[str]:
    return extract_email_with_strategy(text)[0]
