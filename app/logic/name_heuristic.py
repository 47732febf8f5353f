# app/logic/name_heuristic.py
from typing import NamedTuple, Optional


class NameGuess(NamedTuple):
    first: Optional[str] = None
    last: Optional[str] = None


def guess_name(text: str) -> NameGuess:
    """
    Resumes almost always open with the candidate's name, so read it off the
    first non-empty line: first token -> first name, last token -> last name.
    Middle names are dropped.
    """
    if not text:
        return NameGuess()
    lines = [ln.strip() for ln in text.split("\n") if ln.strip()]
    if not lines:
        return NameGuess()
    parts = lines[0].split()
    if len(parts) >= 2:
        return NameGuess(parts[0], parts[-1])
    return NameGuess(parts[0], None)
