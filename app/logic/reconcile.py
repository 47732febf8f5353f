# app/logic/reconcile.py
"""
Merge the regex candidate and the AI candidate into the final record.

Precedence per field:
  - names: AI, then regex
  - email: regex if well-formed, then AI if well-formed
  - phone: whichever carries a country code (regex first), else the one
    with more digits (ties go to regex)
  - skills / experience / education / summary: AI only in practice, regex
    as a fallback
"""
from typing import Optional

from app.logic.email_extractor import looks_like_email
from app.logic.phone_format import digit_count, format_phone, normalize_phone
from app.schemas.contacts import ExtractedContactInfo, PartialContact


def _pick_text(preferred: Optional[str], fallback: Optional[str]) -> Optional[str]:
    return preferred or fallback or None


def pick_email(regex_email: Optional[str], ai_email: Optional[str]) -> Optional[str]:
    for candidate in (regex_email, ai_email):
        if looks_like_email(candidate):
            return candidate.strip()
    return None


def pick_phone(regex_phone: Optional[str], ai_phone: Optional[str]) -> Optional[str]:
    regex_phone = (regex_phone or "").strip()
    ai_normalized = normalize_phone(ai_phone or "")

    if regex_phone.startswith("+") and digit_count(regex_phone):
        # already normalized + formatted upstream; doing it again is a no-op
        return format_phone(normalize_phone(regex_phone))
    if ai_normalized.startswith("+"):
        return format_phone(ai_normalized)

    regex_digits = digit_count(regex_phone)
    ai_digits = digit_count(ai_normalized)
    if not regex_digits and not ai_digits:
        return None
    if regex_digits >= ai_digits:
        return regex_phone
    return format_phone(ai_normalized)


def merge(regex: Optional[PartialContact], ai: Optional[PartialContact]) -> ExtractedContactInfo:
    regex = regex or PartialContact()
    ai = ai or PartialContact()
    return ExtractedContactInfo(
        first_name=_pick_text(ai.first_name, regex.first_name),
        last_name=_pick_text(ai.last_name, regex.last_name),
        email=pick_email(regex.email, ai.email),
        phone=pick_phone(regex.phone, ai.phone),
        skills=list(ai.skills or regex.skills),
        experience=list(ai.experience or regex.experience),
        education=list(ai.education or regex.education),
        summary=_pick_text(ai.summary, regex.summary),
    )
