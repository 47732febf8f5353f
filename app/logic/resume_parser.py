# app/logic/resume_parser.py
"""
Resume -> contact record.

    raw text
      -> text_normalizer   (only when PDF structure leaked into the text)
      -> email / phone / name heuristics   (sync, run to completion first)
      -> ai_extractor                      (one awaited call, when configured)
      -> reconcile.merge
      -> ExtractedContactInfo

Nothing in here raises: the worst outcome is a record with every field empty.
"""
import logging
from typing import Optional

from app.logic.ai_extractor import extract_via_ai, is_ai_extraction_enabled
from app.logic.email_extractor import extract_email_with_strategy
from app.logic.file_text import extract_text
from app.logic.name_heuristic import guess_name
from app.logic.phone_extractor import extract_phone_with_strategy
from app.logic.phone_format import PhoneCandidate
from app.logic.reconcile import merge
from app.logic.text_normalizer import has_document_artifacts, normalize
from app.schemas.contacts import ExtractedContactInfo, PartialContact

logger = logging.getLogger("crmintake.extraction")


def prepare_text(raw_text: str) -> str:
    """
    Clean text only when it carries document artifacts. Normalization
    flattens newlines, and the name/contact-line heuristics need them.
    """
    if not raw_text:
        return ""
    if has_document_artifacts(raw_text):
        return normalize(raw_text)
    return raw_text


def extract_regex_candidate(text: str) -> PartialContact:
    email, email_strategy = extract_email_with_strategy(text)
    raw_phone, phone_strategy = extract_phone_with_strategy(text)
    phone = PhoneCandidate.from_raw(raw_phone).formatted if raw_phone else None
    name = guess_name(text)

    logger.debug(
        "regex_candidate",
        extra={
            "email_strategy": email_strategy,
            "phone_strategy": phone_strategy,
            "has_name": bool(name.first),
        },
    )
    return PartialContact(
        first_name=name.first,
        last_name=name.last,
        email=email,
        phone=phone,
    )


async def extract_contact_info(raw_text: str, ai_enabled: Optional[bool] = None) -> ExtractedContactInfo:
    """
    Full pipeline. `ai_enabled=None` means "use the model if an API key is
    configured"; False forces regex-only.
    """
    text = raw_text or ""
    try:
        text = prepare_text(text)
        regex_candidate = extract_regex_candidate(text)
    except Exception:
        logger.exception("regex_extraction_failed")
        regex_candidate = PartialContact()

    if ai_enabled is None:
        ai_enabled = is_ai_extraction_enabled()

    ai_candidate = PartialContact()
    if ai_enabled and text.strip():
        try:
            ai_candidate = await extract_via_ai(text)
        except Exception:
            logger.exception("ai_extraction_crashed")
            ai_candidate = PartialContact()

    try:
        info = merge(regex_candidate, ai_candidate)
    except Exception:
        logger.exception("reconciliation_failed")
        return ExtractedContactInfo()

    logger.info(
        "contact_extracted",
        extra={
            "text_len": len(text),
            "ai_used": ai_candidate.has_any(),
            "has_email": bool(info.email),
            "has_phone": bool(info.phone),
        },
    )
    return info


async def parse_resume_file(filename: str, content: bytes, ai_enabled: Optional[bool] = None) -> ExtractedContactInfo:
    """
    Never lets exceptions bubble up. If text recovery fails the pipeline
    runs on "" and the caller gets an empty record.
    """
    text = extract_text(filename, content)
    return await extract_contact_info(text, ai_enabled=ai_enabled)
