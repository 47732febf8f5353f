# app/logic/ai_extractor.py
from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Tuple

from fastapi.concurrency import run_in_threadpool
from openai import OpenAI

from app.schemas.contacts import EducationEntry, ExperienceEntry, PartialContact

logger = logging.getLogger("crmintake.ai")

DEFAULT_MODEL = "gpt-4o"

SYSTEM_PROMPT = """You are a specialized resume parser with expertise in extracting contact information, particularly COMPLETE email addresses and FULL international phone numbers.

Extract the following information from the resume:
- First name
- Last name
- Email address (complete, format username@domain.tld)
- Phone number (complete, with country code and all digits)
- Skills (as an array)
- Work experience (company, position, dates, description)
- Education (institution, degree, field, graduation date)
- Professional summary

EMAIL:
- Return the COMPLETE address; never truncate or abbreviate the username, domain or TLD
- Look near labels like "Email:", "E-mail:", "Contact:"
- Obfuscated forms such as "name (at) domain (dot) com" must be returned as a normal address
- If several addresses are present, pick the most professional one

PHONE:
- Return ALL digits; never truncate or omit digits
- Always include the country code (+351 Portugal, +44 UK, +1 US/Canada)
- Portugal: 00351 -> +351; add +351 to 9-digit numbers starting with 9
- UK: numbers starting with 0 -> +44 without the 0 (07123 456789 -> +44 7123 456789)
- US/Canada: add +1 to 10-digit numbers
- If several numbers are present, pick the most complete one with a country code

Respond with a single JSON object with these keys:
- firstname
- lastname
- email
- phone
- skills (array of strings)
- experience (array of objects: company, position, startDate, endDate, description)
- education (array of objects: institution, degree, field, graduationDate)
- summary

If you are not certain about a field, leave it empty rather than guessing."""

USER_PROMPT_PREFIX = (
    "Extract structured information from this resume text. Pay special attention to "
    "extracting the COMPLETE email address and FULL phone number with country code:\n\n"
)


def _max_input_chars() -> int:
    try:
        return max(1, int(os.getenv("AI_EXTRACTION_MAX_CHARS", "8000")))
    except ValueError:
        return 8000


def _timeout_seconds() -> float:
    try:
        return float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))
    except ValueError:
        return 30.0


def is_ai_extraction_enabled() -> bool:
    """AI extraction runs only when an API key is configured."""
    return bool(os.getenv("OPENAI_API_KEY", "").strip())


def _get_api_key_and_model() -> Tuple[str, str]:
    """
    Model picked via env:
      OPENAI_API_KEY    -> required
      OPENAI_MODEL      -> optional; defaults to gpt-4o
    """
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY is not set")
    return api_key, os.getenv("OPENAI_MODEL", DEFAULT_MODEL)


def build_messages(text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_PREFIX + (text or "")[: _max_input_chars()]},
    ]


def _chat_once(text: str) -> str:
    """
    One blocking chat completion. The client is built with max_retries=0:
    a failed call is reported, never repeated.
    """
    api_key, model = _get_api_key_and_model()
    client = OpenAI(api_key=api_key, timeout=_timeout_seconds(), max_retries=0)
    resp = client.chat.completions.create(
        model=model,
        messages=build_messages(text),
        response_format={"type": "json_object"},
        temperature=0.0,
    )
    return resp.choices[0].message.content or ""


def _json_coerce(s: str) -> Dict[str, Any]:
    """
    Parse the model's JSON.
    - strips code fences
    - extracts first {...} block if needed
    Raises ValueError when no JSON object can be recovered.
    """
    s = (s or "").strip()
    if not s:
        raise ValueError("empty model response")
    if s.startswith("```"):
        s = re.sub(r"^```(?:json)?", "", s, flags=re.IGNORECASE).strip()
        s = re.sub(r"```$", "", s).strip()

    try:
        data = json.loads(s)
    except json.JSONDecodeError:
        m = re.search(r"\{.*\}", s, flags=re.DOTALL)
        if not m:
            raise ValueError("model response is not JSON")
        data = json.loads(m.group(0))

    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


# ----------------------------
# Payload -> PartialContact
# ----------------------------

def _text(v: Any) -> str:
    if v is None or isinstance(v, (dict, list)):
        return ""
    return str(v).strip()


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    """First non-empty value among historically used spellings of a key."""
    for k in keys:
        v = data.get(k)
        if v not in (None, "", [], {}):
            return v
    return None


def _coerce_skills(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        return []
    return [s for s in (_text(x) for x in raw) if s]


def _coerce_experience(raw: Any) -> List[ExperienceEntry]:
    out: List[ExperienceEntry] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        entry = ExperienceEntry(
            company=_text(item.get("company")),
            position=_text(_first_present(item, "position", "title")),
            start_date=_text(_first_present(item, "startDate", "start_date")),
            end_date=_text(_first_present(item, "endDate", "end_date")) or None,
            description=_text(item.get("description")),
        )
        if entry.company or entry.position:
            out.append(entry)
    return out


def _coerce_education(raw: Any) -> List[EducationEntry]:
    out: List[EducationEntry] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        entry = EducationEntry(
            institution=_text(item.get("institution")),
            degree=_text(item.get("degree")),
            field=_text(item.get("field")),
            graduation_date=_text(_first_present(item, "graduationDate", "graduation_date")),
        )
        if entry.institution or entry.degree:
            out.append(entry)
    return out


def parse_ai_payload(data: Dict[str, Any]) -> PartialContact:
    """
    Translate the provider's JSON into a PartialContact. Tolerates the two
    spellings seen in the wild for names (firstname/firstName) and work
    history (experience/workExperience).
    """
    return PartialContact(
        first_name=_text(_first_present(data, "firstname", "firstName")),
        last_name=_text(_first_present(data, "lastname", "lastName")),
        email=_text(data.get("email")),
        phone=_text(data.get("phone")),
        skills=_coerce_skills(data.get("skills")),
        experience=_coerce_experience(_first_present(data, "experience", "workExperience")),
        education=_coerce_education(data.get("education")),
        summary=_text(data.get("summary")),
    )


async def extract_via_ai(text: str) -> PartialContact:
    """
    Ask the language model for a structured contact. Never raises: any
    transport, status or parsing failure is logged and yields an empty
    candidate.
    """
    if not text or not text.strip():
        return PartialContact()
    if not is_ai_extraction_enabled():
        logger.debug("ai_extraction_skipped", extra={"reason": "no_api_key"})
        return PartialContact()

    try:
        content = await run_in_threadpool(_chat_once, text)
        candidate = parse_ai_payload(_json_coerce(content))
    except Exception as e:
        logger.warning(
            "ai_extraction_failed",
            extra={"error_type": type(e).__name__, "error": str(e)[:300]},
        )
        return PartialContact()

    logger.info(
        "ai_extraction_done",
        extra={
            "has_email": bool(candidate.email),
            "has_phone": bool(candidate.phone),
            "skills": len(candidate.skills),
            "experience": len(candidate.experience),
        },
    )
    return candidate
