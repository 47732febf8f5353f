# app/logic/customer_draft.py
"""
Turn an inbound email + its parsed resume into the customer record the CRM
would create. Missing names fall back to the pieces of the sender address
("jane.doe@x.com" -> "jane" / "doe").
"""
from email.utils import parseaddr
from typing import Iterable, Optional, Tuple, TypeVar

from app.logic.email_extractor import looks_like_email
from app.logic.file_text import is_resume_file
from app.schemas.contacts import CustomerDraft, ExtractedContactInfo

NOTES_BODY_LIMIT = 500

T = TypeVar("T")


def pick_resume_attachment(attachments: Iterable[Tuple[str, T]]) -> Optional[Tuple[str, T]]:
    """First (filename, payload) pair whose filename looks like a resume."""
    for filename, payload in attachments:
        if is_resume_file(filename):
            return filename, payload
    return None


def sender_address(sender: str) -> str:
    """'Jane Doe <jane@x.com>' -> 'jane@x.com'"""
    _, addr = parseaddr(sender or "")
    return (addr or sender or "").strip()


def _names_from_address(address: str) -> Tuple[Optional[str], Optional[str]]:
    local = address.split("@", 1)[0] if address else ""
    pieces = local.split(".")
    first = pieces[0] if pieces and pieces[0] else None
    last = pieces[1] if len(pieces) > 1 and pieces[1] else None
    return first, last


def _notes(subject: str, body: str) -> str:
    body = body or ""
    if len(body) > NOTES_BODY_LIMIT:
        body = body[:NOTES_BODY_LIMIT] + "..."
    return f"Created from email attachment.\nSubject: {subject or ''}\nBody: {body}"


def build_customer_draft(
    info: ExtractedContactInfo,
    sender: str,
    subject: str = "",
    body: str = "",
    filename: Optional[str] = None,
) -> CustomerDraft:
    address = sender_address(sender)
    fallback_first, fallback_last = _names_from_address(address)

    return CustomerDraft(
        first_name=info.first_name or fallback_first or "Unknown",
        last_name=info.last_name or fallback_last or "Customer",
        email=info.email or (address if looks_like_email(address) else None),
        phone=info.phone,
        status="lead",
        source=f"Email: {address or sender or 'unknown'}",
        notes=_notes(subject, body),
        resume_filename=filename,
        resume_data=info,
    )
