# app/routers/email_router.py
"""
Inbound email intake (SendGrid inbound-parse style multipart webhook).

Fields used: from, to, subject, text, envelope (JSON with from/to) and any
number of file parts (attachment1..N). The first resume attachment is parsed
and a customer draft is returned; nothing is stored here.
"""
import json
import logging
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, HTTPException, Request
from starlette.datastructures import UploadFile

from app.logic.customer_draft import build_customer_draft, pick_resume_attachment
from app.logic.resume_parser import parse_resume_file
from app.schemas.contacts import InboundEmailResponse

router = APIRouter()
logger = logging.getLogger("crmintake.email")


def _parse_envelope(raw: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("envelope_not_json")
        return {}
    return data if isinstance(data, dict) else {}


def _field(form, name: str) -> str:
    v = form.get(name)
    return v if isinstance(v, str) else ""


@router.post("/inbound", response_model=InboundEmailResponse)
async def inbound_email(request: Request):
    form = await request.form()

    envelope = _parse_envelope(_field(form, "envelope"))
    to_list = envelope.get("to") or []
    sender = envelope.get("from") or _field(form, "from")
    recipient = (to_list[0] if isinstance(to_list, list) and to_list else "") or _field(form, "to")
    subject = _field(form, "subject")
    body = _field(form, "text")

    attachments: List[Tuple[str, UploadFile]] = [
        (value.filename or "", value)
        for _, value in form.multi_items()
        if isinstance(value, UploadFile) and value.filename
    ]
    logger.info(
        "inbound_email_received",
        extra={"attachments": len(attachments), "has_recipient": bool(recipient)},
    )
    if not attachments:
        raise HTTPException(status_code=400, detail="No attachments found")

    picked = pick_resume_attachment(attachments)
    if not picked:
        raise HTTPException(status_code=400, detail="No supported resume attachment found")
    filename, upload = picked

    content = await upload.read()
    info = await parse_resume_file(filename, content)
    draft = build_customer_draft(info, sender=sender, subject=subject, body=body, filename=filename)
    return InboundEmailResponse(attachment=filename, customer=draft)
