# tests/test_customer_draft.py

from app.logic.customer_draft import (
    NOTES_BODY_LIMIT,
    build_customer_draft,
    pick_resume_attachment,
    sender_address,
)
from app.schemas.contacts import ExtractedContactInfo


def test_pick_first_resume_attachment():
    attachments = [("logo.png", 1), ("CV.PDF", 2), ("cover.docx", 3)]
    assert pick_resume_attachment(attachments) == ("CV.PDF", 2)


def test_pick_none_when_no_resume():
    assert pick_resume_attachment([("logo.png", 1), ("data.zip", 2)]) is None
    assert pick_resume_attachment([]) is None


def test_sender_address():
    assert sender_address("Jane Doe <jane@x.com>") == "jane@x.com"
    assert sender_address("jane@x.com") == "jane@x.com"
    assert sender_address("") == ""


def test_resume_data_wins():
    info = ExtractedContactInfo(first_name="John", last_name="Doe", email="john@doe.com", phone="+351 912 345 678")
    draft = build_customer_draft(info, sender="HR Bot <hr@agency.com>", subject="CV", body="see attached", filename="cv.pdf")
    assert (draft.first_name, draft.last_name) == ("John", "Doe")
    assert draft.email == "john@doe.com"
    assert draft.phone == "+351 912 345 678"
    assert draft.status == "lead"
    assert draft.source == "Email: hr@agency.com"
    assert draft.resume_filename == "cv.pdf"
    assert draft.resume_data == info


def test_sender_address_fills_gaps():
    draft = build_customer_draft(ExtractedContactInfo(), sender="jane.doe@mail.com")
    assert (draft.first_name, draft.last_name) == ("jane", "doe")
    assert draft.email == "jane.doe@mail.com"


def test_placeholder_names_when_nothing_known():
    draft = build_customer_draft(ExtractedContactInfo(), sender="bob@mail.com")
    assert (draft.first_name, draft.last_name) == ("bob", "Customer")

    draft = build_customer_draft(ExtractedContactInfo(), sender="")
    assert (draft.first_name, draft.last_name) == ("Unknown", "Customer")
    assert draft.email is None
    assert draft.source == "Email: unknown"


def test_notes_carry_subject_and_truncated_body():
    body = "a" * (NOTES_BODY_LIMIT + 100)
    draft = build_customer_draft(ExtractedContactInfo(), sender="x@y.com", subject="Application", body=body)
    assert draft.notes.startswith("Created from email attachment.\nSubject: Application\nBody: ")
    assert draft.notes.endswith("a" * NOTES_BODY_LIMIT + "...")


def test_short_body_not_truncated():
    draft = build_customer_draft(ExtractedContactInfo(), sender="x@y.com", body="hello")
    assert draft.notes.endswith("Body: hello")
