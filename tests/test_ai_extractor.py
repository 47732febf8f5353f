# tests/test_ai_extractor.py
# The model call itself is patched out; these cover prompt building, payload
# coercion and the "never raise" contract.

import asyncio
import json

import pytest

from app.logic import ai_extractor
from app.logic.ai_extractor import (
    USER_PROMPT_PREFIX,
    _json_coerce,
    build_messages,
    extract_via_ai,
    is_ai_extraction_enabled,
    parse_ai_payload,
)
from app.schemas.contacts import PartialContact


PAYLOAD = {
    "firstname": "John",
    "lastname": "Doe",
    "email": "john.doe@example.com",
    "phone": "+351 912 345 678",
    "skills": ["Python", " FastAPI ", ""],
    "experience": [
        {"company": "Acme", "position": "Engineer", "startDate": "2020-01", "endDate": "", "description": "APIs"},
        {"company": "", "position": ""},
        "garbage",
    ],
    "education": [{"institution": "IST", "degree": "MSc", "field": "CS", "graduationDate": "2019"}],
    "summary": "Backend engineer.",
}


def _fake_chat(content):
    def _chat_once(text):
        return content
    return _chat_once


# ----------------------------
# Configuration
# ----------------------------

def test_disabled_without_key():
    assert not is_ai_extraction_enabled()


def test_enabled_with_key(ai_key):
    assert is_ai_extraction_enabled()


def test_prompt_text_is_truncated(monkeypatch):
    monkeypatch.setenv("AI_EXTRACTION_MAX_CHARS", "10")
    messages = build_messages("x" * 50)
    assert messages[0]["role"] == "system"
    assert messages[1]["content"] == USER_PROMPT_PREFIX + "x" * 10


def test_default_truncation_is_8000_chars(monkeypatch):
    monkeypatch.delenv("AI_EXTRACTION_MAX_CHARS", raising=False)
    messages = build_messages("y" * 9000)
    assert messages[1]["content"].count("y") == 8000


# ----------------------------
# JSON recovery
# ----------------------------

def test_json_coerce_plain_and_fenced():
    assert _json_coerce('{"email": "a@b.co"}') == {"email": "a@b.co"}
    assert _json_coerce('```json\n{"email": "a@b.co"}\n```') == {"email": "a@b.co"}
    assert _json_coerce('Sure! {"email": "a@b.co"} hope it helps') == {"email": "a@b.co"}


@pytest.mark.parametrize("bad", ["", "not json at all", "[1, 2, 3]"])
def test_json_coerce_rejects_non_objects(bad):
    with pytest.raises(ValueError):
        _json_coerce(bad)


# ----------------------------
# Payload coercion
# ----------------------------

def test_parse_payload_maps_every_field():
    c = parse_ai_payload(PAYLOAD)
    assert (c.first_name, c.last_name) == ("John", "Doe")
    assert c.email == "john.doe@example.com"
    assert c.phone == "+351 912 345 678"
    assert c.skills == ["Python", "FastAPI"]
    assert len(c.experience) == 1
    assert c.experience[0].start_date == "2020-01"
    assert c.experience[0].end_date is None
    assert c.education[0].graduation_date == "2019"
    assert c.summary == "Backend engineer."


def test_parse_payload_tolerates_naming_drift():
    c = parse_ai_payload({
        "firstName": "Ana",
        "lastName": "Silva",
        "workExperience": [{"company": "Beta", "title": "Lead"}],
        "skills": "Go, Rust,  ",
    })
    assert (c.first_name, c.last_name) == ("Ana", "Silva")
    assert c.experience[0].position == "Lead"
    assert c.skills == ["Go", "Rust"]


def test_parse_payload_blank_values_become_none():
    c = parse_ai_payload({"firstname": "  ", "email": "", "phone": None, "summary": {}})
    assert c == PartialContact()


# ----------------------------
# extract_via_ai
# ----------------------------

def test_skipped_without_key(monkeypatch):
    def boom(text):
        raise AssertionError("model must not be called")
    monkeypatch.setattr(ai_extractor, "_chat_once", boom)
    assert asyncio.run(extract_via_ai("John Doe")) == PartialContact()


def test_empty_text_skipped(ai_key, monkeypatch):
    monkeypatch.setattr(ai_extractor, "_chat_once", _fake_chat("{}"))
    assert asyncio.run(extract_via_ai("   ")) == PartialContact()


def test_successful_call(ai_key, monkeypatch):
    monkeypatch.setattr(ai_extractor, "_chat_once", _fake_chat(json.dumps(PAYLOAD)))
    c = asyncio.run(extract_via_ai("John Doe resume"))
    assert c.email == "john.doe@example.com"
    assert c.skills == ["Python", "FastAPI"]


@pytest.mark.parametrize("content", ["", "I cannot help with that", "[]"])
def test_malformed_response_yields_empty(ai_key, monkeypatch, content):
    monkeypatch.setattr(ai_extractor, "_chat_once", _fake_chat(content))
    assert asyncio.run(extract_via_ai("John Doe")) == PartialContact()


def test_transport_error_yields_empty_and_logs(ai_key, monkeypatch, caplog):
    def down(text):
        raise ConnectionError("provider unreachable")
    monkeypatch.setattr(ai_extractor, "_chat_once", down)

    with caplog.at_level("WARNING", logger="crmintake.ai"):
        c = asyncio.run(extract_via_ai("John Doe"))

    assert c == PartialContact()
    assert any(r.getMessage() == "ai_extraction_failed" for r in caplog.records)
