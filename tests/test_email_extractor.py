# tests/test_email_extractor.py
# Email cascade: standard -> full-width @ -> (at)/(dot) -> contact lines.

import pytest

from app.logic.email_extractor import (
    EMAIL_STRATEGIES,
    extract_email,
    extract_email_with_strategy,
    looks_like_email,
)


def test_strategy_order_is_fixed():
    assert [name for name, _ in EMAIL_STRATEGIES] == [
        "standard",
        "fullwidth_at",
        "obfuscated",
        "contact_lines",
    ]


def test_standard_email_found():
    assert extract_email("Reach me at jane_doe+cv@mail.example.co.uk today.") == "jane_doe+cv@mail.example.co.uk"


def test_first_occurrence_wins():
    assert extract_email("a@first.com and b@second.com") == "a@first.com"


def test_fullwidth_at_rewritten():
    email, strategy = extract_email_with_strategy("Email: maria＠example.pt")
    assert email == "maria@example.pt"
    assert strategy == "fullwidth_at"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("jane (at) example (dot) com", "jane@example.com"),
        ("jane [at] example [dot] com", "jane@example.com"),
        ("JANE (AT) Example (DOT) Com", "JANE@Example.Com"),
        ("joe(at)mail(dot)example(dot)org", "joe@mail.example.org"),
    ],
)
def test_obfuscated_email_rewritten(text, expected):
    email, strategy = extract_email_with_strategy(text)
    assert email == expected
    assert strategy == "obfuscated"


def test_standard_beats_obfuscated():
    text = "Personal: jane (at) example (dot) com\nWork: jane.smith@corp.io"
    assert extract_email(text) == "jane.smith@corp.io"


def test_plain_words_are_not_an_email():
    assert extract_email("I worked at Acme dot com for two years") is None


def test_no_email_returns_none():
    assert extract_email("John Doe\nSoftware Engineer\nLisbon") is None
    assert extract_email("") is None


def test_looks_like_email():
    assert looks_like_email("a@b.co")
    assert not looks_like_email("a.b@com")
    assert not looks_like_email("no-at-sign.com")
    assert not looks_like_email("two words@x.com")
    assert not looks_like_email(None)
