# app/logic/text_normalizer.py
"""
Cleanup for text recovered from uploaded documents.

When a PDF can't be read properly we end up with the raw bytes decoded as
text: a `%PDF-1.x` preamble, compressed `stream ... endstream` payloads and
`obj ... endobj` dictionaries. None of that is resume content, and left alone
it feeds the phone/email regexes a lot of digit soup.
"""
import re

_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n\r\t]")
_PDF_HEADER_RE = re.compile(r"%PDF[\s\S]*?(?=\w{3,})")
_STREAM_BLOCK_RE = re.compile(r"stream[\s\S]*?endstream")
_OBJ_BLOCK_RE = re.compile(r"obj[\s\S]*?endobj")
_WHITESPACE_RE = re.compile(r"\s+")

_ARTIFACT_MARKERS = ("%PDF", "endstream", "endobj")


def has_document_artifacts(text: str) -> bool:
    if not text:
        return False
    return any(marker in text for marker in _ARTIFACT_MARKERS)


def _clean_once(text: str) -> str:
    t = _NON_PRINTABLE_RE.sub(" ", text)
    t = _PDF_HEADER_RE.sub("", t)
    t = _STREAM_BLOCK_RE.sub("", t)
    t = _OBJ_BLOCK_RE.sub("", t)
    t = _WHITESPACE_RE.sub(" ", t)
    return t.strip()


def normalize(raw: str) -> str:
    """
    Strip non-printable characters and PDF structure noise, collapse
    whitespace to single spaces and trim.

    Removing one block can splice its neighbours into a new marker, so the
    passes repeat until nothing changes. Never raises.
    """
    if not raw or not isinstance(raw, str):
        return ""
    text = raw
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
