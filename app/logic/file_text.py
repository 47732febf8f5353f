# app/logic/file_text.py
"""
Best-effort text recovery from uploaded resume files (PDF/DOCX/DOC/TXT).

Every helper here returns "" instead of raising. Text that comes out noisy
(e.g. raw PDF bytes) is cleaned later by app.logic.text_normalizer.
"""
import io
import logging
import os
import re
import tempfile
import zipfile
from typing import List
from xml.etree import ElementTree as ET

import docx2txt
import fitz  # PyMuPDF
from pypdf import PdfReader

logger = logging.getLogger("crmintake.extraction")

RESUME_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt")

_W_NS = {"w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main"}


def is_resume_file(filename: str) -> bool:
    return (filename or "").lower().endswith(RESUME_EXTENSIONS)


def _safe_join(parts: List[str]) -> str:
    return "\n".join([p for p in parts if isinstance(p, str) and p])


def _has_text(s: str) -> bool:
    return bool(s and s.strip())


# ----------------------------
# PDF
# ----------------------------
def _pdf_text_pypdf(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        pages: List[str] = []
        for page in reader.pages:
            try:
                pages.append(page.extract_text() or "")
            except Exception:
                continue
        return _safe_join(pages)
    except Exception:
        return ""


def _pdf_text_pymupdf(content: bytes) -> str:
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except Exception:
        return ""
    try:
        return _safe_join([page.get_text("text") or "" for page in doc])
    except Exception:
        return ""
    finally:
        doc.close()


def _raw_bytes_as_text(content: bytes) -> str:
    # last resort: whatever readable text sits in the raw bytes, PDF
    # structure included
    return content.decode("latin-1", errors="ignore")


def extract_text_from_pdf(content: bytes) -> str:
    """pypdf first, PyMuPDF if that comes back blank, raw bytes last."""
    text = _pdf_text_pypdf(content)
    if _has_text(text):
        return text
    text = _pdf_text_pymupdf(content)
    if _has_text(text):
        return text
    logger.info("pdf_text_fallback_raw", extra={"size": len(content)})
    return _raw_bytes_as_text(content)


# ----------------------------
# DOCX / DOC / TXT
# ----------------------------
def _docx_text_via_zip(content: bytes) -> str:
    """Collect the <w:t> runs of word/document.xml, one paragraph per line."""
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as zf:
            xml_bytes = zf.read("word/document.xml")
        root = ET.fromstring(xml_bytes)
    except Exception:
        return ""
    lines: List[str] = []
    for para in root.iter(f"{{{_W_NS['w']}}}p"):
        runs = [t.text for t in para.findall(".//w:t", _W_NS) if t.text]
        if runs:
            lines.append("".join(runs))
    return "\n".join(lines)


def extract_text_from_docx(content: bytes) -> str:
    # docx2txt wants a path, not a file-like object
    try:
        with tempfile.NamedTemporaryFile(suffix=".docx", delete=False) as tmp:
            tmp.write(content)
            tmp_path = tmp.name
        try:
            text = docx2txt.process(tmp_path) or ""
        finally:
            os.unlink(tmp_path)
        if _has_text(text):
            return text
    except Exception:
        pass

    text = _docx_text_via_zip(content)
    if _has_text(text):
        return text
    return content.decode("utf-8", errors="ignore")


def extract_text_from_doc_legacy(content: bytes) -> str:
    """
    Legacy .doc is a binary OLE container; keep the readable runs.
    """
    raw = content.decode("latin-1", errors="ignore")
    raw = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F]", " ", raw)
    pieces = re.findall(r"[A-Za-z0-9@#\+\-_/.,:;()&% \n]{3,}", raw)
    text = " ".join(pieces)
    text = re.sub(r"[ \t]{2,}", " ", text)
    return text.strip()


def extract_text_from_txt(content: bytes) -> str:
    return content.decode("utf-8", errors="ignore")


def extract_text(filename: str, content: bytes) -> str:
    """
    Dispatch on the file extension. Never lets exceptions bubble up.
    """
    if not content:
        return ""
    lower = (filename or "").lower()
    try:
        if lower.endswith(".pdf"):
            return extract_text_from_pdf(content)
        if lower.endswith(".docx"):
            return extract_text_from_docx(content)
        if lower.endswith(".doc"):
            return extract_text_from_doc_legacy(content)
        if lower.endswith(".txt"):
            return extract_text_from_txt(content)
        # unknown: try docx first, then legacy
        text = _docx_text_via_zip(content)
        return text if _has_text(text) else extract_text_from_doc_legacy(content)
    except Exception:
        logger.exception("text_extraction_failed", extra={"ext": os.path.splitext(lower)[1]})
        return ""
