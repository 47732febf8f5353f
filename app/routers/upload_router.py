# app/routers/upload_router.py
from fastapi import APIRouter, File, UploadFile, HTTPException
from typing import List, Dict, Any
import logging
import os

from app.logic.file_text import RESUME_EXTENSIONS
from app.logic.resume_parser import extract_contact_info, parse_resume_file
from app.schemas.contacts import ExtractTextRequest, ExtractionResponse

router = APIRouter()
logger = logging.getLogger("crmintake.upload")

ALLOWED_EXTS = set(RESUME_EXTENSIONS)
MAX_SIZE_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))  # 10MB
MAX_FILES_PER_BATCH = 50


def _ext(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


@router.post("/extract-text", response_model=ExtractionResponse)
async def extract_from_text(body: ExtractTextRequest):
    """
    Run the contact pipeline on text the client already recovered.
    """
    info = await extract_contact_info(body.text, ai_enabled=body.use_ai)
    return ExtractionResponse(contact=info)


@router.post("/extract-resume", response_model=ExtractionResponse)
async def extract_from_resume(file: UploadFile = File(...)):
    """
    Upload one resume (PDF/DOC/DOCX/TXT) and get the contact record back.
    """
    filename = file.filename or "unnamed"
    if _ext(filename) not in ALLOWED_EXTS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type. Allowed: {', '.join(sorted(ALLOWED_EXTS))}",
        )

    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(contents) > MAX_SIZE_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    info = await parse_resume_file(filename, contents)
    return ExtractionResponse(filename=filename, contact=info)


@router.post("/extract-resumes")
async def extract_from_resumes(files: List[UploadFile] = File(...)):
    """
    Batch variant: bad files are skipped and reported per reason instead of
    failing the whole request.
    """
    if not files:
        raise HTTPException(status_code=400, detail="At least one file is required")
    if len(files) > MAX_FILES_PER_BATCH:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_FILES_PER_BATCH} files allowed per upload")

    results: List[Dict[str, Any]] = []
    skipped_files: Dict[str, List[str]] = {
        "unsupported": [],
        "empty": [],
        "too_large": [],
    }

    for file in files:
        filename = file.filename or "unnamed"
        if _ext(filename) not in ALLOWED_EXTS:
            skipped_files["unsupported"].append(filename)
            continue

        contents = await file.read()
        if not contents:
            skipped_files["empty"].append(filename)
            continue
        if len(contents) > MAX_SIZE_BYTES:
            skipped_files["too_large"].append(filename)
            continue

        info = await parse_resume_file(filename, contents)
        results.append({"filename": filename, "contact": info.model_dump()})

    total_skipped = sum(len(v) for v in skipped_files.values())
    if total_skipped:
        logger.info(
            "batch_files_skipped",
            extra={k: len(v) for k, v in skipped_files.items()},
        )

    return {
        "ok": True,
        "received": len(files),
        "processed": len(results),
        "results": results,
        "skipped": {
            "total": total_skipped,
            "unsupported": len(skipped_files["unsupported"]),
            "empty": len(skipped_files["empty"]),
            "too_large": len(skipped_files["too_large"]),
            "filenames": skipped_files,
        },
    }
