import asyncio
from typing import List, Optional
from fastapi import APIRouter, File, Form, Request, UploadFile

from app.helpers.parsing import extract_text
from app.models.models import ResumeDocument
from app.models.response import ScoreResponse
from app.models.settings import load_settings
from app.services.screening import screen_resumes
from app.utils.exceptions import ValidationError
from app.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


async def _read_job_description(jd: Optional[str], jd_file: Optional[UploadFile]) -> Optional[str]:
    """Pasted text wins over an uploaded file. None means neither was supplied."""
    if jd:
        return jd
    if jd_file is not None and jd_file.filename:
        raw = await jd_file.read()
        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, extract_text, jd_file.filename, raw)
        if not text.strip():
            logger.warning(f"No text could be extracted from JD file {jd_file.filename!r}")
        return text
    return None


@router.post("/score", response_model=ScoreResponse)
async def score_resumes(
    request: Request,
    jd: Optional[str] = Form(None, description="Job description as pasted text"),
    jd_file: Optional[UploadFile] = File(None, description="Job description as a PDF, DOCX or TXT file"),
    resumes: Optional[List[UploadFile]] = File(None, description="One or more resumes (PDF, DOCX, TXT)"),
):
    """Rank uploaded resumes against a job description"""
    jd_text = await _read_job_description(jd, jd_file)
    uploads = [f for f in (resumes or []) if f is not None and f.filename]

    if jd_text is None:
        raise ValidationError("Missing job description: paste the text or upload a file", field="jd")
    if not uploads:
        raise ValidationError("Missing resumes: upload at least one file", field="resumes")

    docs = [ResumeDocument(filename=f.filename, raw_bytes=await f.read()) for f in uploads]
    settings = getattr(request.app.state, "settings", None) or load_settings()

    # Extraction and scoring are blocking; keep them off the event loop
    loop = asyncio.get_running_loop()
    results = await loop.run_in_executor(None, screen_resumes, jd_text, docs, settings)

    logger.info(f"Scored {len(results)} resume(s); top score {results[0].score:.3f}")
    return ScoreResponse(results=results)
