"""
Resume screening pipeline: one job description against a batch of resumes.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from app.helpers.parsing import extract_text
from app.helpers.vocab import STOP_WORDS, DEFAULT_SKILLS
from app.models.models import JobProfile, ResumeDocument, ScoreResult
from app.models.settings import ScreeningSettings, load_settings
from app.services.extractors import estimate_experience, detect_education, locate_snippet
from app.services.matching import (
    tokenize, extract_keywords, build_bag, matched_keywords, overlap_ratio,
    cosine_similarity, match_skills, skill_score, fuse_scores, build_evidence,
)
from app.utils.exceptions import ValidationError, ExceptionContext
from app.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)

SCANNED_PDF_NOTE = (
    "Very little text could be extracted. This looks like a scanned or image-only PDF; "
    "export a text-based PDF or run OCR for an accurate score."
)
LOW_TEXT_NOTE = "Very little text could be extracted from this file, so the score may be unreliable."


def build_job_profile(jd_text: Optional[str], settings: ScreeningSettings) -> JobProfile:
    tokens = tokenize(jd_text)
    keywords = extract_keywords(tokens, STOP_WORDS, settings.min_keyword_length)
    return JobProfile(
        text=jd_text or "",
        tokens=tuple(tokens),
        keywords=tuple(keywords),
        bag=build_bag(keywords),
    )


def diagnostic_note(filename: str, char_count: int, threshold: int = 80) -> Optional[str]:
    if char_count >= threshold:
        return None
    if (filename or "").lower().endswith(".pdf"):
        return SCANNED_PDF_NOTE
    return LOW_TEXT_NOTE


def score_resume(job: JobProfile, filename: str, text: str, settings: ScreeningSettings) -> ScoreResult:
    text = text or ""
    tokens = tokenize(text)
    keywords = extract_keywords(tokens, STOP_WORDS, settings.min_keyword_length)

    keyword_hits = matched_keywords(job.keywords, keywords)
    skill_hits = match_skills(tokens, text, DEFAULT_SKILLS, settings.skill_match_mode)

    overlap = overlap_ratio(job.keyword_set, keywords)
    cosine = cosine_similarity(job.bag, build_bag(keywords))
    skills = skill_score(skill_hits)
    score = fuse_scores(overlap, cosine, skills)

    logger.debug(
        f"{filename}: overlap={overlap:.3f} cosine={cosine:.3f} skills={skills:.3f} -> {score:.3f}"
    )

    return ScoreResult(
        filename=filename,
        score=score,
        evidence=build_evidence(keyword_hits, skill_hits),
        experience=estimate_experience(text),
        education=detect_education(text),
        snippet=locate_snippet(
            text,
            job.keywords,
            before=settings.snippet_before,
            after=settings.snippet_after,
            fallback_length=settings.fallback_snippet_length,
        ),
        note=diagnostic_note(filename, len(text), settings.low_text_threshold),
        char_count=len(text),
    )


def screen_resume(job: JobProfile, resume: ResumeDocument, settings: ScreeningSettings) -> ScoreResult:
    # extract_text never raises; an unreadable file is scored on empty text
    text = extract_text(resume.filename, resume.raw_bytes)
    with ExceptionContext("scoring resume", logger, document=resume.filename):
        return score_resume(job, resume.filename, text, settings)


def rank_results(results: Sequence[ScoreResult]) -> List[ScoreResult]:
    # sorted() is stable, so equal scores keep submission order
    return sorted(results, key=lambda r: r.score, reverse=True)


def screen_resumes(
    jd_text: Optional[str],
    resumes: Sequence[ResumeDocument],
    settings: Optional[ScreeningSettings] = None,
) -> List[ScoreResult]:
    """
    Score every resume against one job description and rank them.

    ``jd_text`` of None means no job description was supplied at all; an
    empty string (e.g. a JD file nothing could be read from) is scored as is.
    """
    if jd_text is None:
        raise ValidationError("Missing job description", field="jd")
    if not resumes:
        raise ValidationError("Missing resumes", field="resumes")

    settings = settings or load_settings()
    job = build_job_profile(jd_text, settings)
    logger.info(f"Screening {len(resumes)} resume(s) against {len(job.keywords)} JD keywords")

    with PerformanceMonitor(f"screening {len(resumes)} resume(s)", logger, threshold_ms=10000):
        workers = min(settings.max_workers, len(resumes))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(lambda r: screen_resume(job, r, settings), resumes))
        else:
            results = [screen_resume(job, r, settings) for r in resumes]

    return rank_results(results)
