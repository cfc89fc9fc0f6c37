"""
Heuristic metadata pulled straight from raw resume text.

These are substring and regex heuristics for English resumes. They can
over- or under-match; each one is a pure function so its behaviour is easy
to pin down in tests.
"""
import re
from typing import Optional, Sequence, Tuple

from app.models.models import Education, NO_MATCH

_EXPERIENCE = re.compile(r"(\d+)(\+)?\s*(?:years|yrs)", re.IGNORECASE)

# Checked in order; the first tier with any marker present wins
EDUCATION_TIERS: Tuple[Tuple[Education, Tuple[str, ...]], ...] = (
    (Education.PHD, ("phd", "doctor of philosophy")),
    (Education.MASTERS, ("master of", "msc", "m.s.", "m.tech", "mtech")),
    (Education.BACHELORS, ("bachelor of", "bsc", "b.e.", "b.tech", "btech")),
)

ELLIPSIS = "..."


def estimate_experience(text: Optional[str]) -> str:
    """Return the first duration phrase such as "5+ years", or NO_MATCH."""
    m = _EXPERIENCE.search(text or "")
    return m.group(0) if m else NO_MATCH


def detect_education(text: Optional[str]) -> Education:
    lowered = (text or "").lower()
    for level, markers in EDUCATION_TIERS:
        if any(marker in lowered for marker in markers):
            return level
    return Education.UNKNOWN


def locate_snippet(
    text: Optional[str],
    jd_keywords: Sequence[str],
    before: int = 80,
    after: int = 120,
    fallback_length: int = 200,
) -> str:
    """
    Excerpt of the resume around the first JD keyword it mentions.

    Keywords are tried in JD order, not in the order they appear in the
    resume. The window is cut from the original-case text and ends with an
    ellipsis when it stops short of the end. Without any hit the opening
    ``fallback_length`` characters are returned.
    """
    text = text or ""
    # Lower-case per character, keeping those whose lower form is longer (e.g. "İ"),
    # so offsets in the search copy line up with the original text
    lowered = "".join(c if len(c.lower()) != 1 else c.lower() for c in text)

    for keyword in jd_keywords:
        pos = lowered.find(keyword)
        if pos != -1:
            start = max(0, pos - before)
            end = min(len(text), pos + after)
            return text[start:end] + (ELLIPSIS if end < len(text) else "")

    return text[:fallback_length] + (ELLIPSIS if len(text) > fallback_length else "")
