import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence
import numpy as np

from app.helpers.vocab import STOP_WORDS, DEFAULT_SKILLS, SKILL_SATURATION

# Keeps tokens such as "c++", "c#" and "node.js" intact
_NON_TOKEN = re.compile(r"[^a-z0-9+.#]+")

OVERLAP_WEIGHT = 0.50
COSINE_WEIGHT = 0.35
SKILL_WEIGHT = 0.15

MAX_EVIDENCE = 8
EVIDENCE_PER_SOURCE = 6


def tokenize(text: Optional[str]) -> List[str]:
    return _NON_TOKEN.sub(" ", (text or "").lower()).split()


def extract_keywords(tokens: Iterable[str], stop_words: frozenset = STOP_WORDS, min_length: int = 3) -> List[str]:
    return [t for t in tokens if len(t) >= min_length and t not in stop_words]


def build_bag(keywords: Iterable[str]) -> Dict[str, int]:
    return dict(Counter(keywords))


def matched_keywords(jd_keywords: Sequence[str], resume_keywords: Iterable[str]) -> List[str]:
    """JD keywords present in the resume, once each, in JD first-occurrence order."""
    resume_set = set(resume_keywords)
    return [k for k in dict.fromkeys(jd_keywords) if k in resume_set]


def overlap_ratio(jd_keywords: Iterable[str], resume_keywords: Iterable[str]) -> float:
    # directional: share of the JD's keywords the resume covers
    jd_set = set(jd_keywords)
    return len(jd_set & set(resume_keywords)) / max(1, len(jd_set))


def cosine_similarity(bag_a: Dict[str, int], bag_b: Dict[str, int]) -> float:
    vocab = sorted(set(bag_a) | set(bag_b))
    if not vocab:
        return 0.0
    va = np.array([bag_a.get(k, 0) for k in vocab], dtype=np.float64)
    vb = np.array([bag_b.get(k, 0) for k in vocab], dtype=np.float64)
    # an empty bag has norm 1 so the result is 0 rather than undefined
    den = float(np.linalg.norm(va) or 1.0) * float(np.linalg.norm(vb) or 1.0)
    return max(0.0, min(1.0, float(np.dot(va, vb)) / den))


def match_skills(
    resume_tokens: Iterable[str],
    resume_text: str = "",
    skills: Sequence[str] = DEFAULT_SKILLS,
    mode: str = "token",
) -> List[str]:
    """Skills from the dictionary found in a resume, in dictionary order.

    ``token`` mode tests exact membership in the token set, so entries holding
    a space or a slash ("github actions", "ci/cd") can never hit. ``text``
    mode tests substrings of the lower-cased raw text instead.
    """
    if mode == "text":
        lowered = (resume_text or "").lower()
        return [s for s in skills if s in lowered]
    token_set = set(resume_tokens)
    return [s for s in skills if s in token_set]


def skill_score(skill_hits: Sequence[str], saturation: int = SKILL_SATURATION) -> float:
    return min(1.0, len(skill_hits) / saturation)


def fuse_scores(overlap: float, cosine: float, skills: float) -> float:
    total = OVERLAP_WEIGHT * overlap + COSINE_WEIGHT * cosine + SKILL_WEIGHT * skills
    return max(0.0, min(1.0, total))


def build_evidence(keyword_hits: Sequence[str], skill_hits: Sequence[str]) -> List[str]:
    merged = list(keyword_hits[:EVIDENCE_PER_SOURCE]) + list(skill_hits[:EVIDENCE_PER_SOURCE])
    return list(dict.fromkeys(merged))[:MAX_EVIDENCE]
