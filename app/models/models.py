from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Tuple
from enum import Enum

# Shown when an extractor finds nothing in the resume text
NO_MATCH = "unknown"


class Education(str, Enum):
    """Highest education tier detected in a resume"""
    PHD = "PhD"
    MASTERS = "Master's"
    BACHELORS = "Bachelor's"
    UNKNOWN = NO_MATCH


class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    PLAIN = "plain"


class ExtractionResult(BaseModel):
    """Outcome of one format handler: the text, or why there is none"""
    format: DocumentFormat
    text: str = ""
    ok: bool = True
    error: Optional[str] = None


class ResumeDocument(BaseModel):
    filename: str
    raw_bytes: bytes = b""


class JobProfile(BaseModel):
    """Derived, read-only view of a job description shared by every resume in a batch"""
    model_config = ConfigDict(frozen=True)

    text: str
    tokens: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    bag: Dict[str, int] = Field(default_factory=dict)

    @property
    def keyword_set(self):
        return frozenset(self.keywords)


class ScoreResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str
    score: float = Field(ge=0.0, le=1.0)
    evidence: List[str] = Field(default_factory=list, max_length=8)
    experience: str = NO_MATCH
    education: Education = Education.UNKNOWN
    snippet: str = ""
    note: Optional[str] = None
    char_count: int = Field(default=0, alias="charCount")
