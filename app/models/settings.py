"""
Screening Settings Models for Configuration Management
"""
import os
from pydantic import BaseModel, Field, validator
from pydantic import ValidationError as PydanticValidationError
from dotenv import load_dotenv

from app.utils.exceptions import ConfigurationError

load_dotenv()

ENV_PREFIX = "SCREENER_"


class ScreeningSettings(BaseModel):
    """Tunable knobs of the scoring pipeline. Fusion weights are not among them."""
    min_keyword_length: int = Field(default=3, ge=1, le=20, description="Shortest token kept as a keyword")
    skill_match_mode: str = Field(default="token", description="'token' for exact token membership, 'text' for substring match on raw text")
    low_text_threshold: int = Field(default=80, ge=0, description="Extracted character count below which a note is attached")
    max_workers: int = Field(default=4, ge=1, le=64, description="Resumes scored in parallel within one request")
    snippet_before: int = Field(default=80, ge=0, description="Characters kept before the snippet anchor")
    snippet_after: int = Field(default=120, ge=1, description="Characters kept after the snippet anchor")
    fallback_snippet_length: int = Field(default=200, ge=1, description="Snippet length when no JD keyword is found")

    @validator('skill_match_mode')
    def validate_skill_match_mode(cls, v):
        v = v.lower()
        if v not in ("token", "text"):
            raise ValueError("skill_match_mode must be 'token' or 'text'")
        return v


def load_settings(**overrides) -> ScreeningSettings:
    """Build settings from SCREENER_* environment variables, then explicit overrides"""
    values = {}
    for name in ScreeningSettings.model_fields:
        env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if env_value is not None and env_value != "":
            values[name] = env_value
    values.update(overrides)

    try:
        return ScreeningSettings(**values)
    except PydanticValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        key = ".".join(str(p) for p in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid screening settings: {first.get('msg', str(e))}",
            config_key=key,
            config_value=values.get(key) if key else None,
            cause=e,
        ) from e
