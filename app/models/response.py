# models/response.py
from pydantic import BaseModel, Field
from typing import List

from app.models.models import ScoreResult


class ScoreResponse(BaseModel):
    results: List[ScoreResult] = Field(default_factory=list)


class HealthStatus(BaseModel):
    message: str
    version: str
    status: str
