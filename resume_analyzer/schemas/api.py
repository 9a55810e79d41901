from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .analysis import Analysis


class AnalysisResponse(BaseModel):
    resume_id: str
    file_name: str
    file_size: int
    uploaded_at: datetime
    extracted_text: str | None = None
    analysis: Analysis


class JobMatchRequest(BaseModel):
    job_description: str = ""


class JobMatchResponse(BaseModel):
    resume_id: str
    match_score: float
    matching_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    computed: bool
    recommendation: str


class ChatRequest(BaseModel):
    question: str = ""


class ChatResponse(BaseModel):
    question: str
    answer: str
    timestamp: datetime


class RewriteRequest(BaseModel):
    original_text: str = ""
    section_type: str | None = None


class RewriteResponse(BaseModel):
    original: str
    rewritten: str
    section_type: str
