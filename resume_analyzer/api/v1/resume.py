from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from resume_analyzer.api.deps import get_augmenter, get_store
from resume_analyzer.core.config import settings
from resume_analyzer.core.errors import ExtractionError, ValidationError
from resume_analyzer.core.rate_limit import rate_limit
from resume_analyzer.parsing import is_supported_file_format
from resume_analyzer.schemas import Analysis, ResumeRecord
from resume_analyzer.schemas.api import (
    AnalysisResponse,
    ChatRequest,
    ChatResponse,
    JobMatchRequest,
    JobMatchResponse,
    RewriteRequest,
    RewriteResponse,
)
from resume_analyzer.services.analysis_service import analyze_document
from resume_analyzer.services.augmentation import (
    CHAT_UNAVAILABLE_MESSAGE,
    ResumeAugmenter,
    empty_job_match,
    run_with_deadline,
)
from resume_analyzer.store import AnalysisStore

logger = logging.getLogger("resume_analyzer.api")
router = APIRouter(prefix="/resume")


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _to_response(record: ResumeRecord, analysis: Analysis, *, include_text: bool = True) -> AnalysisResponse:
    return AnalysisResponse(
        resume_id=record.id,
        file_name=record.file_name,
        file_size=record.file_size,
        uploaded_at=record.uploaded_at,
        extracted_text=record.extracted_text if include_text else None,
        analysis=analysis,
    )


def _require_resume(store: AnalysisStore, resume_id: str) -> ResumeRecord:
    record = store.load_resume(resume_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found.")
    return record


@router.post("/analyze", response_model=AnalysisResponse)
@rate_limit()
def analyze_resume(
    request: Request,
    file: UploadFile = File(...),
    target_role: str | None = Form(default=None),
    industry: str | None = Form(default=None),
    augment: bool = Form(default=False),
    store: AnalysisStore = Depends(get_store),
    augmenter: ResumeAugmenter = Depends(get_augmenter),
):
    _ = request
    file_name = file.filename or ""
    content = file.file.read()
    if not content:
        raise _bad_request("No file uploaded. Please select a resume file.")
    if len(content) > settings.max_upload_bytes:
        logger.warning("upload_too_large file=%s size=%s", file_name, len(content))
        raise _bad_request("File size exceeds the upload limit. Please upload a smaller file.")
    if not is_supported_file_format(file_name):
        logger.warning("upload_unsupported_format file=%s", file_name)
        raise _bad_request("Unsupported file format. Please upload PDF, DOCX, or TXT files.")

    resume_id = uuid.uuid4().hex
    try:
        text, analysis = analyze_document(
            content,
            file_name,
            target_role,
            industry,
            resume_id=resume_id,
            augment=augment,
            deadline_s=settings.augmentation_deadline_s if augment else None,
            augmenter=augmenter,
        )
    except ExtractionError as exc:
        logger.error("analysis_aborted file=%s code=%s: %s", file_name, exc.code, exc)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    record = ResumeRecord(
        id=resume_id,
        file_name=file_name,
        file_type=PurePath(file_name).suffix.lstrip(".").lower(),
        file_size=len(content),
        extracted_text=text,
    )
    store.save_resume(record)
    store.persist(analysis)

    logger.info(
        json.dumps(
            {
                "event": "resume_analyzed",
                "resume_id": resume_id,
                "analysis_id": analysis.id,
                "file_type": record.file_type,
                "file_size": record.file_size,
                "overall_score": analysis.overall_score,
                "augmented": augment,
            }
        )
    )
    return _to_response(record, analysis)


@router.get("/list", response_model=list[AnalysisResponse])
def list_analyses(store: AnalysisStore = Depends(get_store)):
    rows = store.list_recent(settings.analysis_list_limit)
    return [_to_response(record, analysis, include_text=False) for record, analysis in rows]


@router.get("/{resume_id}", response_model=AnalysisResponse)
def get_analysis(resume_id: str, store: AnalysisStore = Depends(get_store)):
    record = _require_resume(store, resume_id)
    analysis = store.load_for_resume(resume_id)
    if analysis is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume analysis not found.")
    return _to_response(record, analysis)


@router.delete("/{resume_id}")
def delete_resume(resume_id: str, store: AnalysisStore = Depends(get_store)):
    if not store.delete(resume_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found.")
    logger.info("resume_deleted resume_id=%s", resume_id)
    return {"message": "Resume deleted successfully."}


@router.post("/{resume_id}/match-job", response_model=JobMatchResponse)
@rate_limit("llm")
def match_job(
    request: Request,
    resume_id: str,
    payload: JobMatchRequest,
    store: AnalysisStore = Depends(get_store),
    augmenter: ResumeAugmenter = Depends(get_augmenter),
):
    _ = request
    record = _require_resume(store, resume_id)
    if not payload.job_description.strip():
        raise _bad_request("Job description is required.")

    deadline = settings.augmentation_deadline_s
    try:
        result = run_with_deadline(
            lambda: augmenter.match_job(record.extracted_text, payload.job_description, timeout_s=deadline),
            deadline,
            empty_job_match,
        )
    except ValidationError as exc:
        raise _bad_request(str(exc)) from exc

    return JobMatchResponse(
        resume_id=resume_id,
        match_score=result.match_score,
        matching_keywords=list(result.matching_keywords),
        missing_keywords=list(result.missing_keywords),
        computed=result.computed,
        recommendation=result.verdict,
    )


@router.post("/{resume_id}/chat", response_model=ChatResponse)
@rate_limit("llm")
def chat_with_expert(
    request: Request,
    resume_id: str,
    payload: ChatRequest,
    store: AnalysisStore = Depends(get_store),
    augmenter: ResumeAugmenter = Depends(get_augmenter),
):
    _ = request
    record = _require_resume(store, resume_id)
    if not payload.question.strip():
        raise _bad_request("Question is required.")

    deadline = settings.augmentation_deadline_s
    answer = run_with_deadline(
        lambda: augmenter.chat(payload.question, record.extracted_text, timeout_s=deadline),
        deadline,
        lambda: CHAT_UNAVAILABLE_MESSAGE,
    )
    return ChatResponse(question=payload.question, answer=answer, timestamp=datetime.now(timezone.utc))


@router.post("/rewrite", response_model=RewriteResponse)
@rate_limit("llm")
def rewrite_section(
    request: Request,
    payload: RewriteRequest,
    augmenter: ResumeAugmenter = Depends(get_augmenter),
):
    _ = request
    if not payload.original_text.strip():
        raise _bad_request("Original text is required.")

    section_type = (payload.section_type or "experience").strip() or "experience"
    deadline = settings.augmentation_deadline_s
    rewritten = run_with_deadline(
        lambda: augmenter.rewrite(payload.original_text, section_type, timeout_s=deadline),
        deadline,
        lambda: payload.original_text,
    )
    return RewriteResponse(original=payload.original_text, rewritten=rewritten, section_type=section_type)
