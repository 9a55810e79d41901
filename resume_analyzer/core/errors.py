from __future__ import annotations


class ResumeAnalyzerError(RuntimeError):
    default_code = "error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.default_code


class ExtractionError(ResumeAnalyzerError):
    """The source document could not be turned into text; the analysis is aborted."""

    default_code = "extraction_failed"


class ValidationError(ResumeAnalyzerError):
    """Caller-supplied input was rejected before any computation ran."""

    default_code = "invalid_input"


class AugmentationError(ResumeAnalyzerError):
    """The language model could not enrich the analysis; callers fall back."""

    default_code = "llm_unavailable"


class TransportError(AugmentationError):
    default_code = "llm_transport"


class RateLimitError(AugmentationError):
    default_code = "llm_rate_limited"
