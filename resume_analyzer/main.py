import logging

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from resume_analyzer import __version__
from resume_analyzer.api.v1.health import router as health_router
from resume_analyzer.api.v1.resume import router as resume_router
from resume_analyzer.core.config import settings
from resume_analyzer.core.errors import ExtractionError, ResumeAnalyzerError, ValidationError
from resume_analyzer.core.lifespan import lifespan
from resume_analyzer.core.rate_limit import limiter

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger("resume_analyzer.api")

app = FastAPI(title="Resume Analyzer API", version=__version__, lifespan=lifespan)


@app.exception_handler(ResumeAnalyzerError)
async def resume_analyzer_error_handler(request: Request, exc: ResumeAnalyzerError):
    if isinstance(exc, ValidationError):
        status_code = 400
    elif isinstance(exc, ExtractionError):
        status_code = 422
    else:
        status_code = 503
    logger.warning("request_failed path=%s code=%s: %s", request.url.path, exc.code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": exc.code})


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resume_router, prefix="/v1", tags=["Resume"])
