"""
FastAPI application for CodeTube.
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
import uvicorn

from codetube import __version__
from codetube.analyzer import CodeAnalyzer
from codetube.config import Settings, get_settings, logger, settings
from codetube.errors import AnalysisParseError, AnalyzerError, InternalError, InvalidRequest
from codetube.models import AnalyzeRequest, CombinedResponse, ErrorResponse


_analyzer: Optional[CodeAnalyzer] = None


def get_code_analyzer() -> CodeAnalyzer:
    """Process-wide analyzer, built on first use from the cached settings."""
    global _analyzer
    if _analyzer is None:
        _analyzer = CodeAnalyzer(get_settings())
    return _analyzer


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("CodeTube v%s starting", __version__)
    logger.info("Model: %s", settings.GEMINI_MODEL)
    logger.info("Server: %s:%d", settings.HOST, settings.PORT)

    if not settings.gemini_configured or not settings.youtube_configured:
        logger.error("API keys are missing. Set GEMINI_API_KEY and YOUTUBE_API_KEY in .env")

    yield

    logger.info("Shutting down...")
    if _analyzer is not None:
        await _analyzer.close()


app = FastAPI(
    title="CodeTube API",
    description="Code complexity analysis with Gemini and tutorial videos from YouTube",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

cors_origins = settings.cors_origins
allow_credentials = "*" not in cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _error_response(exc: AnalyzerError) -> JSONResponse:
    body = ErrorResponse(
        error=exc.message,
        details=exc.details,
        raw_response=exc.raw_response if isinstance(exc, AnalysisParseError) else None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(AnalyzerError)
async def analyzer_exception_handler(request: Request, exc: AnalyzerError):
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Body problems are reported like any other invalid request, without the values."""
    fields = [
        ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        for err in exc.errors()[:5]
    ]
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, fields)
    return _error_response(
        InvalidRequest("Code and language are required.", details=f"Invalid fields: {', '.join(fields)}")
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s: %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc)[:200],
    )
    return _error_response(InternalError("Internal server error", details=type(exc).__name__))


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    ready = settings.gemini_configured and settings.youtube_configured
    return {
        "status": "ok" if ready else "degraded",
        "version": __version__,
        "model": settings.GEMINI_MODEL,
        "gemini_configured": settings.gemini_configured,
        "youtube_configured": settings.youtube_configured,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post(
    "/analyze-code",
    response_model=CombinedResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def analyze_code(
    request: AnalyzeRequest,
    analyzer: CodeAnalyzer = Depends(get_code_analyzer),
):
    """
    Analyze a code snippet and recommend tutorial videos.

    Returns the model's complexity analysis, optimization suggestions and
    alternative implementations, plus up to five YouTube videos about the
    identified problem.
    """
    request_id = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    start_time = time.monotonic()
    logger.info("[%s] Request received - %s, %d chars", request_id, request.language, len(request.code))

    try:
        result = await analyzer.analyze(request)
    except AnalyzerError as exc:
        elapsed = time.monotonic() - start_time
        logger.error("[%s] Request failed in %.3fs - %d %s", request_id, elapsed, exc.status_code, exc.message)
        raise

    elapsed = time.monotonic() - start_time
    logger.info("[%s] Request completed in %.3fs - %d videos", request_id, elapsed, len(result.youtube_videos))
    return result


# Client bundle, registered last so API routes take precedence

def _static_root() -> Path:
    return Path(get_settings().STATIC_DIR).resolve()


@app.get("/{full_path:path}", include_in_schema=False)
async def serve_client(full_path: str):
    """Serve a file from the client bundle, or its index.html for client-side routes."""
    root = _static_root()
    index = root / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")

    candidate = (root / full_path).resolve()
    if full_path and candidate.is_file() and candidate.is_relative_to(root):
        return FileResponse(candidate)
    return FileResponse(index)


# Entry point

def main():
    """Run the API with uvicorn; reload only when DEBUG is set."""
    config = get_settings()
    logger.info("Starting CodeTube v%s on http://%s:%d", __version__, config.HOST, config.PORT)
    uvicorn.run(
        "codetube.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
