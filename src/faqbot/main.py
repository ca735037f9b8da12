"""
faqbot - FastAPI application for FAQ answering

Answers free-text questions from a fixed FAQ set using:
- BM25 ranking over FAQ questions (threshold-gated answers)
- Keyword matching for simple substring rules
- FastAPI (async REST API)

The FAQ corpus is loaded once at startup; the ranking engine is read-only
afterwards and shared by all requests.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from .config import Settings, load_environment
from .logging_config import setup_logging

# Load .env.local / .env before reading settings
env_source = load_environment()
settings = Settings.from_env()

# Configure logging: console (brief) + file (detailed)
setup_logging(
    log_file=settings.log_file,
    console_level=settings.console_level,
    file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
)

logger = logging.getLogger(__name__)

if env_source:
    logger.info(f"Loaded environment from: {env_source}")
else:
    logger.warning("No .env.local or .env file found - using system environment variables only")


from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .faq import FaqResponder, load_faq_corpus
from .keyword_matcher import KeywordMatcher, is_question

# Version tracking
APP_VERSION = "0.1.0"
APP_START_TIME = datetime.utcnow()

# Global instances (populated in lifespan)
responder: Optional[FaqResponder] = None
keyword_matcher: Optional[KeywordMatcher] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load FAQ corpus and build the ranking engine"""
    global responder, keyword_matcher, settings

    # Re-read so startup reflects the current environment
    settings = Settings.from_env()

    logger.info(f"Loading FAQ corpus (path={settings.faq_corpus_path or 'default'})...")
    corpus = load_faq_corpus(settings.faq_corpus_path)

    responder = FaqResponder(
        corpus=corpus,
        threshold=settings.score_threshold,
        include_score=settings.reply_with_score,
    )
    keyword_matcher = KeywordMatcher(corpus.keywords)
    logger.info(
        f"FAQ engine ready: {len(corpus)} entries, "
        f"{len(corpus.keywords)} keyword rules, threshold={settings.score_threshold}"
    )

    yield

    logger.info("Shutting down...")
    responder = None
    keyword_matcher = None


app = FastAPI(
    title="faqbot API",
    description="FAQ answering with BM25 ranking and keyword rules",
    version=APP_VERSION,
    lifespan=lifespan,
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    faq_entries: int
    threshold: float
    started_at: str
    uptime_seconds: float


class ScoreRequest(BaseModel):
    query: str = Field(..., description="User question")
    top_k: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of results (default: all FAQ entries)"
    )


class ScoredItem(BaseModel):
    index: int
    score: float
    question: Optional[str] = None


class ScoreResponse(BaseModel):
    query: str
    rankable: bool = Field(..., description="False if the query has no usable terms (results are a placeholder)")
    results: List[ScoredItem]
    total: int


class AnswerRequest(BaseModel):
    query: str = Field(..., description="User question")


class AnswerResponse(BaseModel):
    query: str
    answered: bool
    rankable: bool
    score: float
    text: str
    index: Optional[int] = None
    question: Optional[str] = None
    answer: Optional[str] = None


class KeywordRequest(BaseModel):
    text: str = Field(..., description="Chat message")


class KeywordResponse(BaseModel):
    text: str
    is_question: bool
    answer: Optional[str] = None


def get_responder() -> FaqResponder:
    if responder is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="FAQ engine not initialized"
        )
    return responder


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "faqbot API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    faq = get_responder()
    uptime = (datetime.utcnow() - APP_START_TIME).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        faq_entries=len(faq.corpus),
        threshold=faq.threshold,
        started_at=APP_START_TIME.isoformat() + "Z",
        uptime_seconds=round(uptime, 2),
    )


@app.post("/v1/faq/score", response_model=ScoreResponse)
async def score_query(request: ScoreRequest):
    """
    Rank all FAQ questions against a query with BM25.

    Results are sorted by score (descending); equal scores keep FAQ order.
    If the query has no usable terms (empty, stopwords only), `rankable` is
    false and the single result is a placeholder, not a match.
    """
    faq = get_responder()

    try:
        rankable = faq.engine.is_rankable(request.query)
        ranked = faq.engine.score(request.query)
        if request.top_k is not None:
            ranked = ranked[:request.top_k]

        items = [
            ScoredItem(
                index=result.index,
                score=result.score,
                question=faq.corpus.entries[result.index].question if rankable else None,
            )
            for result in ranked
        ]

        return ScoreResponse(
            query=request.query,
            rankable=rankable,
            results=items,
            total=len(items),
        )

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Scoring failed: {str(e)}",
        )


@app.post("/v1/faq/answer", response_model=AnswerResponse)
async def answer_query(request: AnswerRequest):
    """
    Answer a question from the FAQ if the best match clears the threshold.

    Below the threshold the reply is "Sorry, no answer found!".
    """
    faq = get_responder()

    try:
        reply = faq.answer(request.query)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Answer failed: {str(e)}",
        )

    logger.info(f'"{request.query}" - "{reply.text}"')

    return AnswerResponse(
        query=reply.query,
        answered=reply.answered,
        rankable=reply.rankable,
        score=reply.score,
        text=reply.text,
        index=reply.index,
        question=reply.question,
        answer=reply.answer,
    )


@app.post("/v1/faq/keyword", response_model=KeywordResponse)
async def keyword_answer(request: KeywordRequest):
    """
    Keyword-rule answer for chat messages.

    Only messages ending with '?' are answered; others return `answer: null`.
    """
    get_responder()
    matcher = keyword_matcher

    return KeywordResponse(
        text=request.text,
        is_question=is_question(request.text),
        answer=matcher.match(request.text),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "faqbot.main:app",
        host="0.0.0.0",
        port=settings.port,
    )
