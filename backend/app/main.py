# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import logging
import sentry_sdk
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.database import engine, Base
from app.routers import users, words, verbal_questions, verbal_stats
from app.services.errors import VerbalEngineError
from app.utils.http_errors import to_http_exception

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error monitoring
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        environment=os.getenv("ENVIRONMENT", "development"),
    )

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # STARTUP: load the lemmatizer pipeline so the first question upload doesn't pay for it
    if os.getenv("ENABLE_LEMMATIZER_WARMING", "true").lower() == "true":
        try:
            from app.services.lemmatizer import get_lemmatizer
            logger.info("Loading lemmatizer...")
            get_lemmatizer()
            logger.info("Lemmatizer ready")
        except Exception as e:
            # Tagging endpoints answer 503 until the pipeline loads
            logger.warning("Lemmatizer warm-up failed: %s", e)
    else:
        logger.info("Lemmatizer warming disabled via ENABLE_LEMMATIZER_WARMING=false")

    yield  # Application runs here

    logger.info("Shutting down...")

# OpenAPI tag metadata for organized documentation
tags_metadata = [
    {
        "name": "users",
        "description": "User registration, ability profile, marked words/questions and problematic vocabulary.",
    },
    {
        "name": "words",
        "description": "Vocabulary words stored under their base form.",
    },
    {
        "name": "verbal-questions",
        "description": "Question bank operations including vocabulary tagging, random sets and adaptive selection.",
    },
    {
        "name": "verbal-stats",
        "description": "Answer submission (drives ability updates) and answer history.",
    },
]

app = FastAPI(
    title="GREpandit API",
    description="""
## GREpandit GRE Verbal Practice

### Features
- **Adaptive Question Selection** - Epsilon-greedy choice over 9 difficulty/type categories
- **Ability Tracking** - Per-category scores from 0 to 4500
- **Vocabulary Tagging** - Questions linked to the vocabulary words they use
    """,
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=tags_metadata,
)

ALLOWED_ORIGINS = [
    "http://localhost:3000",
]

# Allow additional origins from environment (for preview deploys)
extra_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
if extra_origins:
    ALLOWED_ORIGINS.extend([o.strip() for o in extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
)

# Include routers
app.include_router(users.router)
app.include_router(words.router)
app.include_router(verbal_questions.router)
app.include_router(verbal_stats.router)


# Engine errors raised outside a route body, e.g. while resolving get_lemmatizer
@app.exception_handler(VerbalEngineError)
async def verbal_engine_exception_handler(request: Request, exc: VerbalEngineError):
    error = to_http_exception(exc)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.get("/")
def root():
    return {
        "message": "GREpandit API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
