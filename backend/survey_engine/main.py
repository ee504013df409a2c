import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import DEBUG, LOG_LEVEL, log_config_status
from .database import Base, engine
from . import models  # noqa: F401  registers tables on Base.metadata
from .routes.logic import router as logic_router
from .routes.responses import router as responses_router
from .routes.score_config import router as score_config_router
from .routes.surveys import router as surveys_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    print("Starting Survey Scoring & Logic Engine")
    log_config_status()
    Base.metadata.create_all(bind=engine)
    print("   Ready to score responses!")

    yield

    print("Shutting down Survey Scoring & Logic Engine")


app = FastAPI(
    title="Survey Scoring & Logic Engine",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",      # Next.js dev server
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(surveys_router)
app.include_router(responses_router)
app.include_router(logic_router)
app.include_router(score_config_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Survey Scoring & Logic Engine",
        "version": "0.1.0",
        "description": "Deterministic survey scoring, banding and branching logic",
        "docs": "/docs",
        "endpoints": {
            "surveys": "POST /surveys - Create a survey",
            "responses": "POST /surveys/{id}/responses - Submit and score a response",
            "logic": "POST /surveys/{id}/logic/evaluate - Evaluate branching logic",
            "score_config": "POST /score-config/validate - Validate a scoring configuration",
            "health": "GET /health - Service health check",
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "survey-engine",
        "version": "0.1.0"
    }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or non-conforming payloads are client errors (400)."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request payload",
            "detail": jsonable_encoder(exc.errors()),
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if DEBUG else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "survey_engine.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=DEBUG,
    )
