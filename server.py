"""
Quiz Server - Pontuacao de quizzes no servidor

FastAPI server with:
- Quiz authoring and public (answer-free) quiz views
- Server-side scoring of submissions
- Attempt history persisted in AgentFS
- JWT Bearer check on authoring/result endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import app_state
from quiz.config import QuizSettings, get_settings
from quiz.exceptions import QuizError
from quiz.router import router as quiz_router

# Usado apenas no bootstrap (logging e CORS)
_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info(f"Starting Quiz Server ({get_settings().environment})...")
    yield
    await app_state.cleanup()


app = FastAPI(
    title="Quiz Server",
    description="Quiz authoring and server-side scoring",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz_router)


@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    """Erros de dominio nao tratados no router."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/")
async def root(settings: QuizSettings = Depends(get_settings)):
    """Health check."""
    return {
        "status": "ok",
        "message": "Quiz Server",
        "auth_enabled": settings.auth_enabled,
    }


@app.get("/health")
async def health_check(settings: QuizSettings = Depends(get_settings)):
    """Detailed health check."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "agentfs": "active" if app_state.agentfs is not None else "idle",
        "scoring": {"unanswered_policy": settings.unanswered_policy.value},
        "security": {"auth_enabled": settings.auth_enabled},
    }


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
