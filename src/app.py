"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from api.routes import auth, class_route, assignment_route, quiz

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="ClassGo API",
    description="Backend API service for classrooms, assignments and AI quizzes.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(class_route.router)
app.include_router(assignment_route.router)
app.include_router(quiz.router)


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_errors(exc)},
    )


@app.get("/", summary="API 根路径", tags=["Info"])
def root() -> dict:
    """API 根路径，返回 API 信息和文档链接。

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "ClassGo API",
        "version": "1.0.0",
        "description": "Backend API service for classrooms, assignments and AI quizzes.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="健康检查", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    logger.info("🌐 服务地址(后端服务): %s", server_url)
    logger.info("📚 API 文档: %s/docs", server_url)

    # reload=True enables auto-reload on code changes
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
