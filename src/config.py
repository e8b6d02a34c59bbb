"""Configuration module for the ClassGo API.

This module provides centralized configuration management, including directory
paths, API server settings, authentication, LLM configuration, and classroom
defaults. All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/classgo.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# --- Classroom Configuration ---

CLASS_CODE_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CLASS_CODE_LENGTH: int = 7
# Attempts at inserting a class before a join code collision is reported
CLASS_CODE_MAX_ATTEMPTS: int = int(os.getenv("CLASS_CODE_MAX_ATTEMPTS", "5"))

CLASS_COVER_COLORS: List[str] = [
    "#4285F4",
    "#0F9D58",
    "#F4B400",
    "#DB4437",
    "#AB47BC",
    "#00ACC1",
]

DEFAULT_ASSIGNMENT_POINTS: int = 100
DEFAULT_ASSIGNMENT_TYPE: str = "assignment"

# --- LLM Configuration ---

TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))

# Provider registry for OpenAI-compatible endpoints
LLM_PROVIDERS: Dict[str, Dict[str, Optional[str]]] = {
    "gemini": {
        "display_name": "Google Gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "default_model": "gemini-2.5-flash",
        "env_key": "GOOGLE_GENERATIVE_AI_API_KEY",
    },
    "openai": {
        "display_name": "OpenAI",
        "base_url": None,
        "default_model": "gpt-4o-mini",
        "env_key": "OPENAI_API_KEY",
    },
    "deepseek": {
        "display_name": "DeepSeek",
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
        "env_key": "DEEPSEEK_API_KEY",
    },
}

# --- Quiz Generator Configuration ---

QUIZ_LLM_PROVIDER: str = os.getenv("QUIZ_LLM_PROVIDER", "gemini")
QUIZ_MODEL: Optional[str] = os.getenv("QUIZ_MODEL")

# Characters of study material sent to the model
QUIZ_MAX_CONTENT_CHARS: int = int(os.getenv("QUIZ_MAX_CONTENT_CHARS", "15000"))
QUIZ_MAX_OUTPUT_TOKENS: int = int(os.getenv("QUIZ_MAX_OUTPUT_TOKENS", "8192"))

# Model id fragments of models that cannot answer a chat completion
NON_CHAT_MODEL_KEYWORDS: List[str] = [
    "embedding",
    "imagen",
    "veo",
    "aqa",
    "tts",
    "whisper",
    "dall-e",
    "moderation",
]
