"""
Runtime configuration read from environment variables.

``load_env_files`` is called once by :mod:`palletwms.main` before anything
reads the environment.  Values are looked up at call time so tests can
monkeypatch them.

    OPENAI_API_KEY          enables storage suggestions (unset -> disabled)
    OPENAI_MODEL            default: gpt-4o-mini
    AI_SUGGESTION_TIMEOUT   seconds, default: 15
    AI_LOG_JSONL            default: backend/logs/ai_planner.jsonl
    FRONTEND_ORIGINS        comma separated extra CORS origins
    LOG_LEVEL               default: INFO
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

CURRENT_FILE = Path(__file__).resolve()
BACKEND_DIR = CURRENT_FILE.parents[2]
REPO_ROOT = CURRENT_FILE.parents[3]

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_SUGGESTION_TIMEOUT = 15.0


def load_env_files() -> list[str]:
    """Load .env files in priority order without overriding set variables."""
    candidates = [
        BACKEND_DIR / ".env.local",
        BACKEND_DIR / ".env",
        REPO_ROOT / ".env.local",
        REPO_ROOT / ".env",
    ]
    loaded = []
    for env_path in candidates:
        if env_path.exists():
            load_dotenv(env_path, override=False)
            loaded.append(str(env_path))
    return loaded


def openai_api_key() -> str:
    return os.getenv("OPENAI_API_KEY", "").strip()


def openai_model() -> str:
    return (os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL).strip()


def suggestion_timeout() -> float:
    raw = os.getenv("AI_SUGGESTION_TIMEOUT")
    if not raw:
        return DEFAULT_SUGGESTION_TIMEOUT
    try:
        return max(1.0, float(raw))
    except ValueError:
        return DEFAULT_SUGGESTION_TIMEOUT


def ai_log_path() -> str:
    return os.getenv("AI_LOG_JSONL", str(BACKEND_DIR / "logs" / "ai_planner.jsonl"))


def frontend_origins() -> list[str]:
    env = os.getenv("FRONTEND_ORIGINS") or os.getenv("FRONTEND_ORIGIN") or ""
    return [o.strip() for o in env.split(",") if o and o.strip()]


def log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").upper()
