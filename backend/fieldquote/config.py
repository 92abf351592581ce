"""
Service configuration, the single place environment variables are read.

A ``.env`` file next to the process is loaded first in development.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
JSON_LOGS: bool = os.getenv("LOG_FORMAT", "json").lower() != "text"

# ── HTTP ──────────────────────────────────────────────────────────────────────
# Comma-separated list; "*" allows any origin (local UI development)
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

API_TITLE: str = "Field Quote Engine"
API_VERSION: str = "1.0.0"

# ── Presentation ──────────────────────────────────────────────────────────────
CURRENCY: str = os.getenv("FIELDQUOTE_CURRENCY", "CHF")
