"""Centralized configuration for the calendar report.

All settings live here so they can be overridden by environment variables or a
``.env`` file without touching source code.

**Profile system:** Set ``MGA_PROFILE=dev`` (default) or ``MGA_PROFILE=prod``
to get sensible defaults for each environment.  Any individual ``MGA_*`` var
still overrides the profile value.

Usage::

    from mga_report.config import API_BASE_URL, HIDE_CALENDARS
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from current working directory
load_dotenv()

LOGGER = logging.getLogger(__name__)

# ── Profile: one knob for the whole environment ──────────────────────────────
# "dev" = local API, verbose logs; "prod" = hosted API.
# Individual vars always override the profile.

PROFILE: str = os.getenv("MGA_PROFILE", "dev").lower().strip()

_PROFILE_DEFAULTS: dict[str, dict[str, str]] = {
    "dev": {
        "MGA_API_BASE_URL": "http://localhost:3000",
        "MGA_TIMEOUT_SECONDS": "20",
        "MGA_HIDE_CALENDARS": "",
        "MGA_LOG_LEVEL": "DEBUG",
    },
    "prod": {
        "MGA_API_BASE_URL": "",  # empty → must be explicitly set
        "MGA_TIMEOUT_SECONDS": "30",
        "MGA_HIDE_CALENDARS": "first,vetoed",
        "MGA_LOG_LEVEL": "INFO",
    },
}

if PROFILE not in _PROFILE_DEFAULTS:
    LOGGER.warning("Unknown MGA_PROFILE=%r, falling back to 'dev'.", PROFILE)
    PROFILE = "dev"

_defaults = _PROFILE_DEFAULTS[PROFILE]


def _env(key: str, fallback: str = "") -> str:
    """Read an env var, falling back to profile default then *fallback*."""
    return os.getenv(key, _defaults.get(key, fallback))


# ── Calendar API ─────────────────────────────────────────────────────────────
API_BASE_URL: str = _env("MGA_API_BASE_URL").strip().rstrip("/")
API_KEY: str = _env("MGA_API_KEY").strip()
TIMEOUT_SECONDS: int = int(_env("MGA_TIMEOUT_SECONDS", "20"))

# ── Report defaults ──────────────────────────────────────────────────────────
# Comma-separated short codes: first, second, third, special, laid_over, vetoed
HIDE_CALENDARS: str = _env("MGA_HIDE_CALENDARS").strip()

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = _env("MGA_LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ── Production guard ─────────────────────────────────────────────────────────
if PROFILE == "prod":
    if not API_BASE_URL:
        LOGGER.warning("MGA_PROFILE=prod but MGA_API_BASE_URL is empty. Set it to the calendar API.")
    if not API_KEY:
        LOGGER.warning("MGA_PROFILE=prod but MGA_API_KEY is empty. Requests go out unauthenticated.")
