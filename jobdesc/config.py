"""Centralised settings for jobdesc.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

Only the fetch client and the CLI read these settings.  The extraction engine
itself is a pure function of its inputs; its heuristic weights live as named
constants next to the code that uses them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetch client
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("JOBDESC_REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("JOBDESC_USER_AGENT", _DEFAULT_USER_AGENT)
    )
    accept_language: str = field(
        default_factory=lambda: os.environ.get("JOBDESC_ACCEPT_LANGUAGE", "en-US,en;q=0.9")
    )
    max_body_bytes: int = field(
        default_factory=lambda: int(os.environ.get("JOBDESC_MAX_BODY_BYTES", "5000000"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("JOBDESC_LOG_LEVEL", "WARNING").upper()
    )

    @property
    def request_headers(self) -> dict[str, str]:
        """Browser-like request headers; many job boards block obvious bots."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self.accept_language,
        }


# Module-level singleton, import this everywhere:
#   from jobdesc.config import settings
settings = Settings()
