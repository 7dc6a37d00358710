# src/delegation_hub/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (without an API key the offline agent is used).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "HUB"

DEFAULT_MANAGER_AGENT_ID = "69884944b662c978044a15b5"
DEFAULT_AGENT_BASE_URL = "https://agent-prod.studio.lyzr.ai"
DEFAULT_KEYWORDS = ["urgent", "team", "delegate"]


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Remote agent endpoint ----
    agent_api_key: Optional[str]
    agent_base_url: str
    agent_user_id: str
    manager_agent_id: str

    # ---- Run pacing ----
    request_timeout_seconds: float
    phase_step_seconds: float
    complete_reset_seconds: float
    offline_delay_seconds: float

    # ---- Dashboard ----
    keywords: List[str]
    show_sample: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "delegation-hub") or "delegation-hub"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/delegation_hub"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        agent_api_key = _first_env(_k("AGENT_API_KEY"), "LYZR_API_KEY", default=None)
        agent_base_url = _env(_k("AGENT_BASE_URL"), DEFAULT_AGENT_BASE_URL).strip()
        agent_user_id = _env(_k("AGENT_USER_ID"), "dashboard@delegation-hub").strip()
        manager_agent_id = _env(_k("MANAGER_AGENT_ID"), DEFAULT_MANAGER_AGENT_ID).strip()

        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 90.0, minimum=1.0)
        phase_step_seconds = _env_float(_k("PHASE_STEP_SECONDS"), 2.0)
        complete_reset_seconds = _env_float(_k("COMPLETE_RESET_SECONDS"), 3.0)
        offline_delay_seconds = _env_float(_k("OFFLINE_DELAY_SECONDS"), 5.0)

        keywords = _env_list(_k("KEYWORDS"), DEFAULT_KEYWORDS)
        show_sample = _env_bool(_k("SHOW_SAMPLE"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            agent_api_key=agent_api_key,
            agent_base_url=agent_base_url or DEFAULT_AGENT_BASE_URL,
            agent_user_id=agent_user_id,
            manager_agent_id=manager_agent_id or DEFAULT_MANAGER_AGENT_ID,
            request_timeout_seconds=request_timeout_seconds,
            phase_step_seconds=phase_step_seconds,
            complete_reset_seconds=complete_reset_seconds,
            offline_delay_seconds=offline_delay_seconds,
            keywords=keywords,
            show_sample=show_sample,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
