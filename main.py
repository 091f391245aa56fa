"""Run the Azure services demo API under uvicorn."""

from __future__ import annotations

import os

import uvicorn

from src.config.settings import get_app_settings


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def main() -> None:
    """Serve ``src.api.app:app``; ``API_*`` variables override the defaults."""

    log_level = os.getenv("API_LOG_LEVEL") or get_app_settings().log_level.lower()

    uvicorn.run(
        "src.api.app:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8080")),
        reload=_env_flag("API_RELOAD"),
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
