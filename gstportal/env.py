from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_LOADED = False


def load_env() -> Path | None:
    global _LOADED
    if _LOADED:
        return None
    _LOADED = True

    base_dir = Path(__file__).resolve().parent
    # Project root .env wins over a package-local one.
    candidates = [
        base_dir.parent / ".env",
        base_dir / ".env",
        Path.cwd() / ".env",
    ]

    for path in candidates:
        if not path.exists():
            continue
        # Real environment variables (Docker/K8s) are never overridden.
        load_dotenv(dotenv_path=path, override=False)
        logger.debug("Environment loaded from %s", path)
        return path
    return None
