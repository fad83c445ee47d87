from __future__ import annotations

import asyncio
import logging
import sys
from typing import Awaitable, Callable

from website_deploy.logging_setup import ensure_logging

logger = logging.getLogger(__name__)


def run_script(name: str, main: Callable[[], Awaitable[None]]) -> None:
    """Run a script's async main; log any failure and exit with status 1."""

    ensure_logging()
    try:
        asyncio.run(main())
    except Exception:
        logger.exception("Failed to complete %s", name)
        sys.exit(1)
