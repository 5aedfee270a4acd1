"""
Runner for non-critical side effects (audit rows, notification rows,
resolved counters).

A failed effect is logged with its traceback and counted in
``csrms_side_effect_failures_total``; the caller only sees ``False``.
"""

from __future__ import annotations

import logging
from typing import Awaitable

from csrms.core.metrics import record_side_effect_failure

logger = logging.getLogger(__name__)


async def best_effort(effect: str, operation: Awaitable[object]) -> bool:
    """Await ``operation``; return True on success, False if it raised."""
    try:
        await operation
    except Exception:
        logger.exception("Best-effort %s failed", effect, extra={"effect": effect})
        record_side_effect_failure(effect)
        return False
    return True
