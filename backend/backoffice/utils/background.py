"""Fire-and-forget 백그라운드 작업 유틸리티입니다."""

import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)

# Strong references so pending tasks are not garbage collected mid-run.
_pending: set[asyncio.Task] = set()


def spawn_background(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
    """Schedule ``coro`` on the running loop and log how it ends.

    The caller never awaits the returned task; failures surface in the logs only.
    """
    task = asyncio.create_task(coro, name=name)
    _pending.add(task)
    task.add_done_callback(_log_completion)
    return task


def _log_completion(task: asyncio.Task) -> None:
    _pending.discard(task)
    if task.cancelled():
        logger.warning("[background] %s was cancelled", task.get_name())
        return
    exc = task.exception()
    if exc is not None:
        logger.error("[background] %s failed: %s", task.get_name(), exc, exc_info=exc)
        return
    logger.info("[background] %s finished", task.get_name())
