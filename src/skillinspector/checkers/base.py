"""Checker capability and a thread-backed convenience base.

A checker is anything with a stable ``name`` and an asynchronous
``execute(skill)`` returning a list of findings. The inspection engine
never branches on what kind of checker it holds: deterministic scanners,
external analyzers and test doubles all plug in the same way.

Every finding a checker returns must carry a ``source_name`` that the
category classifier recognizes (typically the checker's own name).
"""

from __future__ import annotations

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from skillinspector.core.models import Finding, Skill

logger = logging.getLogger(__name__)


@runtime_checkable
class Checker(Protocol):
    """Single-method analysis capability consumed by the engine.

    Attributes:
        name: Stable identifier; used for category inference, failure
            reporting, and as the default ``source_name`` of findings.
    """

    name: str

    async def execute(self, skill: Skill) -> list[Finding]:
        """Analyze ``skill`` and return findings.

        May raise, and may take arbitrarily long: the engine bounds every
        call with its per-check timeout and converts exceptions into a
        failed outcome. Must treat ``skill`` as read-only.
        """
        ...


class BlockingChecker(ABC):
    """Base for checkers whose work is synchronous or does blocking I/O.

    Subclasses implement ``check``; ``execute`` runs it on a daemon thread
    so that slow file or CPU work never delays sibling checkers. When the
    engine abandons a timed-out call, nothing waits for that thread: not
    the event loop on shutdown, and not the interpreter on exit. Its late
    result is dropped.
    """

    name: str = "BlockingChecker"

    async def execute(self, skill: Skill) -> list[Finding]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[list[Finding]] = loop.create_future()

        def work() -> None:
            try:
                outcome = (self.check(skill), None)
            except Exception as exc:
                outcome = (None, exc)
            try:
                loop.call_soon_threadsafe(_settle, future, *outcome)
            except RuntimeError:
                logger.debug("Checker '%s' finished after its run ended", self.name)

        threading.Thread(target=work, name=f"checker-{self.name}", daemon=True).start()
        return await future

    @abstractmethod
    def check(self, skill: Skill) -> list[Finding]:
        """Synchronously analyze ``skill`` and return findings."""


def _settle(
    future: asyncio.Future[list[Finding]],
    result: list[Finding] | None,
    exc: Exception | None,
) -> None:
    if future.done():
        return
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(result)
