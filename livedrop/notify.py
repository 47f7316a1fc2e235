"""User-facing notices.

Actions in the storefront report success and failure through a
:class:`Notifier` instead of printing or raising into the caller.
"""

from __future__ import annotations

import logging
import sys
from typing import Awaitable, Protocol, TypeVar

from .errors import StorefrontError

logger = logging.getLogger("livedrop.notify")

T = TypeVar("T")


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Notifier that prints to STDOUT and errors to STDERR."""

    def __init__(self) -> None:
        self.failures = 0

    def info(self, message: str) -> None:
        print(message)

    def error(self, message: str) -> None:
        self.failures += 1
        print(f"error: {message}", file=sys.stderr)


class RecordingNotifier:
    """Notifier that keeps every notice; handy for embedding and tests."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


async def present(action: Awaitable[T], notifier: Notifier) -> T | None:
    """Await ``action``; a :class:`StorefrontError` becomes a notice."""
    try:
        return await action
    except StorefrontError as exc:
        logger.info("presented %s: %s", exc.code, exc.message)
        notifier.error(exc.message)
        return None
