"""Entry point detection: decide which file in a directory satisfies a predicate."""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Union

from roux.types import EntryPoint

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_PREDICATES",
    "Decided",
    "Pending",
    "Predicate",
    "as_predicate",
    "detect_entry_point",
    "merge_predicates",
]

Predicate = Union[re.Pattern, str, Callable[[str], Any]]

DEFAULT_PREDICATES: Mapping[str, re.Pattern] = {
    "assets": re.compile(r"^assets\Z"),
    "handlebars": re.compile(r"^index\.hbs\Z"),
    "javaScript": re.compile(r"^index\.js\Z"),
    "model": re.compile(r"^model\.js\Z"),
    "preview": re.compile(r"^preview\.hbs\Z"),
    "previewScript": re.compile(r"^preview\.js\Z"),
    "sass": re.compile(r"^index\.scss\Z"),
}


@dataclass(frozen=True)
class Decided:
    """The predicate answered immediately."""

    matched: bool


@dataclass(frozen=True)
class Pending:
    """The predicate returned an awaitable that will answer later."""

    decision: Awaitable[Any]


def as_predicate(predicate: Predicate) -> Callable[[str], Any]:
    """Normalize a pattern, pattern source string or callable into a callable.

    Raises:
        TypeError: If ``predicate`` is none of the supported forms.
    """
    if isinstance(predicate, str):
        predicate = re.compile(predicate)
    if isinstance(predicate, re.Pattern):
        pattern = predicate
        return lambda filename: pattern.search(filename) is not None
    if callable(predicate):
        return predicate
    raise TypeError(f"Predicate must be a regular expression or a callable, not {type(predicate).__name__}")


def merge_predicates(predicates: Mapping[str, Predicate] | None = None) -> dict[str, Callable[[str], Any]]:
    """Merge ``predicates`` over the defaults; same-named entries override."""
    merged: dict[str, Predicate] = dict(DEFAULT_PREDICATES)
    merged.update(predicates or {})
    return {name: as_predicate(predicate) for name, predicate in merged.items()}


def _evaluate(predicate: Callable[[str], Any], filename: str) -> Decided | Pending:
    result = predicate(filename)
    if inspect.isawaitable(result):
        return Pending(result)
    return Decided(result is True)


def _discard(outcomes: list[tuple[str, Pending]]) -> None:
    # Coroutines that were never scheduled must be closed to stay silent.
    for _, outcome in outcomes:
        if inspect.iscoroutine(outcome.decision):
            outcome.decision.close()


async def detect_entry_point(directory: Path | str, predicate: Predicate) -> EntryPoint | None:
    """Return the first file in ``directory`` that satisfies ``predicate``.

    The predicate is applied exactly once per filename. A synchronous
    ``True`` wins immediately. Awaitable answers are collected while the
    scan continues and are then awaited together; the earliest filename in
    listing order with a ``True`` answer wins, regardless of which answer
    arrived first.

    Raises:
        OSError: If the directory cannot be listed.
    """
    test = as_predicate(predicate)
    filenames = sorted(await asyncio.to_thread(os.listdir, directory))

    pending: list[tuple[str, Pending]] = []
    for filename in filenames:
        try:
            outcome = _evaluate(test, filename)
        except BaseException:
            _discard(pending)
            raise
        if isinstance(outcome, Pending):
            pending.append((filename, outcome))
        elif outcome.matched:
            _discard(pending)
            return EntryPoint(filename=filename)

    if not pending:
        return None

    tasks = [asyncio.ensure_future(outcome.decision) for _, outcome in pending]
    try:
        decisions = await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
    for (filename, _), decision in zip(pending, decisions):
        if decision is True:
            return EntryPoint(filename=filename)
    return None
