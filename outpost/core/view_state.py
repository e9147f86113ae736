"""Local view state of groups — read marks and pending refreshes."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ViewState(Protocol):
    """What archival needs to keep the reader's view consistent."""

    def mark_read(self, group: str, sequence_id: int) -> None:
        ...

    def refresh(self, group: str) -> None:
        ...


class LocalViewState:
    """In-process view state: read sequence ids and refresh counters per group."""

    def __init__(self) -> None:
        self._read: dict[str, set[int]] = {}
        self._refreshes: dict[str, int] = {}

    def mark_read(self, group: str, sequence_id: int) -> None:
        self._read.setdefault(group, set()).add(sequence_id)
        logger.debug("Marked %s:%d as read", group, sequence_id)

    def refresh(self, group: str) -> None:
        self._refreshes[group] = self._refreshes.get(group, 0) + 1
        logger.debug("Refreshed %s", group)

    def is_read(self, group: str, sequence_id: int) -> bool:
        return sequence_id in self._read.get(group, set())

    def refresh_count(self, group: str) -> int:
        return self._refreshes.get(group, 0)
