"""In-process backend — destinations and outbox kept in memory."""

from __future__ import annotations

import logging

from outpost.core.errors import ArchiveRejected, BackendUnreachable
from outpost.models.transport import TransportMethod

logger = logging.getLogger(__name__)


class MemoryBackend:
    """Volatile backend for tests and single-process use.

    Parameters
    ----------
    method:
        The method this backend serves. Defaults to ``memory``.
    reachable:
        When ``False`` every attempt to open the backend fails, which
        simulates a server that is down.
    auto_create:
        Whether ``create_destination`` is allowed.
    """

    def __init__(
        self,
        method: TransportMethod | None = None,
        *,
        reachable: bool = True,
        auto_create: bool = True,
    ) -> None:
        self._method = method or TransportMethod(kind="memory")
        self.reachable = reachable
        self._auto_create = auto_create
        self._open = False
        self._destinations: dict[str, dict[int, bytes]] = {}
        self._outbox: list[bytes] = []
        self._status = ""

    @property
    def method(self) -> TransportMethod:
        return self._method

    @property
    def outbox(self) -> list[bytes]:
        """Return a copy of everything posted through this backend."""
        return list(self._outbox)

    def is_open(self) -> bool:
        return self._open and self.reachable

    def ensure_open(self) -> None:
        if not self.reachable:
            self._open = False
            self._status = "connection refused"
            raise BackendUnreachable(self._method.label, self._status)
        self._open = True

    def has_destination(self, name: str) -> bool:
        return name in self._destinations

    def create_destination(self, name: str) -> None:
        self._require_open()
        if not self._auto_create:
            self._status = f"creation of {name} not permitted"
            raise ArchiveRejected(self._status)
        self._destinations.setdefault(name, {})
        logger.info("MemoryBackend %s: created %s", self._method.label, name)

    def accept_copy(self, name: str, content: bytes) -> int:
        self._require_open()
        if name not in self._destinations:
            self._status = f"no such destination {name}"
            raise ArchiveRejected(self._status)
        store = self._destinations[name]
        sequence_id = max(store, default=0) + 1
        store[sequence_id] = content
        self._status = f"stored {name}:{sequence_id}"
        return sequence_id

    def retrieve(self, name: str, sequence_id: int) -> bytes:
        try:
            return self._destinations[name][sequence_id]
        except KeyError:
            raise KeyError(f"{name}:{sequence_id} not found") from None

    def sequence_ids(self, name: str) -> list[int]:
        return sorted(self._destinations.get(name, {}))

    def post(self, content: bytes, *, via_mail: bool = False) -> str:
        self._require_open()
        self._outbox.append(content)
        self._status = f"posted {len(self._outbox)}"
        return f"{self._method}#{len(self._outbox)}"

    def status_message(self) -> str:
        return self._status

    def _require_open(self) -> None:
        if not self.is_open():
            raise BackendUnreachable(self._method.label, "backend is not open")

    def __repr__(self) -> str:
        return f"MemoryBackend(method={str(self._method)!r}, reachable={self.reachable})"
