"""Transport backend protocol.

Every backend is addressed by a ``TransportMethod`` (kind + address) and
implements the ``TransportBackend`` protocol: opening, destination
management, accepting archive copies, and posting. The pipeline never
talks to a wire protocol directly.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from outpost.models.transport import TransportMethod


@runtime_checkable
class TransportBackend(Protocol):
    """Protocol that every outpost backend implements.

    Operations that need the backend to be reachable raise
    ``BackendUnreachable``; a backend that is up but refuses a request
    raises ``ArchiveRejected``.
    """

    @property
    def method(self) -> TransportMethod:
        """The method this backend serves."""
        ...

    def is_open(self) -> bool:
        ...

    def ensure_open(self) -> None:
        """Open the backend if needed; raise ``BackendUnreachable`` on failure."""
        ...

    def has_destination(self, name: str) -> bool:
        ...

    def create_destination(self, name: str) -> None:
        ...

    def accept_copy(self, name: str, content: bytes) -> int:
        """Store *content* in destination *name*; return its sequence id."""
        ...

    def retrieve(self, name: str, sequence_id: int) -> bytes:
        ...

    def post(self, content: bytes, *, via_mail: bool = False) -> str:
        """Transmit *content*; return a receipt identifying the posted copy."""
        ...

    def status_message(self) -> str:
        """Text describing the outcome of the last operation."""
        ...
