"""Spool backend — archive copies as numbered files in a directory tree.

Layout: {base_path}/{address or kind}/{group with dots as slashes}/{seq}

Posting writes the message to ``{base_path}/{address or kind}/.outbox``
for a separate mailer to pick up, so a spool backend can post via mail
but cannot post news.
"""

from __future__ import annotations

import logging
from pathlib import Path

from outpost.core.errors import ArchiveRejected, BackendUnreachable
from outpost.models.transport import TransportMethod

logger = logging.getLogger(__name__)


class SpoolBackend:
    """Directory-backed backend.

    Parameters
    ----------
    method:
        The method this backend serves, e.g. ``spool+archive``.
    base_path:
        Root directory shared by all spool backends.
    """

    def __init__(self, method: TransportMethod, base_path: Path | str) -> None:
        self._method = method
        self._root = Path(base_path) / (method.address or method.kind)
        self._open = False
        self._status = ""

    @property
    def method(self) -> TransportMethod:
        return self._method

    @property
    def root(self) -> Path:
        return self._root

    def _group_dir(self, name: str) -> Path:
        parts = [part for part in name.replace("/", ".").split(".") if part]
        if not parts:
            raise ArchiveRejected(f"Invalid destination name {name!r}")
        return self._root.joinpath(*parts)

    def is_open(self) -> bool:
        return self._open

    def ensure_open(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._open = False
            self._status = str(exc)
            raise BackendUnreachable(self._method.label, str(exc)) from exc
        self._open = True

    def has_destination(self, name: str) -> bool:
        return self._group_dir(name).is_dir()

    def create_destination(self, name: str) -> None:
        self._require_open()
        try:
            self._group_dir(name).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._status = str(exc)
            raise ArchiveRejected(f"Cannot create {name}: {exc}") from exc
        logger.info("SpoolBackend %s: created %s", self._method.label, name)

    def sequence_ids(self, name: str) -> list[int]:
        directory = self._group_dir(name)
        if not directory.is_dir():
            return []
        return sorted(int(p.name) for p in directory.iterdir() if p.name.isdigit())

    def accept_copy(self, name: str, content: bytes) -> int:
        self._require_open()
        directory = self._group_dir(name)
        if not directory.is_dir():
            self._status = f"no such destination {name}"
            raise ArchiveRejected(self._status)
        sequence_id = max(self.sequence_ids(name), default=0) + 1
        try:
            (directory / str(sequence_id)).write_bytes(content)
        except OSError as exc:
            self._status = str(exc)
            raise ArchiveRejected(f"Cannot store copy in {name}: {exc}") from exc
        self._status = f"stored {name}:{sequence_id}"
        logger.debug("SpoolBackend: wrote %s/%d", directory, sequence_id)
        return sequence_id

    def retrieve(self, name: str, sequence_id: int) -> bytes:
        path = self._group_dir(name) / str(sequence_id)
        if not path.exists():
            raise KeyError(f"{name}:{sequence_id} not found")
        return path.read_bytes()

    def post(self, content: bytes, *, via_mail: bool = False) -> str:
        self._require_open()
        if not via_mail:
            raise ArchiveRejected(f"{self._method.label} cannot post news")
        outbox = self._root / ".outbox"
        outbox.mkdir(parents=True, exist_ok=True)
        number = len(list(outbox.iterdir())) + 1
        target = outbox / f"{number:06d}.eml"
        target.write_bytes(content)
        self._status = f"queued {target.name}"
        return str(target)

    def status_message(self) -> str:
        return self._status

    def _require_open(self) -> None:
        if not self._open:
            raise BackendUnreachable(self._method.label, "backend is not open")

    def __repr__(self) -> str:
        return f"SpoolBackend(method={str(self._method)!r}, root={str(self._root)!r})"
