"""Backend registry — one backend instance per (kind, address)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from outpost.backends import TransportBackend
from outpost.backends.memory import MemoryBackend
from outpost.backends.spool import SpoolBackend
from outpost.core.errors import BackendUnreachable
from outpost.models.transport import TransportMethod

logger = logging.getLogger(__name__)

BackendFactory = Callable[[TransportMethod], TransportBackend]


class BackendRegistry:
    """Creates and caches backends for transport methods.

    Instances registered with ``register`` take precedence; other methods
    are built on first use from the factory registered for their kind.
    """

    def __init__(self, spool_path: Path | str = Path(".outpost/spool")) -> None:
        self._backends: dict[tuple[str, str], TransportBackend] = {}
        self._factories: dict[str, BackendFactory] = {
            "memory": lambda method: MemoryBackend(method),
            "spool": lambda method: SpoolBackend(method, spool_path),
        }

    def register(self, backend: TransportBackend) -> None:
        """Register a ready-made backend for its method."""
        self._backends[backend.method.key] = backend
        logger.info("Registered backend: %s", backend.method.label)

    def register_factory(self, kind: str, factory: BackendFactory) -> None:
        self._factories[kind] = factory

    def backend_for(self, method: TransportMethod) -> TransportBackend:
        """Return the backend serving *method*.

        Raises
        ------
        BackendUnreachable
            If no backend is registered and no factory knows the kind.
        """
        backend = self._backends.get(method.key)
        if backend is not None:
            return backend
        factory = self._factories.get(method.kind)
        if factory is None:
            raise BackendUnreachable(method.label, f"no backend for kind {method.kind!r}")
        backend = factory(method)
        self._backends[method.key] = backend
        return backend

    @property
    def registered(self) -> list[TransportBackend]:
        return list(self._backends.values())
