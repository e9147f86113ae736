"""MethodResolver — picks the transport method for sending a message.

Decision order
--------------
1. No backend can be found for the group: the explicitly configured
   method (several are offered as in step 3), else the global select
   method.
2. ``OverrideFlag.INVERSE``: the opposite of the default. The global
   select method when the default is the group's own backend, else the
   group's own backend.
3. Mode ``ask``, an explicit setting naming several methods, or
   ``OverrideFlag.CHOOSE``: offer every known method that can post (or
   post via mail) and let the user pick. A silent resolution reuses the
   last label picked in this process.
4. Mode ``current`` or ``active``: the group's backend, if it can post and
   is not discouraged.
5. Mode ``explicit`` with one method: that method.
6. Otherwise: the global select method.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from outpost.core.errors import UserAborted
from outpost.core.group_metadata import GroupMetadata
from outpost.models.transport import OverrideFlag, PostMode, TransportMethod

logger = logging.getLogger(__name__)


@runtime_checkable
class Chooser(Protocol):
    """Interactive prompts used by the resolver and the archive fan-out."""

    def choose(self, prompt: str, labels: Sequence[str]) -> str | None:
        """Return one of *labels*, or ``None`` when the user declines."""
        ...

    def confirm(self, prompt: str) -> bool:
        ...


class ResolverState:
    """Process-wide memory of the last interactively chosen method label."""

    def __init__(self, last_label: str | None = None) -> None:
        self._lock = threading.Lock()
        self._last_label = last_label

    @property
    def last_label(self) -> str | None:
        with self._lock:
            return self._last_label

    def remember(self, label: str) -> None:
        with self._lock:
            self._last_label = label

    def clear(self) -> None:
        with self._lock:
            self._last_label = None


class MethodResolver:
    """Resolves the ``TransportMethod`` used to send or cancel a message.

    Parameters
    ----------
    metadata:
        Group and server lookups plus the configured post method.
    chooser:
        Prompt implementation for step 3. Without one, any resolution that
        needs a choice raises ``UserAborted``.
    state:
        Holds the last chosen label; share one instance across resolvers
        to share the memory.
    """

    def __init__(
        self,
        metadata: GroupMetadata,
        chooser: Chooser | None = None,
        state: ResolverState | None = None,
    ) -> None:
        self._metadata = metadata
        self._chooser = chooser
        self._state = state or ResolverState()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        override: OverrideFlag = OverrideFlag.NONE,
        group: str | None = None,
        interactive_allowed: bool = True,
    ) -> TransportMethod:
        """Return the method that should carry a message posted from *group*.

        Raises
        ------
        UserAborted
            If a choice is required and the user makes none.
        """
        setting = self._metadata.profile.post_method
        select = self._metadata.select_method
        group_method = self._metadata.method_for_group(group)

        if group_method is None:
            if setting.ambiguous:
                return self._choose(None, interactive_allowed)
            method = setting.explicit_method or select
            logger.debug("No backend for group %r; using %s", group, method)
            return method

        if override == OverrideFlag.INVERSE:
            default = self._default(group_method, group)
            method = select if default == group_method else group_method
            logger.debug("Inverse of default %s for %s: %s", default, group, method)
            return method

        if override == OverrideFlag.CHOOSE or setting.mode == PostMode.ASK or setting.ambiguous:
            return self._choose(group_method, interactive_allowed)

        return self._default(group_method, group)

    def resolve_cancel(self, group: str | None) -> TransportMethod:
        """Method for canceling or superseding an article of *group*.

        Cancels go through the group's own backend when it can post.
        """
        group_method = self._metadata.method_for_group(group)
        if group_method is not None and group_method.can_post:
            return group_method
        return self.resolve(OverrideFlag.NONE, group, interactive_allowed=False)

    def candidates(self, group_method: TransportMethod | None) -> list[TransportMethod]:
        """Every known method able to post, deduplicated in discovery order."""
        metadata = self._metadata
        pool: list[TransportMethod] = [
            *metadata.profile.post_method.methods,
            *metadata.secondary_methods,
            *metadata.configured_server_methods(),
            *metadata.open_server_methods(),
            metadata.select_method,
        ]
        if group_method is not None:
            pool.append(group_method)

        seen: set[tuple[str, str]] = set()
        result: list[TransportMethod] = []
        for method in pool:
            if not method.can_send or method.key in seen:
                continue
            seen.add(method.key)
            result.append(method)
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _default(self, group_method: TransportMethod, group: str | None) -> TransportMethod:
        """Steps 4 to 6: the method used when nothing asks for a choice."""
        setting = self._metadata.profile.post_method
        if (
            setting.mode in (PostMode.CURRENT, PostMode.ACTIVE)
            and group_method.can_post
            and not self._metadata.is_discouraged(group_method, group)
        ):
            return group_method
        if setting.explicit_method is not None:
            return setting.explicit_method
        return self._metadata.select_method

    def _choose(
        self, group_method: TransportMethod | None, interactive_allowed: bool
    ) -> TransportMethod:
        by_label = {method.label: method for method in self.candidates(group_method)}
        cached = self._state.last_label

        if not interactive_allowed and cached is not None:
            if cached not in by_label:
                raise UserAborted(f"Previously chosen method {cached!r} is no longer available")
            logger.debug("Reusing posting method %s", cached)
            return by_label[cached]

        if self._chooser is None:
            raise UserAborted("A posting method must be chosen but no prompt is available")

        label = self._chooser.choose("Posting method", list(by_label))
        if not label or label not in by_label:
            raise UserAborted("No posting method chosen")
        self._state.remember(label)
        logger.info("Posting method chosen: %s", label)
        return by_label[label]
