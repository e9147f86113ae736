"""ArchiveFanout — stores copies of a sent message in every destination.

Destinations are processed strictly one at a time, in order. A failure in
one destination is reported in its result and never stops the others;
duplicate names are each archived independently.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from outpost.backends.registry import BackendRegistry
from outpost.config import OutpostSettings
from outpost.core.destinations import resolve_destination_names
from outpost.core.encoding import render_message
from outpost.core.errors import BackendUnreachable, UserAborted
from outpost.core.group_metadata import GroupMetadata
from outpost.core.hasher import message_fingerprint
from outpost.core.method_resolver import Chooser
from outpost.core.view_state import LocalViewState, ViewState
from outpost.models.archive import (
    ArchiveDestination,
    ArchiveFailure,
    ArchiveResult,
    ArchiveSuccess,
    AttachmentPolicy,
)
from outpost.models.context import ComposeContext
from outpost.models.message import FinalizedMessage
from outpost.models.transport import TransportMethod

logger = logging.getLogger(__name__)


class ArchiveFanout:
    """Fans a finalized message out to its archive destinations.

    Parameters
    ----------
    metadata:
        Group parameters, server lookup and the global archive spec.
    registry:
        Source of backends for the resolved methods.
    settings:
        Archive header name, default archive method, mark-as-read and
        attachment externalization policy.
    view_state:
        Updated after every stored copy.
    chooser:
        Asked before creating a missing destination when
        ``settings.confirm_archive_create`` is on.
    """

    def __init__(
        self,
        metadata: GroupMetadata,
        registry: BackendRegistry,
        settings: OutpostSettings | None = None,
        *,
        view_state: ViewState | None = None,
        chooser: Chooser | None = None,
    ) -> None:
        self._metadata = metadata
        self._registry = registry
        self._settings = settings or OutpostSettings()
        self._view = view_state or LocalViewState()
        self._chooser = chooser
        self._policy = AttachmentPolicy.from_setting(self._settings.externalize_attachments)
        # (fingerprint, encoded bytes) of the last plain encoding
        self._encoded: tuple[str, bytes] | None = None

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_destination_names(self, context: ComposeContext) -> list[str]:
        return resolve_destination_names(context, self._metadata)

    def resolve_destination(
        self, name: str, method: TransportMethod | None = None
    ) -> ArchiveDestination:
        """Find the backend for destination *name*.

        Explicit *method* wins, then a ``server:`` prefix in the name, then
        the destination group's own ``backend`` parameter, then the default
        archive method.
        """
        prefixed, group = self._metadata.split_group(name)
        if method is None:
            method = prefixed
        if method is None:
            method = self._metadata.parameters(name).backend
        if method is None:
            method = TransportMethod.parse(self._settings.default_archive_method)
        return ArchiveDestination(name=name, group=group, method=method)

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    def archive(
        self,
        message: FinalizedMessage,
        destinations: Sequence[str] | None = None,
        context: ComposeContext | None = None,
        *,
        method: TransportMethod | None = None,
    ) -> list[ArchiveResult]:
        """Store *message* in each destination and report one result per name.

        When *destinations* is ``None`` they are resolved from *context*.

        Raises
        ------
        UserAborted
            If the user declines creating a missing destination.
        """
        context = context or ComposeContext()
        if destinations is None:
            destinations = self.resolve_destination_names(context)
        if not destinations:
            logger.debug("No archive destinations; archival skipped")
            return []

        results: list[ArchiveResult] = []
        for name in destinations:
            try:
                results.append(self._archive_one(message, name, method))
            except UserAborted:
                raise
            except BackendUnreachable as exc:
                logger.error("Archive %s: %s", name, exc)
                results.append(
                    ArchiveFailure(destination=name, reason=str(exc), unreachable=True)
                )
            except Exception as exc:  # noqa: BLE001
                logger.error("Archive %s failed: %s", name, exc)
                results.append(ArchiveFailure(destination=name, reason=str(exc)))

        failed = sum(1 for result in results if not result.ok)
        if failed:
            logger.warning(
                "Archived %d/%d copies, %d failed",
                len(results) - failed,
                len(results),
                failed,
            )
        return results

    def _archive_one(
        self,
        message: FinalizedMessage,
        name: str,
        method: TransportMethod | None,
    ) -> ArchiveSuccess:
        destination = self.resolve_destination(name, method)
        backend = self._registry.backend_for(destination.method)
        if not backend.is_open():
            backend.ensure_open()

        if not backend.has_destination(destination.group):
            if self._settings.confirm_archive_create:
                if self._chooser is None or not self._chooser.confirm(
                    f"Create archive group {destination.name}?"
                ):
                    raise UserAborted(f"Creation of {destination.name} declined")
            backend.create_destination(destination.group)

        externalize = self._policy.externalize(destination.group)
        content = self._encode(message, externalize)
        sequence_id = backend.accept_copy(destination.group, content)
        logger.info(
            "Archived copy in %s (%s) as %d",
            destination.name,
            destination.method.label,
            sequence_id,
        )

        if self._settings.mark_archived_read:
            self._view.mark_read(destination.name, sequence_id)
        else:
            self._view.refresh(destination.name)
        return ArchiveSuccess(destination=name, sequence_id=sequence_id)

    def _encode(self, message: FinalizedMessage, externalize: bool) -> bytes:
        """Encode *message*, reusing the last plain encoding when unchanged.

        Externalizing destinations are always encoded afresh.
        """
        strip = (self._settings.archive_header,)
        if externalize:
            return render_message(message, externalize=True, strip_headers=strip)

        fingerprint = message_fingerprint(message)
        if self._encoded is not None and self._encoded[0] == fingerprint:
            return self._encoded[1]
        content = render_message(message, strip_headers=strip)
        self._encoded = (fingerprint, content)
        return content
