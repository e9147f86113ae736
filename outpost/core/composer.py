"""Composition service — starts drafts for new and derived messages."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from email.utils import getaddresses
from typing import Protocol, runtime_checkable

from outpost.config import OutpostSettings
from outpost.core.draft import Draft
from outpost.models.context import ComposeMode
from outpost.models.message import FinalizedMessage

logger = logging.getLogger(__name__)


@runtime_checkable
class ComposerService(Protocol):
    """What the pipeline needs from the composition layer."""

    def start_new(self, recipients: Sequence[str], subject: str) -> Draft:
        ...

    def start_derived(self, source: FinalizedMessage, mode: ComposeMode) -> Draft:
        ...


def _prefixed(subject: str, prefix: str) -> str:
    if subject.lower().startswith(prefix.lower()):
        return subject
    return f"{prefix} {subject}".strip()


class SimpleComposer:
    """Header-level composer for new messages, replies, forwards and resends.

    New drafts start with the configured default signature; posting styles
    may replace or suppress it.
    """

    def __init__(self, settings: OutpostSettings | None = None) -> None:
        self._settings = settings or OutpostSettings()

    def _draft(self, headers: list[tuple[str, str]], body: str = "") -> Draft:
        return Draft(headers, body, signature=self._settings.default_signature)

    def start_new(self, recipients: Sequence[str], subject: str) -> Draft:
        headers: list[tuple[str, str]] = []
        if recipients:
            headers.append(("To", ", ".join(recipients)))
        headers.append(("Subject", subject))
        return self._draft(headers)

    def start_derived(self, source: FinalizedMessage, mode: ComposeMode) -> Draft:
        subject = source.header("Subject") or ""
        message_id = source.header("Message-ID")
        author = source.header("Reply-To") or source.header("From") or ""

        if mode in (ComposeMode.REPLY, ComposeMode.WIDE_REPLY):
            headers = [("To", author), ("Subject", _prefixed(subject, "Re:"))]
            if mode == ComposeMode.WIDE_REPLY:
                others = [
                    addr
                    for _, addr in getaddresses(
                        [source.header("To") or "", source.header("Cc") or ""]
                    )
                    if addr and addr not in author
                ]
                if others:
                    headers.append(("Cc", ", ".join(others)))
            if message_id:
                references = " ".join(
                    part for part in (source.header("References"), message_id) if part
                )
                headers.append(("In-Reply-To", message_id))
                headers.append(("References", references))
            return self._draft(headers)

        if mode == ComposeMode.FORWARD:
            forwarded = "\n".join(f"{k}: {v}" for k, v in source.headers)
            body = (
                "-------------------- Start of forwarded message --------------------\n"
                f"{forwarded}\n\n{source.body}"
                "-------------------- End of forwarded message --------------------\n"
            )
            return self._draft([("Subject", _prefixed(subject, "Fwd:"))], body)

        if mode == ComposeMode.SUPERSEDE:
            headers = [(k, v) for k, v in source.headers if k.lower() != "message-id"]
            if message_id:
                headers.append(("Supersedes", message_id))
            return Draft(headers, source.body, attachments=source.attachments)

        if mode == ComposeMode.RESEND:
            return Draft(source.headers, source.body, attachments=source.attachments)

        logger.debug("start_derived called with mode %s; starting a new draft", mode.value)
        return self.start_new([], subject)
