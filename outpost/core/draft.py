"""Draft and compose session.

A ``Draft`` is the mutable in-progress message. A ``ComposeSession`` owns
one draft plus an ordered list of ``(key, action)`` pairs; the actions run
in order when the session finalizes, against a copy of the draft, and the
copy replaces the draft only when every action succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from outpost.models.context import ComposeContext
from outpost.models.message import Attachment, FinalizedMessage

logger = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = "-- "

DraftAction = Callable[["Draft"], None]


class Draft:
    """Ordered headers (one value per name), body, signature and attachments."""

    def __init__(
        self,
        headers: Iterable[tuple[str, str]] | None = None,
        body: str = "",
        *,
        signature: str | None = None,
        attachments: Iterable[Attachment] | None = None,
    ) -> None:
        self._headers: list[tuple[str, str]] = []
        for name, value in headers or ():
            self.set_header(name, value)
        self.body = body
        self.signature = signature
        self.attachments: list[Attachment] = list(attachments or ())

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Return a copy of the header list."""
        return list(self._headers)

    def get(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self._headers:
            if key.lower() == wanted:
                return value
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def remove(self, name: str) -> bool:
        """Remove header *name*; return whether it was present."""
        wanted = name.lower()
        before = len(self._headers)
        self._headers = [(k, v) for k, v in self._headers if k.lower() != wanted]
        return len(self._headers) != before

    def insert(self, name: str, value: str) -> None:
        """Append header *name*. Callers remove the old value first."""
        self._headers.append((name, value))

    def set_header(self, name: str, value: str) -> None:
        self.remove(name)
        self.insert(name, value)

    def prepend_body(self, text: str) -> None:
        self.body = text + self.body

    def copy(self) -> Draft:
        return Draft(
            self._headers,
            self.body,
            signature=self.signature,
            attachments=self.attachments,
        )

    def rendered_body(self) -> str:
        """Body with the signature block appended, if any."""
        if not self.signature:
            return self.body
        body = self.body
        if body and not body.endswith("\n"):
            body += "\n"
        return f"{body}\n{SIGNATURE_SEPARATOR}\n{self.signature}\n"

    def to_message(self) -> FinalizedMessage:
        return FinalizedMessage(
            headers=self.headers,
            body=self.rendered_body(),
            attachments=list(self.attachments),
        )

    def __repr__(self) -> str:
        return f"Draft(headers={len(self._headers)}, body={len(self.body)} chars)"


class ComposeSession:
    """One compose operation: a draft, its context, and pending actions."""

    def __init__(self, draft: Draft, context: ComposeContext) -> None:
        self._draft = draft
        self._context = context
        self._actions: list[tuple[str, DraftAction]] = []
        self._finalized = False

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def context(self) -> ComposeContext:
        return self._context

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def pending_keys(self) -> list[str]:
        """Keys of the queued actions, in the order they will run."""
        return [key for key, _ in self._actions]

    def add_action(self, key: str, action: DraftAction) -> None:
        if self._finalized:
            raise RuntimeError("Compose session already finalized")
        self._actions.append((key, action))

    def finalize(self) -> Draft:
        """Run every queued action in order and commit the result.

        If an action raises, the draft is left untouched and the error
        propagates.
        """
        if self._finalized:
            return self._draft
        working = self._draft.copy()
        for key, action in self._actions:
            logger.debug("Applying %s to draft", key)
            action(working)
        self._draft = working
        self._actions.clear()
        self._finalized = True
        return self._draft

    def message(self) -> FinalizedMessage:
        """The finalized message; finalizes the session first if needed."""
        return self.finalize().to_message()
