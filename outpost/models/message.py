"""Finalized message model — the frozen output of a compose session."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Attachment(BaseModel):
    """A file attached to a draft.

    ``path`` is set when the attachment came from a local file; only such
    attachments can be externalized in archive copies.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str = "application/octet-stream"
    data: bytes = b""
    path: str | None = None


class FinalizedMessage(BaseModel):
    """Headers, body and attachments of a message ready to be sent."""

    model_config = ConfigDict(frozen=True)

    headers: list[tuple[str, str]] = []
    body: str = ""
    attachments: list[Attachment] = []

    def header(self, name: str) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def header_names(self) -> list[str]:
        return [key for key, _ in self.headers]

    def without_header(self, name: str) -> FinalizedMessage:
        """Copy of this message with every *name* header removed."""
        wanted = name.lower()
        return self.model_copy(
            update={"headers": [(k, v) for k, v in self.headers if k.lower() != wanted]}
        )
