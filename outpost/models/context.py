"""Compose context — the value object every pipeline stage reads from."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ComposeMode(str, Enum):
    """How the draft was started."""

    NEW = "new"
    REPLY = "reply"
    WIDE_REPLY = "wide-reply"
    FORWARD = "forward"
    SUPERSEDE = "supersede"
    RESEND = "resend"


class ComposeContext(BaseModel):
    """Everything the rules may look at while a message is composed.

    Created once per compose/send operation and discarded after archival.
    """

    model_config = ConfigDict(frozen=True)

    group: str | None = None
    charset: str | None = None
    match_string: str | None = None  # defaults to the group name
    article_headers: dict[str, str] = {}
    variables: dict[str, Any] = {}
    mode: ComposeMode = ComposeMode.NEW

    @property
    def subject_string(self) -> str:
        """The string group matchers are searched in."""
        if self.match_string is not None:
            return self.match_string
        return self.group or ""

    def article_header(self, name: str) -> str | None:
        """Case-insensitive lookup in the headers of the article being answered."""
        wanted = name.lower()
        for key, value in self.article_headers.items():
            if key.lower() == wanted:
                return value
        return None
