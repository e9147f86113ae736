"""Per-group parameters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from outpost.models.rules import Attribute
from outpost.models.transport import TransportMethod


class GroupParameters(BaseModel):
    """Parameters attached to one group.

    ``archive`` overrides where copies of messages posted from this group
    are stored: ``True`` is the group itself, a string names a destination,
    a list combines both forms, and ``False`` disables archiving.
    """

    model_config = ConfigDict(frozen=True)

    backend: TransportMethod | None = None
    posting_style: list[Attribute] = []
    archive: bool | str | list[bool | str] | None = None
    discouraged: bool = False
