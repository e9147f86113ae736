"""Archival fan-out models — destinations, policies and per-copy results."""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ImportString, model_validator

from outpost.models.rules import Matcher, coerce_matcher
from outpost.models.transport import TransportMethod


class ArchiveDestination(BaseModel):
    """A destination name resolved to the backend that stores it.

    ``name`` is the name as listed in the archival directive; ``group`` is
    the same name with any server prefix removed.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    group: str
    method: TransportMethod


class ArchiveSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    destination: str
    sequence_id: int

    @property
    def ok(self) -> bool:
        return True


class ArchiveFailure(BaseModel):
    """A destination that could not be written; ``unreachable`` marks backend outages."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    destination: str
    reason: str
    unreachable: bool = False

    @property
    def ok(self) -> bool:
        return False


ArchiveResult = Annotated[Union[ArchiveSuccess, ArchiveFailure], Field(discriminator="status")]


class ArchiveRule(BaseModel):
    """First-match rule of the global archive setting."""

    model_config = ConfigDict(frozen=True)

    matcher: Matcher
    destinations: list[str] = []

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) == 2:
            data = {"matcher": data[0], "destinations": data[1]}
        if isinstance(data, dict):
            data = dict(data)
            if "matcher" in data:
                data["matcher"] = coerce_matcher(data["matcher"])
            if isinstance(data.get("destinations"), str):
                data["destinations"] = [data["destinations"]]
        return data


class ArchiveSpec(BaseModel):
    """The global archive setting.

    Exactly one form is normally used: fixed ``names``, a ``function``
    taking the group name, or ordered ``rules``. Accepts the plain forms
    too: a string, a list of strings, a callable, or a list of
    ``[matcher, names]`` pairs.
    """

    model_config = ConfigDict(frozen=True)

    names: list[str] = []
    function: ImportString[Callable[..., Any]] | None = None
    rules: list[ArchiveRule] = []

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"names": [data]}
        if isinstance(data, (list, tuple)):
            if all(isinstance(item, str) for item in data):
                return {"names": list(data)}
            return {"rules": list(data)}
        if callable(data) and not isinstance(data, BaseModel):
            return {"function": data}
        return data


class ExternalizeMode(str, Enum):
    ALWAYS = "always"
    NEVER = "never"
    PATTERN = "pattern"


class AttachmentPolicy(BaseModel):
    """Whether attachments are stored by reference in a destination."""

    model_config = ConfigDict(frozen=True)

    mode: ExternalizeMode = ExternalizeMode.NEVER
    pattern: str | None = None

    @classmethod
    def from_setting(cls, value: str | bool | None) -> AttachmentPolicy:
        """Parse ``"always"``, ``"never"`` or a destination-name regex."""
        if value is True or value == "always":
            return cls(mode=ExternalizeMode.ALWAYS)
        if not value or value == "never":
            return cls(mode=ExternalizeMode.NEVER)
        return cls(mode=ExternalizeMode.PATTERN, pattern=value)

    def externalize(self, destination: str) -> bool:
        if self.mode == ExternalizeMode.ALWAYS:
            return True
        if self.mode == ExternalizeMode.PATTERN and self.pattern:
            return re.search(self.pattern, destination) is not None
        return False
