"""Transport method models — what carries a message and what it can do."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

# Capabilities of the backend kinds shipped in outpost.backends:
# kind -> (can_post, can_post_via_mail)
KIND_CAPABILITIES: dict[str, tuple[bool, bool]] = {
    "memory": (True, True),
    "spool": (False, True),
}


class TransportMethod(BaseModel):
    """A backend kind plus address, with its posting capabilities.

    May be given as a ``"kind+address"`` string (or bare ``"kind"``); the
    capability flags then default to the ones known for that kind.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    address: str = ""
    can_post: bool = False
    can_post_via_mail: bool = False

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            kind, _, address = data.partition("+")
            data = {"kind": kind, "address": address}
        if isinstance(data, dict) and "kind" in data:
            can_post, via_mail = KIND_CAPABILITIES.get(data["kind"], (False, False))
            data = {"can_post": can_post, "can_post_via_mail": via_mail, **data}
        return data

    @classmethod
    def parse(cls, value: str) -> TransportMethod:
        """Build a method from ``"kind+address"`` notation."""
        return cls.model_validate(value)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the backend this method points at."""
        return (self.kind, self.address)

    @property
    def label(self) -> str:
        """Human label: ``"address (kind)"`` or the bare kind."""
        if not self.address:
            return self.kind
        return f"{self.address} ({self.kind})"

    @property
    def can_send(self) -> bool:
        return self.can_post or self.can_post_via_mail

    def __str__(self) -> str:
        return f"{self.kind}+{self.address}" if self.address else self.kind


class PostMode(str, Enum):
    """How the default posting method is configured."""

    NATIVE = "native"  # the global select method
    CURRENT = "current"  # the backend of the current group, when allowed
    ACTIVE = "active"  # the backend the group is read from, when allowed
    EXPLICIT = "explicit"  # the configured method; several means the user picks
    ASK = "ask"  # every candidate, the user picks


class OverrideFlag(str, Enum):
    """Caller request that bends the default resolution."""

    NONE = "none"
    INVERSE = "inverse"
    CHOOSE = "choose"


class PostMethodSetting(BaseModel):
    """The configured default posting method."""

    model_config = ConfigDict(frozen=True)

    mode: PostMode = PostMode.NATIVE
    methods: list[TransportMethod] = []

    @property
    def explicit_method(self) -> TransportMethod | None:
        """The single configured method, if the setting names exactly one."""
        if self.mode == PostMode.EXPLICIT and len(self.methods) == 1:
            return self.methods[0]
        return None

    @property
    def ambiguous(self) -> bool:
        """Whether an explicit setting names several methods to pick from."""
        return self.mode == PostMode.EXPLICIT and len(self.methods) > 1
