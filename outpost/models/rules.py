"""Posting-style rule models.

A rule pairs a matcher with an ordered list of attribute bindings. Matchers
and value sources are closed tagged unions discriminated by ``kind``, so a
profile file can spell them as plain JSON objects::

    {"matcher": {"kind": "group", "pattern": "^lists\\\\.(\\\\w+)"},
     "attributes": [["organization", "Lists Inc"],
                    ["reply-to", "\\\\1@lists.example.org"]]}

Shorthands: a bare string matcher is a group regex, a bare boolean is a
literal, and an attribute may be a ``[key, value]`` pair whose value is a
literal.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ImportString,
    field_validator,
    model_validator,
)


def check_pattern(pattern: str) -> str:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
    return pattern


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


class GroupMatcher(BaseModel):
    """Regex searched in the group name (or the context's match string)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    pattern: str

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, pattern: str) -> str:
        return check_pattern(pattern)


class HeaderMatcher(BaseModel):
    """Regex searched in one header of the article being answered."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["header"] = "header"
    header: str
    pattern: str

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, pattern: str) -> str:
        return check_pattern(pattern)


class VariableMatcher(BaseModel):
    """Fires when the named context variable holds a truthy value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["variable"] = "variable"
    name: str


class PredicateMatcher(BaseModel):
    """Fires when ``function(context)`` returns a truthy value.

    ``function`` may be a callable or a dotted import path.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["predicate"] = "predicate"
    function: ImportString[Callable[..., Any]]


class LiteralMatcher(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: bool


Matcher = Annotated[
    Union[GroupMatcher, HeaderMatcher, VariableMatcher, PredicateMatcher, LiteralMatcher],
    Field(discriminator="kind"),
]


def coerce_matcher(value: Any) -> Any:
    """Expand the matcher shorthands (string regex, boolean, callable)."""
    if isinstance(value, bool):
        return {"kind": "literal", "value": value}
    if isinstance(value, str):
        return {"kind": "group", "pattern": value}
    if callable(value) and not isinstance(value, BaseModel):
        return {"kind": "predicate", "function": value}
    return value


# ---------------------------------------------------------------------------
# Value sources
# ---------------------------------------------------------------------------


class LiteralValue(BaseModel):
    """A literal string; ``False``/``None`` means "remove or suppress"."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: str | Literal[False] | None


class VariableValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["variable"] = "variable"
    name: str


class CallableValue(BaseModel):
    """Value computed by ``function(context)``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["callable"] = "callable"
    function: ImportString[Callable[..., Any]]


class FileValue(BaseModel):
    """Value read from a file on disk."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: str


ValueSource = Annotated[
    Union[LiteralValue, VariableValue, CallableValue, FileValue],
    Field(discriminator="kind"),
]


class Attribute(BaseModel):
    """One ``key -> value-source`` binding of a rule."""

    model_config = ConfigDict(frozen=True)

    key: str
    source: ValueSource

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) == 2:
            data = {"key": data[0], "source": data[1]}
        if isinstance(data, dict):
            data = dict(data)
            if "source" not in data and "value" in data:
                data["source"] = data.pop("value")
            source = data.get("source")
            if source is None or isinstance(source, (str, bool)):
                data["source"] = {"kind": "literal", "value": source}
            elif callable(source) and not isinstance(source, BaseModel):
                data["source"] = {"kind": "callable", "function": source}
        return data

    @field_validator("key")
    @classmethod
    def _normalise_key(cls, key: str) -> str:
        key = key.strip().lower()
        if not key:
            raise ValueError("attribute key must not be empty")
        return key


class Rule(BaseModel):
    """A matcher plus the attributes it contributes when it fires."""

    model_config = ConfigDict(frozen=True)

    matcher: Matcher
    attributes: list[Attribute] = []

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) == 2:
            data = {"matcher": data[0], "attributes": data[1]}
        if isinstance(data, dict) and "matcher" in data:
            data = {**data, "matcher": coerce_matcher(data["matcher"])}
        return data


# ---------------------------------------------------------------------------
# Resolution result
# ---------------------------------------------------------------------------


class ResolvedAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str | None
    from_file: bool = False


class AttributeSet(BaseModel):
    """Resolved attributes, at most one value per key.

    Iteration follows the order in which each key was last written.
    """

    model_config = ConfigDict(frozen=True)

    entries: dict[str, ResolvedAttribute] = {}

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def keys(self) -> list[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> ResolvedAttribute | None:
        return self.entries.get(key)

    def value(self, key: str) -> str | None:
        entry = self.entries.get(key)
        return entry.value if entry is not None else None

    def items(self) -> list[tuple[str, ResolvedAttribute]]:
        return list(self.entries.items())

    def as_dict(self) -> dict[str, str | None]:
        """Plain ``key -> value`` view."""
        return {key: entry.value for key, entry in self.entries.items()}
