"""Archival directive header codec and destination-name resolution.

The directive is one header whose value lists destination names separated
by commas. Names containing a space, a comma or a double quote are
double-quoted, with backslash escapes for `"` and `\\` inside the quotes::

    Gcc: archive.sent, "spool+archive:misc mail"
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from outpost.core.group_metadata import GroupMetadata
from outpost.core.rule_matcher import call_guarded, evaluate_matcher
from outpost.models.archive import ArchiveSpec
from outpost.models.context import ComposeContext

logger = logging.getLogger(__name__)


_QUOTE_TRIGGERS = frozenset(' ,"')


def _quote(name: str) -> str:
    if not _QUOTE_TRIGGERS.intersection(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_directive(names: Sequence[str]) -> str:
    """Render destination names as a directive header value."""
    return ", ".join(_quote(name) for name in names)


def parse_directive(value: str) -> list[str]:
    """Split a directive header value back into destination names.

    Commas inside double quotes do not separate names, and a backslash
    there takes the next character literally. Empty items are dropped.
    """
    names: list[str] = []
    current: list[str] = []
    quoted = False
    escaped = False
    for char in value:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\" and quoted:
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == "," and not quoted:
            names.append("".join(current))
            current = []
        else:
            current.append(char)
    names.append("".join(current))
    return [name.strip() for name in names if name.strip()]


def _override_names(group: str | None, override: bool | str | list[bool | str]) -> list[str]:
    forms = override if isinstance(override, list) else [override]
    names: list[str] = []
    for form in forms:
        if form is True:
            if group:
                names.append(group)
        elif isinstance(form, str) and form:
            names.append(form)
    return names


def _as_names(value: object) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item]
    return [str(value)]


def _spec_names(spec: ArchiveSpec, context: ComposeContext) -> list[str]:
    if spec.names:
        return list(spec.names)
    if spec.function is not None:
        name = getattr(spec.function, "__name__", repr(spec.function))
        return _as_names(call_guarded(spec.function, f"archive function {name}", context.group or ""))
    for rule in spec.rules:
        if evaluate_matcher(rule.matcher, context).fired:
            return list(rule.destinations)
    return []


def resolve_destination_names(
    context: ComposeContext,
    metadata: GroupMetadata,
) -> list[str]:
    """Destination names for a message composed in *context*.

    A per-group ``archive`` parameter replaces every other source. Else the
    profile's global archive spec applies. Else there are no destinations.
    Order is preserved and duplicates are kept.
    """
    override = metadata.parameters(context.group).archive
    if override is not None:
        names = _override_names(context.group, override)
        logger.debug("Group %s archive override: %s", context.group, names)
        return names

    spec = metadata.profile.archive
    if spec is None:
        return []
    names = _spec_names(spec, context)
    logger.debug("Archive destinations for %s: %s", context.group, names)
    return names
