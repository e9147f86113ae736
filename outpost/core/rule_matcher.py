"""RuleMatcher — resolves posting styles against a compose context.

Every rule whose matcher fires contributes its attributes, in declaration
order; a later firing rule overwrites an earlier value for the same key.
The group's own posting style is appended by the caller as the last rule,
so it wins every key it defines.

Resolution produces an ``AttributeSet``; ``apply`` turns that set into
ordered actions on a ``ComposeSession``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from email.errors import HeaderParseError
from email.headerregistry import Address
from functools import partial
from typing import Any, NamedTuple

from outpost.config import OutpostSettings
from outpost.core.attribute_files import load_attribute_file, normalize_key
from outpost.core.draft import ComposeSession, Draft
from outpost.core.errors import FileReadError, MalformedRule
from outpost.models.context import ComposeContext
from outpost.models.rules import (
    AttributeSet,
    CallableValue,
    FileValue,
    GroupMatcher,
    HeaderMatcher,
    LiteralMatcher,
    LiteralValue,
    PredicateMatcher,
    ResolvedAttribute,
    Rule,
    VariableMatcher,
    VariableValue,
)

logger = logging.getLogger(__name__)

# \0..\9 and \& in literal values stand for groups of the last regex match
_BACKREF = re.compile(r"\\([&0-9])")

# Keys that never become generic headers
IDENTITY_KEYS = ("name", "address")


class MatchOutcome(NamedTuple):
    fired: bool
    match: re.Match[str] | None = None


# ---------------------------------------------------------------------------
# Matcher evaluation: one function per matcher kind
# ---------------------------------------------------------------------------


def _evaluate_group(matcher: GroupMatcher, context: ComposeContext) -> MatchOutcome:
    found = re.search(matcher.pattern, context.subject_string)
    return MatchOutcome(found is not None, found)


def _evaluate_header(matcher: HeaderMatcher, context: ComposeContext) -> MatchOutcome:
    value = context.article_header(matcher.header)
    if value is None:
        return MatchOutcome(False)
    found = re.search(matcher.pattern, value)
    return MatchOutcome(found is not None, found)


def _evaluate_variable(matcher: VariableMatcher, context: ComposeContext) -> MatchOutcome:
    if matcher.name not in context.variables:
        return MatchOutcome(False)
    value = context.variables[matcher.name]
    if callable(value):
        value = call_guarded(value, f"variable {matcher.name}")
    return MatchOutcome(bool(value))


def _evaluate_predicate(matcher: PredicateMatcher, context: ComposeContext) -> MatchOutcome:
    name = getattr(matcher.function, "__name__", repr(matcher.function))
    return MatchOutcome(bool(call_guarded(matcher.function, f"predicate {name}", context)))


def _evaluate_literal(matcher: LiteralMatcher, context: ComposeContext) -> MatchOutcome:
    return MatchOutcome(matcher.value)


_EVALUATORS: dict[str, Callable[[Any, ComposeContext], MatchOutcome]] = {
    "group": _evaluate_group,
    "header": _evaluate_header,
    "variable": _evaluate_variable,
    "predicate": _evaluate_predicate,
    "literal": _evaluate_literal,
}


def evaluate_matcher(matcher: Any, context: ComposeContext) -> MatchOutcome:
    """Evaluate any matcher variant against *context*.

    Raises
    ------
    MalformedRule
        If a predicate or variable callable raises.
    """
    return _EVALUATORS[matcher.kind](matcher, context)


def call_guarded(function: Callable[..., Any], what: str, *args: Any) -> Any:
    try:
        return function(*args)
    except Exception as exc:
        raise MalformedRule(f"{what} failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def substitute_backrefs(value: str, match: re.Match[str] | None) -> str:
    """Replace ``\\N``/``\\&`` tokens with groups of *match*.

    Only done when the match produced at least one capture group; groups
    that did not participate become empty strings.
    """
    if match is None or match.lastindex is None:
        return value

    def _group(token: re.Match[str]) -> str:
        ref = token.group(1)
        index = 0 if ref == "&" else int(ref)
        if index > len(match.groups()):
            return ""
        return match.group(index) or ""

    return _BACKREF.sub(_group, value)


def header_name(key: str) -> str:
    """``x-face`` -> ``X-Face``."""
    return "-".join(part.capitalize() for part in key.split("-"))


def format_from(name: str | None, address: str) -> str:
    """Format the From header as ``Name <address>``, or the bare address.

    The name is kept as written (quoted only when it holds specials);
    encoding for the wire is left to the renderer.
    """
    if not name:
        return address
    try:
        return str(Address(display_name=name, addr_spec=address))
    except (ValueError, HeaderParseError) as exc:
        raise MalformedRule(f"Invalid From address {address!r}: {exc}") from exc


def _as_text(value: Any) -> str | None:
    if value is None or value is False:
        return None
    return value if isinstance(value, str) else str(value)


# ---------------------------------------------------------------------------
# Draft actions
# ---------------------------------------------------------------------------


def _replace_header(name: str, value: str | None, draft: Draft) -> None:
    draft.remove(name)
    if value:
        draft.insert(name, value)


def _set_signature(value: str | None, draft: Draft) -> None:
    draft.signature = value


def _prepend_body(text: str, draft: Draft) -> None:
    draft.prepend_body(text)


class RuleMatcher:
    """Resolves ordered rules into an ``AttributeSet`` and applies it.

    Parameters
    ----------
    settings:
        Supplies the signature directory and the default identity used
        when a style sets only the name or only the address.
    """

    def __init__(self, settings: OutpostSettings | None = None) -> None:
        self._settings = settings or OutpostSettings()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, rules: Sequence[Rule], context: ComposeContext) -> AttributeSet:
        """Evaluate *rules* in order and collect the attributes of every firing rule.

        Raises
        ------
        MalformedRule
            If a predicate or callable raises. Nothing is applied.
        """
        values: dict[str, ResolvedAttribute] = {}
        last_match: re.Match[str] | None = None

        for index, rule in enumerate(rules):
            outcome = evaluate_matcher(rule.matcher, context)
            if not outcome.fired:
                continue
            if outcome.match is not None:
                last_match = outcome.match
            logger.debug("Rule %d (%s) fired", index, rule.matcher.kind)

            for attribute in rule.attributes:
                key, from_file = normalize_key(attribute.key)
                try:
                    resolved = self._resolve_value(
                        attribute.source, key, from_file, context, last_match
                    )
                except FileReadError as exc:
                    logger.warning("%s; %s left unset", exc, attribute.key)
                    continue
                # Re-insert so iteration order follows the last write
                values.pop(key, None)
                values[key] = resolved

        return AttributeSet(entries=values)

    def _resolve_value(
        self,
        source: Any,
        key: str,
        from_file: bool,
        context: ComposeContext,
        match: re.Match[str] | None,
    ) -> ResolvedAttribute:
        if isinstance(source, FileValue):
            return ResolvedAttribute(value=self._read(source.path, key), from_file=True)

        if isinstance(source, LiteralValue):
            value = source.value
            if isinstance(value, str):
                value = substitute_backrefs(value, match)
        elif isinstance(source, VariableValue):
            if source.name not in context.variables:
                raise MalformedRule(f"Unknown variable {source.name!r} for {key}")
            value = context.variables[source.name]
            if callable(value):
                value = call_guarded(value, f"variable {source.name}")
        elif isinstance(source, CallableValue):
            name = getattr(source.function, "__name__", repr(source.function))
            value = call_guarded(source.function, f"callable {name} for {key}", context)
        else:
            raise MalformedRule(f"Unsupported value source for {key}: {source!r}")

        text = _as_text(value)
        if from_file and text is not None:
            return ResolvedAttribute(value=self._read(text, key), from_file=True)
        return ResolvedAttribute(value=text, from_file=from_file)

    def _read(self, path: str, key: str) -> str:
        return load_attribute_file(path, key, self._settings.signature_directory)

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply(self, attributes: AttributeSet, session: ComposeSession) -> None:
        """Queue the actions that put *attributes* into the session's draft.

        ``name``/``address`` produce a single From header, ``body`` is
        prepended to the body, ``signature`` replaces (or suppresses) the
        signature, and every other key replaces the header of that name.
        """
        if any(key in attributes for key in IDENTITY_KEYS):
            name = attributes.value("name") if "name" in attributes else self._settings.user_name
            address = attributes.value("address") or self._settings.user_address
            session.add_action("from", partial(_replace_header, "From", format_from(name, address)))

        for key, entry in attributes.items():
            if key in IDENTITY_KEYS:
                continue
            if key == "body":
                if entry.value:
                    session.add_action(key, partial(_prepend_body, entry.value))
            elif key == "signature":
                session.add_action(key, partial(_set_signature, entry.value or None))
            else:
                session.add_action(key, partial(_replace_header, header_name(key), entry.value))
