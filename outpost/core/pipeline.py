"""Outgoing pipeline — the central coordinator for compose and send.

Wires the RuleMatcher, MethodResolver and ArchiveFanout together:

    setup_draft:  resolve posting styles -> apply to draft -> add archive directive
    send:         resolve transport -> strip directive -> post -> archive copies
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial

from pydantic import BaseModel, ConfigDict

from outpost.backends.registry import BackendRegistry
from outpost.config import OutpostSettings
from outpost.core.archive_fanout import ArchiveFanout
from outpost.core.composer import ComposerService, SimpleComposer
from outpost.core.destinations import format_directive, parse_directive
from outpost.core.draft import ComposeSession, Draft
from outpost.core.encoding import render_message
from outpost.core.errors import OutpostError
from outpost.core.group_metadata import GroupMetadata
from outpost.core.method_resolver import Chooser, MethodResolver, ResolverState
from outpost.core.rule_matcher import RuleMatcher
from outpost.core.view_state import LocalViewState, ViewState
from outpost.models.archive import ArchiveResult
from outpost.models.context import ComposeContext
from outpost.models.message import FinalizedMessage
from outpost.models.profile import Profile
from outpost.models.rules import AttributeSet, Rule
from outpost.models.transport import OverrideFlag, TransportMethod

logger = logging.getLogger(__name__)


class SendReport(BaseModel):
    """Outcome of one send: the primary transmission plus archive results.

    The send succeeded whenever a report exists; archive failures are
    reported here and never raised.
    """

    model_config = ConfigDict(frozen=True)

    method: TransportMethod
    receipt: str
    archive_results: list[ArchiveResult] = []

    @property
    def partial_failure(self) -> bool:
        return any(not result.ok for result in self.archive_results)

    @property
    def archived(self) -> list[str]:
        return [result.destination for result in self.archive_results if result.ok]


def _set_header(name: str, value: str, draft: Draft) -> None:
    draft.set_header(name, value)


class OutgoingPipeline:
    """Compose-and-send pipeline.

    Parameters
    ----------
    profile:
        Posting styles, methods, groups and archive rules.
    settings:
        Runtime settings. Uses defaults (and the environment) if not given.
    registry:
        Backend registry; one rooted at ``settings.spool_path`` by default.
    chooser:
        Interactive prompts. Without one, choices abort the operation.
    view_state, composer, resolver_state:
        Collaborators; in-process defaults are created when omitted.
    """

    def __init__(
        self,
        profile: Profile | None = None,
        settings: OutpostSettings | None = None,
        *,
        registry: BackendRegistry | None = None,
        chooser: Chooser | None = None,
        view_state: ViewState | None = None,
        composer: ComposerService | None = None,
        resolver_state: ResolverState | None = None,
    ) -> None:
        self.settings = settings or OutpostSettings()
        self.metadata = GroupMetadata(profile)
        self.registry = registry or BackendRegistry(self.settings.spool_path)
        self.composer = composer or SimpleComposer(self.settings)
        self.matcher = RuleMatcher(self.settings)
        self.resolver = MethodResolver(self.metadata, chooser, resolver_state)
        self.fanout = ArchiveFanout(
            self.metadata,
            self.registry,
            self.settings,
            view_state=view_state or LocalViewState(),
            chooser=chooser,
        )

    # ------------------------------------------------------------------
    # Draft setup
    # ------------------------------------------------------------------

    def rules_for(self, context: ComposeContext) -> list[Rule]:
        """Global posting styles followed by the group's own style."""
        rules = list(self.metadata.profile.posting_styles)
        group_rule = self.metadata.group_style_rule(context.group)
        if group_rule is not None:
            rules.append(group_rule)
        return rules

    def resolve_attributes(self, context: ComposeContext) -> AttributeSet:
        return self.matcher.resolve(self.rules_for(context), context)

    def setup_draft(
        self,
        context: ComposeContext,
        recipients: Sequence[str] = (),
        subject: str = "",
        *,
        source: FinalizedMessage | None = None,
        body: str = "",
    ) -> ComposeSession:
        """Start a draft and apply posting styles and the archive directive.

        Raises
        ------
        MalformedRule
            If a rule predicate or callable fails. No attribute is applied.
        """
        if source is not None:
            draft = self.composer.start_derived(source, context.mode)
        else:
            draft = self.composer.start_new(recipients, subject)
        if body:
            draft.body = body + draft.body

        session = ComposeSession(draft, context)
        attributes = self.resolve_attributes(context)
        self.matcher.apply(attributes, session)

        names = self.fanout.resolve_destination_names(context)
        if names:
            session.add_action(
                "archive",
                partial(_set_header, self.settings.archive_header, format_directive(names)),
            )
        session.finalize()
        logger.info(
            "Draft ready for %s: %d attributes, %d archive destinations",
            context.group or "(no group)",
            len(attributes),
            len(names),
        )
        return session

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def resolve_transport(
        self,
        override: OverrideFlag = OverrideFlag.NONE,
        group: str | None = None,
        interactive_allowed: bool = True,
    ) -> TransportMethod:
        return self.resolver.resolve(override, group, interactive_allowed)

    def send(
        self,
        session: ComposeSession,
        *,
        override: OverrideFlag = OverrideFlag.NONE,
        interactive_allowed: bool = True,
    ) -> SendReport:
        """Transmit the session's message, then archive copies of it.

        The archive directive header is removed from the transmitted text
        and drives the fan-out afterwards.

        Raises
        ------
        UserAborted
            If the transport choice is declined.
        BackendUnreachable
            If the transport backend cannot be opened.
        """
        message = session.message()
        group = session.context.group
        method = self.resolve_transport(override, group, interactive_allowed)
        if not method.can_send:
            raise OutpostError(f"{method.label} can neither post nor mail")

        backend = self.registry.backend_for(method)
        backend.ensure_open()
        header = self.settings.archive_header
        content = render_message(message, strip_headers=(header,))
        receipt = backend.post(content, via_mail=not method.can_post)
        logger.info("Sent via %s: %s", method.label, receipt)

        directive = message.header(header)
        names = parse_directive(directive) if directive else []
        results = self.fanout.archive(message, names, session.context)
        return SendReport(method=method, receipt=receipt, archive_results=results)

    # ------------------------------------------------------------------
    # Archive
    # ------------------------------------------------------------------

    def archive(
        self,
        message: FinalizedMessage,
        destinations: Sequence[str] | None = None,
        context: ComposeContext | None = None,
    ) -> list[ArchiveResult]:
        return self.fanout.archive(message, destinations, context)
