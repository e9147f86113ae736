"""Group metadata service — per-group parameters and server lookup."""

from __future__ import annotations

import logging

from outpost.models.groups import GroupParameters
from outpost.models.profile import Profile
from outpost.models.rules import Attribute, LiteralMatcher, Rule
from outpost.models.transport import KIND_CAPABILITIES, TransportMethod

logger = logging.getLogger(__name__)

_NO_PARAMETERS = GroupParameters()


class GroupMetadata:
    """Answers questions about groups and servers from a ``Profile``.

    Group names may carry a server prefix, ``server:group``, where
    ``server`` is a configured server name or ``kind+address`` notation.
    """

    def __init__(self, profile: Profile | None = None) -> None:
        self._profile = profile or Profile()

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def select_method(self) -> TransportMethod:
        return self._profile.select_method

    @property
    def secondary_methods(self) -> list[TransportMethod]:
        return list(self._profile.secondary_methods)

    def parameters(self, group: str | None) -> GroupParameters:
        if not group:
            return _NO_PARAMETERS
        return self._profile.groups.get(group, _NO_PARAMETERS)

    def server_method(self, server: str) -> TransportMethod | None:
        """Look up a server name, or parse ``kind+address`` of a known kind."""
        if server in self._profile.servers:
            return self._profile.servers[server]
        kind = server.partition("+")[0]
        known = {m.kind for m in self._profile.servers.values()} | set(KIND_CAPABILITIES)
        known.add(self._profile.select_method.kind)
        known.update(m.kind for m in self._profile.secondary_methods)
        if kind in known:
            return TransportMethod.parse(server)
        return None

    def split_group(self, group: str) -> tuple[TransportMethod | None, str]:
        """Split ``server:group`` into the server's method and the bare name."""
        prefix, sep, rest = group.partition(":")
        if sep and prefix and rest:
            method = self.server_method(prefix)
            if method is not None:
                return method, rest
        return None, group

    def method_for_group(self, group: str | None) -> TransportMethod | None:
        """The backend that owns *group*, or ``None`` when there is no group.

        Group parameter ``backend`` wins over a name prefix; unprefixed
        groups belong to the select method.
        """
        if not group:
            return None
        params = self.parameters(group)
        if params.backend is not None:
            return params.backend
        method, _ = self.split_group(group)
        return method or self._profile.select_method

    def configured_server_methods(self) -> list[TransportMethod]:
        return list(self._profile.servers.values())

    def open_server_methods(self) -> list[TransportMethod]:
        methods: list[TransportMethod] = []
        for name in self._profile.open_servers:
            method = self.server_method(name)
            if method is None:
                logger.warning("Open server %s is not configured; skipped", name)
                continue
            methods.append(method)
        return methods

    def is_discouraged(self, method: TransportMethod, group: str | None = None) -> bool:
        if method.kind in self._profile.discouraged_kinds:
            return True
        return self.parameters(group).discouraged

    def group_style_rule(self, group: str | None) -> Rule | None:
        """The group's own posting style as an always-firing rule."""
        attributes: list[Attribute] = self.parameters(group).posting_style
        if not attributes:
            return None
        return Rule(matcher=LiteralMatcher(value=True), attributes=attributes)
