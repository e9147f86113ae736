"""Shared test fixtures for Outpost."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from outpost.backends.memory import MemoryBackend
from outpost.backends.registry import BackendRegistry
from outpost.config import OutpostSettings
from outpost.core.pipeline import OutgoingPipeline
from outpost.models.context import ComposeContext
from outpost.models.message import FinalizedMessage
from outpost.models.profile import Profile
from outpost.models.transport import TransportMethod


class ScriptedChooser:
    """Chooser that answers from a script and records every prompt."""

    def __init__(self, answer: str | None = None, confirm: bool = True) -> None:
        self.answer = answer
        self.confirm_answer = confirm
        self.prompts: list[tuple[str, list[str]]] = []
        self.confirmations: list[str] = []

    def choose(self, prompt: str, labels: Sequence[str]) -> str | None:
        self.prompts.append((prompt, list(labels)))
        return self.answer

    def confirm(self, prompt: str) -> bool:
        self.confirmations.append(prompt)
        return self.confirm_answer


@pytest.fixture
def settings(tmp_path: Path) -> OutpostSettings:
    """Settings isolated from the environment, rooted in a temp directory."""
    sig_dir = tmp_path / "signatures"
    sig_dir.mkdir()
    return OutpostSettings(
        _env_file=None,
        user_name="",
        user_address="me@example.org",
        signature_directory=sig_dir,
        default_signature=None,
        spool_path=tmp_path / "spool",
        default_archive_method="memory+archive",
        mark_archived_read=True,
        externalize_attachments="never",
        confirm_archive_create=False,
    )


@pytest.fixture
def registry(tmp_path: Path) -> BackendRegistry:
    """Registry whose memory backends are created on demand."""
    return BackendRegistry(tmp_path / "spool")


@pytest.fixture
def archive_backend(registry: BackendRegistry) -> MemoryBackend:
    """The default archive backend (memory+archive), pre-registered."""
    backend = MemoryBackend(TransportMethod.parse("memory+archive"))
    registry.register(backend)
    return backend


@pytest.fixture
def make_context() -> Callable[..., ComposeContext]:
    """Factory fixture: build a ComposeContext with sensible defaults."""

    def _factory(group: str | None = "lists.foo", **overrides: Any) -> ComposeContext:
        return ComposeContext(group=group, **overrides)

    return _factory


@pytest.fixture
def make_message() -> Callable[..., FinalizedMessage]:
    """Factory fixture: build a FinalizedMessage with sensible defaults."""

    def _factory(
        subject: str = "Hello",
        body: str = "Body text\n",
        extra_headers: list[tuple[str, str]] | None = None,
        **overrides: Any,
    ) -> FinalizedMessage:
        headers = [
            ("From", "me@example.org"),
            ("To", "you@example.org"),
            ("Subject", subject),
            *(extra_headers or []),
        ]
        return FinalizedMessage(headers=headers, body=body, **overrides)

    return _factory


@pytest.fixture
def make_pipeline(
    settings: OutpostSettings, registry: BackendRegistry
) -> Callable[..., OutgoingPipeline]:
    """Factory fixture: build an OutgoingPipeline over the shared registry."""

    def _factory(profile: Profile | dict | None = None, **kwargs: Any) -> OutgoingPipeline:
        if isinstance(profile, dict):
            profile = Profile.model_validate(profile)
        kwargs.setdefault("registry", registry)
        return OutgoingPipeline(profile, kwargs.pop("settings", settings), **kwargs)

    return _factory


@pytest.fixture
def make_chooser() -> Callable[..., ScriptedChooser]:
    """Factory fixture: build a scripted chooser."""
    return ScriptedChooser
