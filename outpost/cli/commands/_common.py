"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

from outpost.cli.prompts import FixedChooser, RichChooser
from outpost.config import OutpostSettings
from outpost.core.method_resolver import Chooser
from outpost.core.pipeline import OutgoingPipeline
from outpost.models.profile import Profile, load_profile


def build_pipeline(
    profile_path: Path | None,
    *,
    interactive: bool = True,
    method_label: str | None = None,
) -> OutgoingPipeline:
    """Load settings and profile, configure logging, and build a pipeline.

    With *method_label* every method choice is answered with that label and
    archive creation is confirmed without asking.
    """
    settings = OutpostSettings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    path = profile_path or settings.profile_path
    profile = load_profile(path) if path else Profile()

    chooser: Chooser | None = None
    if method_label:
        chooser = FixedChooser(method_label, confirm=True)
    elif interactive:
        chooser = RichChooser()
    return OutgoingPipeline(profile, settings, chooser=chooser)
