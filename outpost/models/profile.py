"""Profile — the structural configuration of the pipeline.

Loaded from a JSON file (``OUTPOST_PROFILE_PATH``). Holds everything that
is more than a scalar setting: posting styles, methods, servers, group
parameters and the global archive rules.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from outpost.models.archive import ArchiveSpec
from outpost.models.groups import GroupParameters
from outpost.models.rules import Rule
from outpost.models.transport import PostMethodSetting, TransportMethod

logger = logging.getLogger(__name__)


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    select_method: TransportMethod = TransportMethod(kind="memory")
    post_method: PostMethodSetting = PostMethodSetting()
    secondary_methods: list[TransportMethod] = []
    servers: dict[str, TransportMethod] = {}
    open_servers: list[str] = []
    discouraged_kinds: list[str] = ["spool"]
    posting_styles: list[Rule] = []
    groups: dict[str, GroupParameters] = {}
    archive: ArchiveSpec | None = None


def load_profile(path: Path | str) -> Profile:
    """Read and validate a JSON profile file."""
    path = Path(path)
    profile = Profile.model_validate(json.loads(path.read_bytes()))
    logger.debug(
        "Loaded profile %s: %d posting-style rules, %d groups",
        path,
        len(profile.posting_styles),
        len(profile.groups),
    )
    return profile
