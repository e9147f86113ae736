"""Runtime settings — env-driven.

Reads from a .env file and OUTPOST_* environment variables. Structural
configuration (rules, methods, groups) lives in a profile file, see
``outpost.models.profile``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class OutpostSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export OUTPOST_USER_ADDRESS=jane@example.org
        export OUTPOST_SIGNATURE_DIRECTORY=~/.signatures
        export OUTPOST_EXTERNALIZE_ATTACHMENTS='^archive\\.'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OUTPOST_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Identity used when a posting style sets only half of the From header
    user_name: str = ""
    user_address: str = "user@localhost"

    # Signatures
    signature_directory: Path | None = None
    default_signature: str | None = None

    # Archival
    archive_header: str = "Gcc"
    default_archive_method: str = "spool+archive"
    mark_archived_read: bool = True
    # "always", "never" or a regex matched against the destination name
    externalize_attachments: str = "never"
    confirm_archive_create: bool = False

    # Spool backend root
    spool_path: Path = Path(".outpost/spool")

    profile_path: Path | None = None
