"""Tests for OutpostSettings — defaults and environment overrides."""

from __future__ import annotations

from pathlib import Path

from outpost.config import OutpostSettings


class TestOutpostSettings:
    def test_defaults(self, monkeypatch):
        for name in ("OUTPOST_ARCHIVE_HEADER", "OUTPOST_DEFAULT_ARCHIVE_METHOD", "OUTPOST_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = OutpostSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.archive_header == "Gcc"
        assert settings.default_archive_method == "spool+archive"
        assert settings.mark_archived_read is True
        assert settings.externalize_attachments == "never"
        assert settings.confirm_archive_create is False

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OUTPOST_USER_ADDRESS", "jane@example.org")
        monkeypatch.setenv("OUTPOST_SIGNATURE_DIRECTORY", str(tmp_path))
        monkeypatch.setenv("OUTPOST_MARK_ARCHIVED_READ", "false")
        settings = OutpostSettings(_env_file=None)
        assert settings.user_address == "jane@example.org"
        assert settings.signature_directory == tmp_path
        assert settings.mark_archived_read is False

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("OUTPOST_ARCHIVE_HEADER", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("OUTPOST_ARCHIVE_HEADER=X-Archive\n", encoding="utf-8")
        settings = OutpostSettings(_env_file=env_file)
        assert settings.archive_header == "X-Archive"

    def test_spool_path_is_a_path(self, monkeypatch):
        monkeypatch.setenv("OUTPOST_SPOOL_PATH", "/var/spool/outpost")
        assert OutpostSettings(_env_file=None).spool_path == Path("/var/spool/outpost")
