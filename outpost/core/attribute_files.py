"""Reading file-backed style attributes.

Pure functions, independent of any compose session: path normalisation,
reading, and trimming of trailing blank lines.
"""

from __future__ import annotations

from pathlib import Path

from outpost.core.errors import FileReadError

# file-backed key -> the key it resolves to
FILE_KEYS: dict[str, str] = {
    "signature-file": "signature",
    "x-face-file": "x-face",
}


def normalize_key(key: str) -> tuple[str, bool]:
    """Map ``signature-file``/``x-face-file`` to their plain key plus a file flag."""
    key = key.lower()
    if key in FILE_KEYS:
        return FILE_KEYS[key], True
    return key, False


def resolve_attribute_path(
    path: str | Path,
    key: str,
    signature_directory: Path | None = None,
) -> Path:
    """Expand ``~`` and anchor relative signature paths in *signature_directory*."""
    resolved = Path(path).expanduser()
    if key == "signature" and signature_directory is not None and not resolved.is_absolute():
        resolved = Path(signature_directory).expanduser() / resolved
    return resolved


def trim_trailing_blank_lines(text: str) -> str:
    """Drop trailing whitespace-only lines and the final newline."""
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def read_attribute_file(path: Path) -> str:
    """Read *path* as UTF-8 text with trailing blank lines trimmed.

    Raises
    ------
    FileReadError
        If the file is missing, unreadable or not valid UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(str(path), str(exc)) from exc
    return trim_trailing_blank_lines(text)


def load_attribute_file(
    path: str | Path,
    key: str,
    signature_directory: Path | None = None,
) -> str:
    """Resolve and read a file-backed attribute in one step."""
    return read_attribute_file(resolve_attribute_path(path, key, signature_directory))
