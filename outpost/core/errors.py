"""Error taxonomy for the outgoing pipeline."""

from __future__ import annotations


class OutpostError(RuntimeError):
    """Base class for every error raised by the pipeline."""


class UserAborted(OutpostError):
    """An interactive choice was declined; the whole operation stops."""


class BackendUnreachable(OutpostError):
    """A transport backend could not be opened or reached."""

    def __init__(self, label: str, detail: str = "") -> None:
        self.label = label
        self.detail = detail
        message = f"Backend {label} is unreachable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ArchiveRejected(OutpostError):
    """A backend refused to store or create an archive copy."""


class FileReadError(OutpostError):
    """A file-backed attribute could not be read.

    Recovered inside rule resolution: the attribute is treated as absent.
    """

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        message = f"Cannot read attribute file {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MalformedRule(OutpostError):
    """A rule predicate or callable raised during evaluation."""
