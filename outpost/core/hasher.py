"""Canonical hashing helpers for message content fingerprints."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from outpost.models.message import FinalizedMessage


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def message_fingerprint(message: FinalizedMessage) -> str:
    """SHA-256 over headers, body and attachment digests.

    Two messages with the same fingerprint encode to the same bytes, which
    is what the archive encoder cache relies on.
    """
    payload = {
        "headers": [list(pair) for pair in message.headers],
        "body": message.body,
        "attachments": [
            {
                "filename": a.filename,
                "content_type": a.content_type,
                "path": a.path,
                "data": sha256_hex(a.data),
            }
            for a in message.attachments
        ],
    }
    return sha256_hex(canonical_json_bytes(payload))
