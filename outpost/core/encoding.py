"""Rendering a finalized message to bytes.

Messages without attachments are rendered verbatim: header lines, a blank
line, the body. Attachments turn the message into ``multipart/mixed``;
externalized attachments become ``message/external-body`` parts that
reference the local file instead of carrying its data.
"""

from __future__ import annotations

from collections.abc import Sequence
from email.message import EmailMessage

from outpost.models.message import Attachment, FinalizedMessage


def _external_part(attachment: Attachment) -> EmailMessage:
    part = EmailMessage()
    part.add_header(
        "Content-Type",
        "message/external-body",
        access_type="local-file",
        name=attachment.path or attachment.filename,
    )
    part.set_payload(f"Content-Type: {attachment.content_type}\n\n")
    return part


def render_message(
    message: FinalizedMessage,
    *,
    externalize: bool = False,
    strip_headers: Sequence[str] = (),
) -> bytes:
    """Encode *message*, dropping every header named in *strip_headers*."""
    stripped = {name.lower() for name in strip_headers}
    headers = [(k, v) for k, v in message.headers if k.lower() not in stripped]

    if not message.attachments:
        head = "".join(f"{name}: {value}\n" for name, value in headers)
        return f"{head}\n{message.body}".encode("utf-8")

    mime = EmailMessage()
    for name, value in headers:
        mime[name] = value
    mime.set_content(message.body)
    for attachment in message.attachments:
        if externalize and attachment.path:
            if not mime.is_multipart():
                mime.make_mixed()
            mime.attach(_external_part(attachment))
            continue
        maintype, _, subtype = attachment.content_type.partition("/")
        mime.add_attachment(
            attachment.data,
            maintype=maintype,
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return mime.as_bytes()
