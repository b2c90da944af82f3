"""RFC 2822 / MIME encoder for outgoing mail.

Builds the document the Gmail API expects in the ``raw`` field of a message:
headers, a base64 text body (or a ``multipart/alternative`` plain + HTML
pair), joined with CRLF and base64url-encoded as a whole.
"""

from __future__ import annotations

import base64
import secrets
import string
import time
from dataclasses import dataclass

from gmail_mcp.exceptions import MessageFormatError

CRLF = "\r\n"

_BOUNDARY_ALPHABET = string.digits + string.ascii_lowercase
_VERBATIM_HEADERS = ("to", "cc", "bcc", "in_reply_to", "references")


@dataclass(frozen=True)
class OutgoingMessage:
    """Structured fields of a message to send or save as a draft."""

    to: str
    subject: str
    body: str
    cc: str | None = None
    bcc: str | None = None
    html: str | None = None
    in_reply_to: str | None = None
    references: str | None = None


def b64encode_text(text: str) -> str:
    """Standard base64 of the UTF-8 bytes of ``text``."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def b64url_encode(data: str | bytes) -> str:
    """Unpadded base64url, as used by Gmail for ``raw`` payloads."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(data: str) -> bytes:
    """Inverse of :func:`b64url_encode`; restores the stripped padding."""
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def encode_subject(subject: str) -> str:
    """RFC 2047 encoded-word, used for every subject, ASCII or not."""
    return f"=?UTF-8?B?{b64encode_text(subject)}?="


def make_boundary(*parts: str) -> str:
    """Return a multipart boundary that occurs in none of ``parts``."""
    while True:
        suffix = "".join(secrets.choice(_BOUNDARY_ALPHABET) for _ in range(12))
        boundary = f"boundary_{int(time.time() * 1000)}_{suffix}"
        if not any(boundary in part for part in parts):
            return boundary


def _text_part(content_type: str, text: str) -> list[str]:
    return [
        f'Content-Type: {content_type}; charset="UTF-8"',
        "Content-Transfer-Encoding: base64",
        "",
        b64encode_text(text),
    ]


def _check_header_values(message: OutgoingMessage) -> None:
    # Subject is base64 encoded, so only the verbatim headers can break lines.
    for name in _VERBATIM_HEADERS:
        value = getattr(message, name)
        if value and ("\r" in value or "\n" in value):
            raise MessageFormatError(f"Header field '{name}' must not contain line breaks")


def build_mime_document(message: OutgoingMessage, boundary: str | None = None) -> str:
    """Compose the CRLF-joined RFC 2822 document for ``message``.

    ``boundary`` is only used when the message has an HTML body; one is
    generated when not given.

    Raises:
        MessageFormatError: A header field contains a line break.
    """
    _check_header_values(message)
    lines = [f"To: {message.to}"]
    if message.cc:
        lines.append(f"Cc: {message.cc}")
    if message.bcc:
        lines.append(f"Bcc: {message.bcc}")
    lines.append(f"Subject: {encode_subject(message.subject)}")
    if message.in_reply_to:
        lines.append(f"In-Reply-To: {message.in_reply_to}")
    if message.references:
        lines.append(f"References: {message.references}")
    lines.append("MIME-Version: 1.0")

    if message.html:
        boundary = boundary or make_boundary(message.body, message.html)
        lines.append(f'Content-Type: multipart/alternative; boundary="{boundary}"')
        lines.append("")
        lines.append(f"--{boundary}")
        lines.extend(_text_part("text/plain", message.body))
        lines.append(f"--{boundary}")
        lines.extend(_text_part("text/html", message.html))
        lines.append(f"--{boundary}--")
    else:
        lines.extend(_text_part("text/plain", message.body))

    return CRLF.join(lines)


def build_raw_message(message: OutgoingMessage, boundary: str | None = None) -> str:
    """Encode ``message`` as the base64url ``raw`` value for the Gmail API."""
    return b64url_encode(build_mime_document(message, boundary))
