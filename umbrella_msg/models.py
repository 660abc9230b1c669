"""Parsed MSG message schema returned by :class:`umbrella_msg.MsgParser`."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MsgAttachment(BaseModel):
    """A file attached to an Outlook message."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    filename: str = Field(description="Long filename, short filename, display name or placeholder")
    content_type: str | None = Field(
        default=None,
        description="MIME type from PR_ATTACH_MIME_TAG",
    )
    content_id: str | None = Field(
        default=None,
        description="Content-ID without angle brackets, matches cid: references in the HTML body",
    )
    data: bytes = Field(default=b"", description="Raw attachment payload")


class ParsedMsg(BaseModel):
    """Flattened view of one ``.msg`` file.

    Absent properties are ``None`` (or empty tuples) rather than placeholder
    text.  Instances are immutable once the parser returns them.
    """

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    subject: str | None = None
    sender_name: str | None = None
    sender_email: str | None = None
    recipients: tuple[str, ...] = Field(
        default=(),
        description="To recipients and recipient addresses, in stream order",
    )
    cc_recipients: tuple[str, ...] = ()
    sent_time: str | None = Field(
        default=None,
        description="Submit time, delivery time or the transport Date header",
    )
    body_text: str | None = None
    body_html: str | None = None
    body_rtf: str | None = Field(default=None, description="Decompressed RTF body")
    attachments: tuple[MsgAttachment, ...] = ()
