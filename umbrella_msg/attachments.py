"""Attachment assembly from one ``__attach_version1.0_#XXXXXXXX`` storage."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .config import MsgParserConfig
from .decoding import decode_text
from .errors import EmptyAttachmentError
from .models import MsgAttachment
from .tags import PropertyTag, attachment_tag


class AttachmentRule(Enum):
    """How an attachment property stream updates the attachment."""

    FILENAME = "filename"
    FILENAME_FALLBACK = "filename_fallback"
    FILENAME_EXTENSION = "filename_extension"
    CONTENT_TYPE = "content_type"
    CONTENT_ID = "content_id"
    DATA = "data"


ATTACHMENT_RULES: Mapping[str, AttachmentRule] = MappingProxyType({
    PropertyTag.ATTACH_LONG_FILENAME: AttachmentRule.FILENAME,
    PropertyTag.ATTACH_FILENAME: AttachmentRule.FILENAME_FALLBACK,
    PropertyTag.ATTACH_DISPLAY_NAME: AttachmentRule.FILENAME_FALLBACK,
    PropertyTag.ATTACH_EXTENSION: AttachmentRule.FILENAME_EXTENSION,
    PropertyTag.ATTACH_MIME_TAG: AttachmentRule.CONTENT_TYPE,
    PropertyTag.ATTACH_CONTENT_ID: AttachmentRule.CONTENT_ID,
    PropertyTag.ATTACH_DATA_BIN: AttachmentRule.DATA,
})

_PLACEHOLDER_ONLY = frozenset({AttachmentRule.FILENAME_FALLBACK, AttachmentRule.FILENAME_EXTENSION})


@dataclass
class _Draft:
    filename: str
    content_type: str | None = None
    content_id: str | None = None
    data: bytes = b""


def normalize_content_id(value: str) -> str:
    """Strip surrounding whitespace and angle brackets: ``" <a@b> "`` → ``"a@b"``."""
    return value.strip().strip("<>").strip()


def assemble_attachment(
    streams: Iterable[tuple[str, bytes]],
    *,
    config: MsgParserConfig | None = None,
) -> MsgAttachment:
    """Build an attachment from its ``(stream_name, data)`` pairs, in order.

    Filename precedence: the long filename always wins; short filename and
    display name only replace the placeholder; the extension only
    synthesises ``<stem><ext>`` while the placeholder is still in place.

    Raises :class:`EmptyAttachmentError` when no stream supplied either a
    filename or a payload.
    """
    config = config or MsgParserConfig()
    unnamed = config.unnamed_filename
    draft = _Draft(filename=unnamed)

    for name, data in streams:
        tag = attachment_tag(name)
        if tag is None:
            continue
        rule = ATTACHMENT_RULES.get(tag)
        if rule is None:
            continue

        if rule is AttachmentRule.DATA:
            draft.data = bytes(data)
            continue

        if rule in _PLACEHOLDER_ONLY and draft.filename != unnamed:
            continue

        decoded = decode_text(data, legacy_codec=config.legacy_codec)
        if decoded is None:
            continue

        if rule in (AttachmentRule.FILENAME, AttachmentRule.FILENAME_FALLBACK):
            draft.filename = decoded.text
        elif rule is AttachmentRule.FILENAME_EXTENSION:
            draft.filename = f"{config.extension_filename_stem}{decoded.text}"
        elif rule is AttachmentRule.CONTENT_TYPE:
            draft.content_type = decoded.text
        elif rule is AttachmentRule.CONTENT_ID:
            content_id = normalize_content_id(decoded.text)
            if content_id:
                draft.content_id = content_id

    if not draft.data and draft.filename == unnamed:
        raise EmptyAttachmentError("Attachment has neither a filename nor data")

    return MsgAttachment(
        filename=draft.filename,
        content_type=draft.content_type,
        content_id=draft.content_id,
        data=draft.data,
    )
