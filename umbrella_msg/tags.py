"""MAPI property tags and the stream-name format that carries them.

Property streams are named ``__substg1.0_TTTTYYYY`` where ``TTTT`` is the
property ID and ``YYYY`` the property type, both as upper-case hex.  The
tag is read at a fixed position; a name too short to hold one has no tag.
"""

from __future__ import annotations

from enum import Enum

PROPERTY_STREAM_PREFIX = "__substg1.0_"
ATTACHMENT_DIR_PREFIX = "__attach_version1.0_"

# Top-level names are the 12-char prefix, a 4-char tag and a 4-char type.
_TOP_LEVEL_TAG_START = 12
_TOP_LEVEL_TAG_END = 16
_TOP_LEVEL_MIN_LENGTH = 20

_TYPE_SUFFIX_LENGTH = 4
_ATTACHMENT_MIN_LENGTH = 8


class PropertyTag(str, Enum):
    """Property IDs interpreted by the parser."""

    SUBJECT = "0037"
    CLIENT_SUBMIT_TIME = "0039"
    SENT_REPRESENTING_EMAIL = "0065"
    RECEIVED_BY_EMAIL = "0076"
    TRANSPORT_HEADERS = "007D"
    SENDER_NAME = "0C1A"
    SENDER_EMAIL = "0C1F"
    DISPLAY_CC = "0E02"
    RECIPIENT_EMAIL = "0E03"
    DISPLAY_TO = "0E04"
    MESSAGE_DELIVERY_TIME = "0E06"
    BODY = "1000"
    RTF_COMPRESSED = "1009"
    BODY_HTML = "1013"
    SENDER_SMTP_ADDRESS = "5D01"

    ATTACH_DISPLAY_NAME = "3001"
    ATTACH_DATA_BIN = "3701"
    ATTACH_EXTENSION = "3703"
    ATTACH_FILENAME = "3704"
    ATTACH_LONG_FILENAME = "3707"
    ATTACH_MIME_TAG = "370E"
    ATTACH_CONTENT_ID = "3712"


def top_level_tag(stream_name: str) -> str | None:
    """Return the 4-character tag of a top-level property stream name."""
    if len(stream_name) < _TOP_LEVEL_MIN_LENGTH:
        return None
    return stream_name[_TOP_LEVEL_TAG_START:_TOP_LEVEL_TAG_END]


def attachment_tag(stream_name: str) -> str | None:
    """Return the 4 characters preceding the type suffix of *stream_name*."""
    if len(stream_name) < _ATTACHMENT_MIN_LENGTH:
        return None
    end = len(stream_name) - _TYPE_SUFFIX_LENGTH
    return stream_name[end - 4 : end]


def is_property_stream(name: str) -> bool:
    return name.startswith(PROPERTY_STREAM_PREFIX)


def is_attachment_dir(name: str) -> bool:
    return name.startswith(ATTACHMENT_DIR_PREFIX)
