"""Top-level property resolution: stream name + bytes → field effect.

Each recognised property tag maps to a :class:`PropertyRule` in
:data:`TOP_LEVEL_RULES`.  Resolving a stream never touches a message; it
returns a small effect value that :class:`~umbrella_msg.builder.MessageBuilder`
folds into the result, so precedence lives in one place.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import structlog

from .decoding import decode_text
from .errors import RtfDecompressionError
from .rtf import decompress_rtf
from .tags import PropertyTag, top_level_tag
from .timestamps import filetime_to_display, read_filetime

logger = structlog.get_logger()


class MessageField(str, Enum):
    """Scalar and list fields of :class:`~umbrella_msg.models.ParsedMsg`."""

    SUBJECT = "subject"
    SENDER_NAME = "sender_name"
    SENDER_EMAIL = "sender_email"
    RECIPIENTS = "recipients"
    CC_RECIPIENTS = "cc_recipients"
    BODY_TEXT = "body_text"
    BODY_HTML = "body_html"
    BODY_RTF = "body_rtf"


class SentTimePriority(Enum):
    """Source of a sent-time candidate."""

    HEADER = "header"
    DELIVERY = "delivery"
    SUBMIT = "submit"

    @property
    def overrides(self) -> bool:
        """Whether this source replaces a value that is already set."""
        return self is SentTimePriority.SUBMIT


class RuleKind(Enum):
    TEXT = "text"
    ADDRESS_LIST = "address_list"
    SMTP_LIST = "smtp_list"
    HEADER_DATE = "header_date"
    FILETIME = "filetime"
    BODY = "body"
    RTF = "rtf"


@dataclass(frozen=True)
class PropertyRule:
    kind: RuleKind
    field: MessageField | None = None
    priority: SentTimePriority | None = None


# ------------------------------------------------------------------
# Effects
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SetField:
    field: MessageField
    value: str


@dataclass(frozen=True)
class AppendAddresses:
    field: MessageField
    values: tuple[str, ...]


@dataclass(frozen=True)
class OfferSentTime:
    value: str
    priority: SentTimePriority


FieldEffect = SetField | AppendAddresses | OfferSentTime


TOP_LEVEL_RULES: Mapping[str, PropertyRule] = MappingProxyType({
    PropertyTag.SUBJECT: PropertyRule(RuleKind.TEXT, MessageField.SUBJECT),
    PropertyTag.SENDER_NAME: PropertyRule(RuleKind.TEXT, MessageField.SENDER_NAME),
    PropertyTag.SENDER_EMAIL: PropertyRule(RuleKind.TEXT, MessageField.SENDER_EMAIL),
    PropertyTag.SENDER_SMTP_ADDRESS: PropertyRule(RuleKind.TEXT, MessageField.SENDER_EMAIL),
    PropertyTag.SENT_REPRESENTING_EMAIL: PropertyRule(RuleKind.TEXT, MessageField.SENDER_EMAIL),
    PropertyTag.DISPLAY_TO: PropertyRule(RuleKind.ADDRESS_LIST, MessageField.RECIPIENTS),
    PropertyTag.RECIPIENT_EMAIL: PropertyRule(RuleKind.SMTP_LIST, MessageField.RECIPIENTS),
    PropertyTag.RECEIVED_BY_EMAIL: PropertyRule(RuleKind.SMTP_LIST, MessageField.RECIPIENTS),
    PropertyTag.DISPLAY_CC: PropertyRule(RuleKind.ADDRESS_LIST, MessageField.CC_RECIPIENTS),
    PropertyTag.TRANSPORT_HEADERS: PropertyRule(
        RuleKind.HEADER_DATE, priority=SentTimePriority.HEADER
    ),
    PropertyTag.CLIENT_SUBMIT_TIME: PropertyRule(
        RuleKind.FILETIME, priority=SentTimePriority.SUBMIT
    ),
    PropertyTag.MESSAGE_DELIVERY_TIME: PropertyRule(
        RuleKind.FILETIME, priority=SentTimePriority.DELIVERY
    ),
    PropertyTag.BODY: PropertyRule(RuleKind.BODY, MessageField.BODY_TEXT),
    PropertyTag.BODY_HTML: PropertyRule(RuleKind.BODY, MessageField.BODY_HTML),
    PropertyTag.RTF_COMPRESSED: PropertyRule(RuleKind.RTF, MessageField.BODY_RTF),
})


def resolve_property(
    stream_name: str,
    data: bytes,
    *,
    legacy_codec: str = "gb18030",
) -> FieldEffect | None:
    """Interpret one top-level property stream.

    Returns ``None`` for unknown tags, names too short to carry a tag and
    values that fail to decode.
    """
    tag = top_level_tag(stream_name)
    if tag is None:
        return None
    rule = TOP_LEVEL_RULES.get(tag)
    if rule is None:
        return None
    return _HANDLERS[rule.kind](rule, data, legacy_codec)


def split_addresses(text: str, *, require_at: bool = False) -> tuple[str, ...]:
    """Split a ``;``-separated display list into trimmed, non-empty entries."""
    entries = (part.strip() for part in text.split(";"))
    return tuple(e for e in entries if e and (not require_at or "@" in e))


# ------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------


def _text(rule: PropertyRule, data: bytes, codec: str) -> FieldEffect | None:
    decoded = decode_text(data, legacy_codec=codec)
    if decoded is None:
        return None
    return SetField(rule.field, decoded.text)


def _body(rule: PropertyRule, data: bytes, codec: str) -> FieldEffect | None:
    decoded = decode_text(data, legacy_codec=codec)
    if decoded is None or not decoded.text.strip():
        return None
    return SetField(rule.field, decoded.text)


def _address_list(rule: PropertyRule, data: bytes, codec: str) -> FieldEffect | None:
    decoded = decode_text(data, legacy_codec=codec)
    if decoded is None:
        return None
    values = split_addresses(decoded.text, require_at=rule.kind is RuleKind.SMTP_LIST)
    if not values:
        return None
    return AppendAddresses(rule.field, values)


def _header_date(rule: PropertyRule, data: bytes, codec: str) -> FieldEffect | None:
    decoded = decode_text(data, legacy_codec=codec)
    if decoded is None:
        return None
    # Only LF and CRLF end a header line.
    for line in decoded.text.split("\n"):
        line = line.removesuffix("\r")
        if line.lower().startswith("date:"):
            value = line[5:].strip()
            return OfferSentTime(value, rule.priority) if value else None
    return None


def _filetime(rule: PropertyRule, data: bytes, codec: str) -> FieldEffect | None:
    ticks = read_filetime(data)
    if ticks is None:
        return None
    display = filetime_to_display(ticks)
    if display is None:
        return None
    return OfferSentTime(display, rule.priority)


def _rtf(rule: PropertyRule, data: bytes, codec: str) -> FieldEffect | None:
    try:
        text = decompress_rtf(data)
    except RtfDecompressionError as exc:
        logger.debug("msg_rtf_decompress_failed", error=str(exc), size=len(data))
        return None
    if not text.strip():
        return None
    return SetField(rule.field, text)


_HANDLERS: dict[RuleKind, Callable[[PropertyRule, bytes, str], FieldEffect | None]] = {
    RuleKind.TEXT: _text,
    RuleKind.BODY: _body,
    RuleKind.ADDRESS_LIST: _address_list,
    RuleKind.SMTP_LIST: _address_list,
    RuleKind.HEADER_DATE: _header_date,
    RuleKind.FILETIME: _filetime,
    RuleKind.RTF: _rtf,
}
