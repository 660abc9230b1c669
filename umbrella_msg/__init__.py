"""Umbrella MSG parser: Outlook ``.msg`` files to structured email content."""

from .attachments import assemble_attachment
from .builder import MessageBuilder
from .config import MsgParserConfig
from .container import Container, ContainerEntry, OleContainer
from .decoding import DecodedText, decode_text
from .errors import (
    ContainerOpenError,
    EmptyAttachmentError,
    MsgParseError,
    RtfDecompressionError,
    StreamReadError,
)
from .logging import setup_logging
from .models import MsgAttachment, ParsedMsg
from .parser import MsgParser
from .resolver import resolve_property
from .timestamps import filetime_to_display

__all__ = [
    "Container",
    "ContainerEntry",
    "ContainerOpenError",
    "DecodedText",
    "EmptyAttachmentError",
    "MessageBuilder",
    "MsgAttachment",
    "MsgParseError",
    "MsgParser",
    "MsgParserConfig",
    "OleContainer",
    "ParsedMsg",
    "RtfDecompressionError",
    "StreamReadError",
    "assemble_attachment",
    "decode_text",
    "filetime_to_display",
    "resolve_property",
    "setup_logging",
]
