"""Exception hierarchy for MSG parsing.

Only :class:`ContainerOpenError` escapes :meth:`MsgParser.parse`.  The
other errors describe local failures that the parser logs and skips.
"""

from __future__ import annotations


class MsgParseError(Exception):
    """Base class for all MSG parsing errors."""


class ContainerOpenError(MsgParseError):
    """The input bytes are not a readable compound file."""


class StreamReadError(MsgParseError):
    """A leaf stream inside the container could not be read."""

    def __init__(self, path: tuple[str, ...], reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read stream {'/'.join(path)}: {reason}")


class RtfDecompressionError(MsgParseError):
    """Compressed RTF body could not be decompressed."""


class EmptyAttachmentError(MsgParseError):
    """An attachment group carried neither a filename nor any data."""
