"""Outlook ``.msg`` parser: compound file bytes → :class:`ParsedMsg`.

The container is enumerated once.  Property streams directly below the
root describe the message itself; every top-level
``__attach_version1.0_#XXXXXXXX`` storage describes one attachment.
"""

from __future__ import annotations

import hashlib

import structlog

from .attachments import assemble_attachment
from .builder import MessageBuilder
from .config import MsgParserConfig
from .container import Container, ContainerEntry, OleContainer
from .errors import ContainerOpenError, EmptyAttachmentError, StreamReadError
from .models import ParsedMsg
from .resolver import resolve_property
from .tags import is_attachment_dir, is_property_stream

logger = structlog.get_logger()


class MsgParser:
    """Stateless parser: raw ``.msg`` bytes → ParsedMsg."""

    def __init__(self, config: MsgParserConfig | None = None) -> None:
        self._config = config or MsgParserConfig()

    def parse(self, raw_bytes: bytes) -> ParsedMsg:
        """Parse an in-memory ``.msg`` file.

        Raises :class:`ContainerOpenError` if *raw_bytes* is not a compound
        file.  Every other problem is local: the offending stream or
        attachment is skipped and parsing continues.
        """
        digest = hashlib.sha256(raw_bytes).hexdigest()[:12]
        with structlog.contextvars.bound_contextvars(msg_digest=digest):
            try:
                container = OleContainer.from_bytes(raw_bytes)
            except ContainerOpenError as exc:
                logger.warning("msg_container_open_failed", size=len(raw_bytes), error=str(exc))
                raise
            with container:
                return self.aggregate(container)

    def aggregate(self, container: Container) -> ParsedMsg:
        """Build a message from an opened container."""
        entries = list(container.walk())
        property_streams, attachment_dirs = self._partition(entries)

        builder = MessageBuilder()
        for entry in property_streams:
            data = self._read(container, entry)
            if not data:
                continue
            builder.apply(
                resolve_property(entry.name, data, legacy_codec=self._config.legacy_codec)
            )

        for attachment_dir in attachment_dirs:
            members: list[tuple[str, bytes]] = []
            for entry in entries:
                if not entry.is_stream or not _is_below(entry, attachment_dir):
                    continue
                data = self._read(container, entry)
                if data is not None:
                    members.append((entry.name, data))

            try:
                attachment = assemble_attachment(members, config=self._config)
            except EmptyAttachmentError:
                logger.debug("msg_attachment_skipped", attachment_dir=attachment_dir.name)
                continue
            builder.add_attachment(attachment)

        parsed = builder.build()
        logger.debug(
            "msg_parsed",
            streams=len(property_streams),
            recipients=len(parsed.recipients),
            attachments=len(parsed.attachments),
        )
        return parsed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _partition(
        entries: list[ContainerEntry],
    ) -> tuple[list[ContainerEntry], list[ContainerEntry]]:
        """Split entries into message property streams and attachment storages.

        Attachment storages nested inside another attachment (the
        attachments of an embedded message) are not attachments of this
        message.  Only root-level property streams belong to the message:
        named-property, recipient and attachment storages reuse the same
        stream names for other data.
        """
        property_streams: list[ContainerEntry] = []
        attachment_dirs: list[ContainerEntry] = []
        seen_dirs: set[str] = set()

        for entry in entries:
            if any(is_attachment_dir(part) for part in entry.path[:-1]):
                continue
            if is_attachment_dir(entry.name):
                if entry.name not in seen_dirs:
                    seen_dirs.add(entry.name)
                    attachment_dirs.append(entry)
            elif entry.is_stream and len(entry.path) == 1 and is_property_stream(entry.name):
                property_streams.append(entry)

        return property_streams, attachment_dirs

    @staticmethod
    def _read(container: Container, entry: ContainerEntry) -> bytes | None:
        try:
            return container.read_stream(entry.path)
        except StreamReadError as exc:
            logger.debug("msg_stream_unreadable", path="/".join(entry.path), error=str(exc))
            return None


def _is_below(entry: ContainerEntry, storage: ContainerEntry) -> bool:
    depth = len(storage.path)
    return len(entry.path) > depth and entry.path[:depth] == storage.path
