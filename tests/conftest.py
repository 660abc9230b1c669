"""Shared test fixtures for the MSG parser test suite."""

from __future__ import annotations

import struct
from collections.abc import Iterator, Mapping

import pytest
import structlog

from tests.cfb import build_compound_file
from umbrella_msg.config import MsgParserConfig
from umbrella_msg.container import Container, ContainerEntry
from umbrella_msg.errors import StreamReadError

# 2023-11-13 08:44:20 (UTC) in the simplified calendar.
SUBMIT_TICKS = 133_428_698_600_000_000
SUBMIT_DISPLAY = "2023-11-13 08:44:20 (UTC)"

ATTACH_0 = "__attach_version1.0_#00000000"
RECIP_0 = "__recip_version1.0_#00000000"


def utf16(text: str) -> bytes:
    """Encode *text* the way Unicode string properties are stored."""
    return text.encode("utf-16-le") + b"\x00\x00"


def filetime_bytes(ticks: int) -> bytes:
    return struct.pack("<Q", ticks)


def prop(tag: str, prop_type: str = "001F") -> str:
    """Stream name for property *tag*: ``prop("0037")`` → ``__substg1.0_0037001F``."""
    return f"__substg1.0_{tag}{prop_type}"


# ------------------------------------------------------------------
# In-memory container
# ------------------------------------------------------------------


class FakeContainer(Container):
    """Container over a nested dict: ``bytes`` values are streams, dicts are storages.

    Walks depth first with siblings sorted by name, like olefile.
    """

    def __init__(
        self,
        tree: Mapping[str, object],
        *,
        broken: set[tuple[str, ...]] | None = None,
    ) -> None:
        self._tree = tree
        self._broken = broken or set()
        self.walk_count = 0
        self.reads: list[tuple[str, ...]] = []
        self.closed = False

    def walk(self) -> Iterator[ContainerEntry]:
        self.walk_count += 1
        yield from self._walk(self._tree, ())

    def _walk(self, node: Mapping[str, object], prefix: tuple[str, ...]) -> Iterator[ContainerEntry]:
        for name in sorted(node):
            value = node[name]
            path = (*prefix, name)
            is_stream = not isinstance(value, Mapping)
            yield ContainerEntry(name=name, path=path, is_stream=is_stream)
            if not is_stream:
                yield from self._walk(value, path)

    def read_stream(self, path: tuple[str, ...]) -> bytes:
        self.reads.append(path)
        if path in self._broken:
            raise StreamReadError(path, "sector chain broken")
        node: object = self._tree
        for part in path:
            if not isinstance(node, Mapping) or part not in node:
                raise StreamReadError(path, "no such stream")
            node = node[part]
        if isinstance(node, Mapping):
            raise StreamReadError(path, "not a stream")
        return bytes(node)

    def close(self) -> None:
        self.closed = True


# ------------------------------------------------------------------
# Sample message trees
# ------------------------------------------------------------------


def _build_msg_tree(
    *,
    subject: str = "Quarterly report",
    attachments: list[Mapping[str, object]] | None = None,
) -> dict[str, object]:
    """Build the storage tree of a typical Unicode ``.msg`` file."""
    tree: dict[str, object] = {
        "__nameid_version1.0": {"__substg1.0_00020102": b"\x00" * 16},
        "__properties_version1.0": b"\x00" * 32,
        prop("0037"): utf16(subject),
        prop("0C1A"): utf16("Alice Example"),
        prop("0C1F"): utf16("alice@example.com"),
        prop("0E04"): utf16("Bob Builder; Carol Singer"),
        prop("0E02"): utf16("Dave Diver"),
        prop("0039", "0040"): filetime_bytes(SUBMIT_TICKS),
        prop("1000"): utf16("Please find the report attached."),
        prop("1013"): utf16('<p>See <img src="cid:img001"></p>'),
        RECIP_0: {
            prop("3001"): utf16("Bob Builder"),
            prop("39FE"): utf16("bob@example.com"),
        },
    }
    if attachments is None:
        attachments = [
            {
                prop("3707"): utf16("report.pdf"),
                prop("370E"): utf16("application/pdf"),
                prop("3712"): utf16("<img001>"),
                prop("3701", "0102"): b"%PDF-1.4 fake pdf content",
            }
        ]
    for index, attachment in enumerate(attachments):
        tree[f"__attach_version1.0_#{index:08X}"] = dict(attachment)
    return tree


@pytest.fixture
def msg_tree() -> dict[str, object]:
    return _build_msg_tree()


@pytest.fixture
def msg_bytes(msg_tree: dict[str, object]) -> bytes:
    return build_compound_file(msg_tree)


@pytest.fixture
def parser_config() -> MsgParserConfig:
    return MsgParserConfig()


@pytest.fixture
def custom_config() -> MsgParserConfig:
    return MsgParserConfig(
        unnamed_filename="untitled",
        extension_filename_stem="file",
        legacy_codec="gbk",
    )


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
