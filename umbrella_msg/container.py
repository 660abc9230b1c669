"""Compound-file container access.

:class:`Container` is the seam between the property layer and whatever
reads the CFB structure.  :class:`OleContainer` implements it with
olefile; tests substitute an in-memory tree.
"""

from __future__ import annotations

import abc
import io
import struct
from collections.abc import Iterator
from dataclasses import dataclass

import olefile

from .errors import ContainerOpenError, StreamReadError

# olefile tolerates most defects, but corrupt sector sizes and chains
# surface as arithmetic and indexing errors rather than OSError.
_OLE_ERRORS = (OSError, ValueError, IndexError, OverflowError, struct.error)


@dataclass(frozen=True)
class ContainerEntry:
    """One storage or stream in the container tree.

    ``path`` runs from the first level below the root to the entry itself,
    so ``path[-1] == name``.
    """

    name: str
    path: tuple[str, ...]
    is_stream: bool


class Container(abc.ABC):
    """A read-only, already opened compound file."""

    @abc.abstractmethod
    def walk(self) -> Iterator[ContainerEntry]:
        """Yield every storage and stream below the root, depth first."""
        ...

    @abc.abstractmethod
    def read_stream(self, path: tuple[str, ...]) -> bytes:
        """Return the full contents of the stream at *path*.

        Raises :class:`StreamReadError` if the stream is missing or broken.
        """
        ...

    def close(self) -> None:
        """Release resources held by the container."""

    def __enter__(self) -> Container:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class OleContainer(Container):
    """:class:`Container` backed by :class:`olefile.OleFileIO`."""

    def __init__(self, ole: olefile.OleFileIO) -> None:
        self._ole = ole

    @classmethod
    def from_bytes(cls, raw_bytes: bytes) -> OleContainer:
        """Open an in-memory compound file.

        Raises :class:`ContainerOpenError` when *raw_bytes* is not a valid
        OLE2 structured storage file.
        """
        try:
            ole = olefile.OleFileIO(io.BytesIO(raw_bytes))
        except _OLE_ERRORS as exc:
            raise ContainerOpenError(f"Not a readable compound file: {exc}") from exc
        return cls(ole)

    def walk(self) -> Iterator[ContainerEntry]:
        for path in self._ole.listdir(streams=True, storages=True):
            yield ContainerEntry(
                name=path[-1],
                path=tuple(path),
                is_stream=self._ole.get_type(path) == olefile.STGTY_STREAM,
            )

    def read_stream(self, path: tuple[str, ...]) -> bytes:
        try:
            with self._ole.openstream(list(path)) as stream:
                return stream.read()
        except _OLE_ERRORS as exc:
            raise StreamReadError(path, str(exc)) from exc

    def close(self) -> None:
        self._ole.close()
