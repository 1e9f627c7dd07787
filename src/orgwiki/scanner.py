# Byte source and position tracking for the wiki markup parser
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

from dataclasses import dataclass
from typing import IO, Optional, Protocol, Union, runtime_checkable

from .common import SOURCE_ENCODING


@runtime_checkable
class ByteScanner(Protocol):
    """Pull-based byte source with single-level pushback.  ``read_byte()``
    returns None at the end of input.  ``unread_byte()`` undoes exactly the
    most recent ``read_byte()``; the parser never pushes back more than one
    byte between reads."""

    def read_byte(self) -> Optional[int]: ...

    def unread_byte(self) -> None: ...


class BytesScanner:
    """ByteScanner over an in-memory buffer."""

    __slots__ = ("data", "pos", "_can_unread")

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self.data = bytes(data)
        self.pos = 0
        self._can_unread = False

    def __repr__(self) -> str:
        return "BytesScanner(pos={}, size={})".format(self.pos, len(self.data))

    def read_byte(self) -> Optional[int]:
        if self.pos >= len(self.data):
            # A read that hits the end leaves nothing to push back.
            self._can_unread = False
            return None
        c = self.data[self.pos]
        self.pos += 1
        self._can_unread = True
        return c

    def unread_byte(self) -> None:
        assert self._can_unread, "unread_byte() without a preceding read"
        self.pos -= 1
        self._can_unread = False

    def at_end(self) -> bool:
        return self.pos >= len(self.data)


ScannerSource = Union[str, bytes, bytearray, memoryview, ByteScanner, IO]


def make_scanner(source: ScannerSource) -> ByteScanner:
    """Returns a ByteScanner for ``source``, which may be a str (encoded as
    UTF-8), a bytes-like object, a binary file object or an object already
    implementing the ByteScanner protocol."""
    if isinstance(source, str):
        return BytesScanner(source.encode(SOURCE_ENCODING))
    if isinstance(source, (bytes, bytearray, memoryview)):
        return BytesScanner(source)
    if isinstance(source, ByteScanner):
        return source
    if hasattr(source, "read"):
        data = source.read()
        if isinstance(data, str):
            data = data.encode(SOURCE_ENCODING)
        return BytesScanner(data)
    raise TypeError(
        "cannot scan markup from {}".format(type(source).__name__)
    )


@dataclass
class Position:
    """Raw byte offset, line and column of the scanner.  Lines are counted
    from 1 and columns from 0.  Only used for diagnostics."""

    offset: int = 0
    line: int = 1
    column: int = 0

    def next_column(self) -> None:
        self.offset += 1
        self.column += 1

    def next_line(self) -> None:
        self.offset += 1
        self.line += 1
        self.column = 0

    def reset(self) -> None:
        self.offset = 0
        self.line = 1
        self.column = 0
