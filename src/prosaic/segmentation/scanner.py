"""
Code point scanner over an immutable source buffer.

The scanner is a restartable sequence: every ``iter()`` call returns a new
Cursor that walks the buffer by integer index, so offsets stay directly
addressable by the layers above.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional, Union

from ..core.errors import EncodingError

_NEWLINES = re.compile(r"\r\n?")


class ScannedChar(NamedTuple):
    char: str
    offset: int


def normalize_newlines(text: str) -> str:
    """Normalize line endings CRLF / CR -> LF."""
    return _NEWLINES.sub("\n", text)


def decode_source(data: Union[bytes, bytearray, memoryview, str]) -> str:
    """
    Decode raw input into a validated, newline-normalized string.

    Args:
        data: UTF-8 bytes or an already decoded string

    Returns:
        Normalized text

    Raises:
        EncodingError: bytes are not valid UTF-8, or the string holds
            lone surrogates that cannot be encoded
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"Invalid UTF-8 byte sequence at byte {e.start}: {e.reason}",
                position=e.start,
            ) from e
    elif isinstance(data, str):
        text = data
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Invalid code point at index {e.start}: {e.reason}",
                position=e.start,
            ) from e
    else:
        raise TypeError(f"expected bytes or str, got {type(data).__name__}")

    # A leading byte order mark is not part of the prose
    if text.startswith("\ufeff"):
        text = " " + text[1:]
    return normalize_newlines(text)


class Cursor:
    """Explicit index into a buffer, bounded to ``[start, end)``."""

    __slots__ = ("_text", "_pos", "_end")

    def __init__(self, text: str, start: int = 0, end: Optional[int] = None):
        self._text = text
        self._pos = start
        self._end = len(text) if end is None else end

    @property
    def position(self) -> int:
        return self._pos

    @property
    def end(self) -> int:
        return self._end

    def at_end(self) -> bool:
        return self._pos >= self._end

    def peek(self, k: int = 0) -> str:
        """Return the character ``k`` positions ahead, or "" past the end."""
        i = self._pos + k
        if 0 <= i < self._end:
            return self._text[i]
        return ""

    def advance(self, n: int = 1) -> None:
        self._pos = min(self._pos + n, self._end)

    def skip_whitespace(self) -> int:
        """Collapse a whitespace run; returns the number of characters skipped."""
        start = self._pos
        while self._pos < self._end and self._text[self._pos].isspace():
            self._pos += 1
        return self._pos - start

    def __iter__(self) -> "Cursor":
        return self

    def __next__(self) -> ScannedChar:
        if self._pos >= self._end:
            raise StopIteration
        item = ScannedChar(self._text[self._pos], self._pos)
        self._pos += 1
        return item


class Scanner:
    """Restartable lazy sequence of (code point, offset) pairs."""

    __slots__ = ("_text", "_start", "_end")

    def __init__(self, text: str, start: int = 0, end: Optional[int] = None):
        self._text = text
        self._start = start
        self._end = len(text) if end is None else end

    @property
    def text(self) -> str:
        return self._text

    def __iter__(self) -> Cursor:
        return self.cursor()

    def __len__(self) -> int:
        return self._end - self._start

    def cursor(self) -> Cursor:
        return Cursor(self._text, self._start, self._end)


def scan(buffer: Union[bytes, str], start: int = 0, end: Optional[int] = None) -> Scanner:
    """
    Scan ``buffer`` as a lazy sequence of ScannedChar.

    Bytes are decoded and normalized first; strings are validated and
    newline-normalized. The buffer itself is never mutated.
    """
    text = decode_source(buffer)
    return Scanner(text, start, end)
