"""
Immutable document model produced by segmentation.

All offsets are code point indices into the shared SourceBuffer. Tokens,
sentences and paragraphs never store a copy of their text; the ``text``
property slices the buffer on demand.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterator, NamedTuple, Tuple

_WHITESPACE_RUN = re.compile(r"\s+")


class TokenKind(str, Enum):
    """Closed set of token kinds."""

    WORD = "word"
    NUMBER = "number"
    PUNCTUATION = "punctuation"
    CONTRACTION = "contraction"
    HYPHENATED = "hyphenated"


class SourceBuffer:
    """The normalized source text, owned once per Document."""

    __slots__ = ("_text",)

    def __init__(self, text: str):
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SourceBuffer):
            return self._text == other._text
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._text)

    def __repr__(self) -> str:
        return f"SourceBuffer(len={len(self._text)})"

    def slice(self, start: int, end: int) -> str:
        """Return the text of ``[start, end)``; raises IndexError when out of bounds."""
        if not 0 <= start <= end <= len(self._text):
            raise IndexError(
                f"span ({start}, {end}) outside buffer of length {len(self._text)}"
            )
        return self._text[start:end]

    def byte_offset(self, index: int) -> int:
        """Convert a code point index to a UTF-8 byte offset."""
        if not 0 <= index <= len(self._text):
            raise IndexError(f"index {index} outside buffer")
        return len(self._text[:index].encode("utf-8"))


class ParagraphSpan(NamedTuple):
    start: int
    end: int


class SentenceSpan(NamedTuple):
    start: int
    end: int
    is_quoted: bool = False


class Token(NamedTuple):
    """A single token; ``text`` borrows from the source buffer."""

    kind: TokenKind
    start: int
    end: int
    source: SourceBuffer

    @property
    def text(self) -> str:
        return self.source.slice(self.start, self.end)

    @property
    def is_ellipsis(self) -> bool:
        return self.kind is TokenKind.PUNCTUATION and (
            self.text == "…" or (len(self.text) >= 3 and set(self.text) == {"."})
        )

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, {self.start}, {self.end})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "kind": self.kind.value,
            "start": self.start,
            "end": self.end,
        }


class Sentence(NamedTuple):
    """An ordered run of tokens ending at a sentence boundary."""

    start: int
    end: int
    tokens: Tuple[Token, ...]
    is_quoted: bool
    source: SourceBuffer

    @property
    def text(self) -> str:
        return self.source.slice(self.start, self.end)

    def __repr__(self) -> str:
        return (
            f"Sentence({self.start}, {self.end}, tokens={len(self.tokens)}, "
            f"is_quoted={self.is_quoted})"
        )

    def normalized_text(self) -> str:
        """Sentence text with every whitespace run collapsed to one space."""
        return _WHITESPACE_RUN.sub(" ", self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "is_quoted": self.is_quoted,
            "text": self.text,
            "tokens": [token.to_dict() for token in self.tokens],
        }


class Paragraph(NamedTuple):
    """An ordered run of sentences between blank-line separators."""

    index: int
    start: int
    end: int
    sentences: Tuple[Sentence, ...]
    source: SourceBuffer

    @property
    def text(self) -> str:
        return self.source.slice(self.start, self.end)

    def __repr__(self) -> str:
        return (
            f"Paragraph({self.index}, {self.start}, {self.end}, "
            f"sentences={len(self.sentences)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "start": self.start,
            "end": self.end,
            "sentences": [sentence.to_dict() for sentence in self.sentences],
        }


class Document:
    """Root of the segmentation result. Read-only once constructed."""

    __slots__ = ("_source", "_paragraphs")

    def __init__(self, source: SourceBuffer, paragraphs: Tuple[Paragraph, ...]):
        self._source = source
        self._paragraphs = tuple(paragraphs)

    @property
    def source(self) -> SourceBuffer:
        return self._source

    @property
    def paragraphs(self) -> Tuple[Paragraph, ...]:
        return self._paragraphs

    def __iter__(self) -> Iterator[Paragraph]:
        return iter(self._paragraphs)

    def __len__(self) -> int:
        return len(self._paragraphs)

    def __repr__(self) -> str:
        return (
            f"Document(paragraphs={len(self._paragraphs)}, "
            f"sentences={self.sentence_count}, tokens={self.token_count})"
        )

    def sentences(self) -> Iterator[Sentence]:
        for paragraph in self._paragraphs:
            yield from paragraph.sentences

    def tokens(self) -> Iterator[Token]:
        for sentence in self.sentences():
            yield from sentence.tokens

    @property
    def sentence_count(self) -> int:
        return sum(len(p.sentences) for p in self._paragraphs)

    @property
    def token_count(self) -> int:
        return sum(len(s.tokens) for s in self.sentences())

    def to_plain_text(self) -> str:
        """
        Rebuild the text from the segmented structure.

        Sentences within a paragraph are joined by a single space and
        paragraphs by a single blank line. Whitespace runs inside a
        sentence collapse to one space, so the result is not guaranteed
        to be byte-identical to the input.
        """
        return "\n\n".join(
            " ".join(sentence.normalized_text() for sentence in paragraph.sentences)
            for paragraph in self._paragraphs
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "length": len(self._source),
            "paragraphs": [paragraph.to_dict() for paragraph in self._paragraphs],
        }
