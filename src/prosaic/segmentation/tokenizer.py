"""
Word / number / punctuation tokenizer for one sentence span.

Merge policy:
- hyphen or en dash between letters, no spaces: one HYPHENATED token
- apostrophe between letters, no spaces: one CONTRACTION token
- digits with at most one internal "," or "." separator: one NUMBER token
- "..." / "…" runs: one PUNCTUATION token
- every other non-space, non-alphanumeric character: its own PUNCTUATION token
- maximal letter runs: WORD tokens
"""

from __future__ import annotations

import unicodedata
from typing import List, Optional, Tuple, Union

from ..core.models import SourceBuffer, Token, TokenKind
from .punctuation import PunctCategory, classify, classify_at, ellipsis_length
from .scanner import Cursor

NUMBER_SEPARATORS = frozenset(",.")


def is_letter(char: str) -> bool:
    """Letters plus combining marks, which belong to the letter before them."""
    return char.isalpha() or unicodedata.category(char).startswith("M")


def _scan_word(text: str, index: int, end: int) -> Tuple[int, TokenKind]:
    j = index
    hyphenated = False
    contraction = False
    while True:
        while j < end and is_letter(text[j]):
            j += 1
        if j + 1 < end and is_letter(text[j + 1]):
            if classify_at(text, j).category is PunctCategory.APOSTROPHE:
                contraction = True
                j += 1
                continue
            if classify(text[j]).joins_words:
                hyphenated = True
                j += 1
                continue
        break

    if hyphenated:
        return j, TokenKind.HYPHENATED
    if contraction:
        return j, TokenKind.CONTRACTION
    return j, TokenKind.WORD


def _scan_number(text: str, index: int, end: int) -> int:
    j = index
    while j < end and text[j].isdigit():
        j += 1
    # Only one internal separator: "3.14", "1,000"
    if j + 1 < end and text[j] in NUMBER_SEPARATORS and text[j + 1].isdigit():
        j += 1
        while j < end and text[j].isdigit():
            j += 1
    return j


def tokenize(
    source: Union[SourceBuffer, str], start: int = 0, end: Optional[int] = None
) -> List[Token]:
    """
    Tokenize ``source[start:end]``.

    Args:
        source: Shared source buffer (a plain string is wrapped)
        start: Span start offset
        end: Span end offset (defaults to the end of the buffer)

    Returns:
        Tokens in source order; whitespace between them is not tokenized
    """
    if isinstance(source, str):
        source = SourceBuffer(source)
    text = source.text
    end = len(text) if end is None else end

    tokens: List[Token] = []
    cursor = Cursor(text, start, end)
    while not cursor.at_end():
        if cursor.skip_whitespace():
            continue
        i = cursor.position
        char = text[i]

        if is_letter(char):
            j, kind = _scan_word(text, i, end)
        elif char.isdigit():
            j, kind = _scan_number(text, i, end), TokenKind.NUMBER
        else:
            run = ellipsis_length(text, i, end)
            j, kind = i + (run or 1), TokenKind.PUNCTUATION

        tokens.append(Token(kind, i, j, source))
        cursor.advance(j - i)
    return tokens
