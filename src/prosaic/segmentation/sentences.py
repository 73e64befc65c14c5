"""
Sentence boundary detection over one paragraph of the source buffer.

A terminator run (``.``, ``!``, ``?`` and friends) ends a sentence unless:

1. it is a single period after an abbreviation (an initial such as the
   "U" in "U.S." or a configured abbreviation), unless the next word
   opens a sentence: a configured sentence starter, or a capitalized word
   whose orthographic context says so;
2. it sits inside an open quotation: the boundary is soft and moves to
   after the close quote when one follows within the lookahead window,
   otherwise it is counted right after the terminator;
3. it belongs to an ellipsis, which ends the sentence only when the next
   word is capitalized.

Closing quotes and brackets directly after a terminator stay with the
sentence that ends. A following lowercase word always keeps the sentence
open, and a boundary needs whitespace (or the paragraph end) after it.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..core.models import SentenceSpan
from .options import DEFAULT_OPTIONS, SegmenterOptions
from .punctuation import (
    CLOSING_BRACKETS,
    OPENING_BRACKETS,
    PunctCategory,
    PunctClass,
    QuoteFamily,
    QuoteRole,
    classify,
    classify_at,
    ellipsis_length,
    is_closer,
)
from .scanner import Cursor


class QuoteDepth:
    """Open quotation depth per quote family (double / single)."""

    __slots__ = ("_depth",)

    def __init__(self) -> None:
        self._depth: Dict[QuoteFamily, int] = {
            QuoteFamily.DOUBLE: 0,
            QuoteFamily.SINGLE: 0,
        }

    def inside(self) -> bool:
        return any(self._depth.values())

    def depth(self, family: QuoteFamily) -> int:
        return self._depth[family]

    def closes(self, cls: PunctClass) -> bool:
        """Would ``cls`` close a currently open quotation?"""
        if not cls.is_quote or cls.family is None:
            return False
        if self._depth[cls.family] == 0:
            return False
        return cls.role in (QuoteRole.CLOSE, QuoteRole.EITHER)

    def opens(self, cls: PunctClass) -> bool:
        if not cls.is_quote or cls.family is None:
            return False
        if cls.role is QuoteRole.OPEN:
            return True
        return cls.role is QuoteRole.EITHER and self._depth[cls.family] == 0

    def observe(self, cls: PunctClass) -> None:
        if not cls.is_quote or cls.family is None:
            return
        if self.closes(cls):
            self._depth[cls.family] -= 1
        elif self.opens(cls):
            self._depth[cls.family] += 1
        # Stray close quotes with nothing open are ignored


def _is_terminator_char(text: str, index: int, end: int) -> bool:
    return classify(text[index]).is_terminator and not ellipsis_length(text, index, end)


def _word_before(text: str, index: int, start: int) -> str:
    """Dotted word chain ending right before ``index`` ("U.S", "e.g", "Mr")."""
    k = index
    while k > start and (text[k - 1].isalnum() or text[k - 1] == "."):
        k -= 1
    return text[k:index].lstrip(".")


def _at_paragraph_end(text: str, index: int, end: int) -> bool:
    k = index
    while k < end and text[k].isspace():
        k += 1
    return k >= end


def _word_after(text: str, index: int, end: int) -> Optional[str]:
    """
    First word after ``index``, skipping whitespace, opening brackets,
    quotes and dashes. None when a symbol such as ``$`` or ``#`` comes
    first, or at the paragraph end.
    """
    k = index
    while k < end and not text[k].isalnum():
        cls = classify_at(text, k)
        if (
            text[k].isspace()
            or text[k] in OPENING_BRACKETS
            or cls.is_quote
            or cls.category is PunctCategory.DASH
        ):
            k += 1
            continue
        break
    j = k
    while j < end and text[j].isalnum():
        j += 1
    if j == k:
        return None
    return text[k:j]


def _is_initial(chain: str) -> bool:
    """Single capital letter used as an initial; a lone "I" is the pronoun."""
    last = chain.rsplit(".", 1)[-1]
    if len(last) != 1 or not last.isalpha() or not last.isupper():
        return False
    return chain != "I"


class SentenceDetector:
    """Stateless detector; every ``detect`` call owns its quote state."""

    def __init__(self, options: SegmenterOptions = DEFAULT_OPTIONS):
        self.options = options

    def detect(
        self, text: str, start: int = 0, end: Optional[int] = None
    ) -> List[SentenceSpan]:
        """
        Split ``text[start:end]`` into sentence spans.

        Args:
            text: The full source buffer text
            start: Paragraph start offset
            end: Paragraph end offset (defaults to the end of ``text``)

        Returns:
            Ordered, non-overlapping spans trimmed of surrounding
            whitespace; the gaps between them are whitespace only
        """
        end = len(text) if end is None else end
        quotes = QuoteDepth()
        spans: List[SentenceSpan] = []

        cursor = Cursor(text, start, end)
        cursor.skip_whitespace()
        sent_start = cursor.position
        starts_quoted = self._starts_quoted(text, sent_start, end, quotes)

        while not cursor.at_end():
            i = cursor.position
            boundary: Optional[int] = None

            run = ellipsis_length(text, i, end)
            if run:
                boundary, resume = self._ellipsis_boundary(text, i + run, end, quotes)
            else:
                cls = classify_at(text, i)
                if not cls.is_terminator:
                    quotes.observe(cls)
                    cursor.advance()
                    continue
                j = i
                while j < end and _is_terminator_char(text, j, end):
                    j += 1
                boundary, resume = self._terminator_boundary(
                    text, i, j, start, end, quotes
                )

            if boundary is None:
                # Closers already counted into the quote depth are skipped
                cursor.advance(resume - i)
                continue

            spans.append(
                SentenceSpan(
                    sent_start,
                    boundary,
                    starts_quoted and self._ends_quoted(text, boundary, quotes),
                )
            )
            cursor = Cursor(text, boundary, end)
            cursor.skip_whitespace()
            sent_start = cursor.position
            starts_quoted = self._starts_quoted(text, sent_start, end, quotes)

        # Trailing material without a terminator is a sentence of its own
        tail = end
        while tail > sent_start and text[tail - 1].isspace():
            tail -= 1
        if tail > sent_start:
            spans.append(
                SentenceSpan(
                    sent_start,
                    tail,
                    starts_quoted and self._ends_quoted(text, tail, quotes),
                )
            )
        return spans

    def _absorb_closers(self, text: str, index: int, end: int, quotes: QuoteDepth) -> int:
        """Advance over close quotes and closing brackets, updating quote depth."""
        k = index
        while k < end:
            cls = classify_at(text, k)
            if is_closer(text, k) or quotes.closes(cls):
                quotes.observe(cls)
                k += 1
                continue
            break
        return k

    def _settle_quotes(self, text: str, index: int, end: int, quotes: QuoteDepth) -> int:
        """
        Resolve where a boundary after ``index`` lands with respect to quotes.

        Immediate closers always join the sentence. If a quotation is still
        open, a close quote within ``quote_lookahead`` characters (whitespace
        or closing brackets only in between) defers the boundary past it.
        """
        e = self._absorb_closers(text, index, end, quotes)
        if not quotes.inside():
            return e

        k = e
        remaining = self.options.quote_lookahead
        while k < end and remaining > 0 and (text[k].isspace() or text[k] in CLOSING_BRACKETS):
            k += 1
            remaining -= 1
        if k < end and k != e and quotes.closes(classify_at(text, k)):
            return self._absorb_closers(text, k, end, quotes)
        return e

    def _terminator_boundary(
        self,
        text: str,
        run_start: int,
        run_end: int,
        start: int,
        end: int,
        quotes: QuoteDepth,
    ) -> Tuple[Optional[int], int]:
        """Return ``(boundary or None, offset scanning resumes from)``."""
        single_period = run_end - run_start == 1 and text[run_start] == "."
        chain = _word_before(text, run_start, start) if single_period else ""

        # "U.S", "3.14", "example.com": a period glued to the next character
        if single_period and run_end < end and text[run_end].isalnum():
            return None, run_end

        e = self._settle_quotes(text, run_end, end, quotes)
        if e < end and not text[e].isspace():
            return None, e

        if _at_paragraph_end(text, e, end):
            return e, e

        # None when a symbol leads the next token ("$100", "#3")
        next_word = _word_after(text, e, end)

        if single_period and chain:
            last = chain.rsplit(".", 1)[-1]
            if next_word is not None and self.options.is_collocation(last, next_word):
                return None, e
            abbreviated = (
                _is_initial(chain)
                or self.options.is_abbreviation(chain)
                or self.options.is_abbreviation(last)
            )
            if abbreviated and (
                next_word is None or not self.options.starts_sentence(next_word)
            ):
                return None, e

        if next_word is not None and next_word[0].islower():
            return None, e
        return e, e

    def _ellipsis_boundary(
        self, text: str, run_end: int, end: int, quotes: QuoteDepth
    ) -> Tuple[Optional[int], int]:
        e = self._settle_quotes(text, run_end, end, quotes)
        if e < end and not text[e].isspace():
            return None, e
        if _at_paragraph_end(text, e, end):
            return e, e
        next_word = _word_after(text, e, end)
        if next_word is None or next_word[0].isupper():
            return e, e
        return None, e

    def _starts_quoted(self, text: str, index: int, end: int, quotes: QuoteDepth) -> bool:
        if quotes.inside():
            return True
        if index >= end:
            return False
        return quotes.opens(classify_at(text, index))

    def _ends_quoted(self, text: str, boundary: int, quotes: QuoteDepth) -> bool:
        if quotes.inside():
            return True
        if boundary <= 0:
            return False
        cls = classify_at(text, boundary - 1)
        return cls.is_quote and cls.role is not QuoteRole.OPEN


def detect_sentences(
    text: str,
    options: SegmenterOptions = DEFAULT_OPTIONS,
    start: int = 0,
    end: Optional[int] = None,
) -> List[SentenceSpan]:
    """Sentence spans for ``text[start:end]``; offsets index into ``text``."""
    return SentenceDetector(options).detect(text, start, end)
