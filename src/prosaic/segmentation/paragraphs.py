"""
Paragraph splitting and per-paragraph assembly.

Paragraphs are cut from the whole buffer before any sentence detection,
so a sentence can never run across a blank line.
"""

from __future__ import annotations

import re
from typing import List

from ..core.models import (
    Paragraph,
    ParagraphSpan,
    Sentence,
    SourceBuffer,
)
from .options import DEFAULT_OPTIONS, SegmenterOptions
from .sentences import SentenceDetector
from .tokenizer import tokenize

# One or more lines that are empty or whitespace only
BLANK_LINE_SEPARATOR = re.compile(r"\n[^\S\n]*\n(?:[^\S\n]*\n)*")
# Line break followed by an indented, non-blank line
INDENTED_LINE = re.compile(r"\n(?=(?:\t|[ ]{2,})\S)")


def _trimmed(text: str, start: int, end: int) -> ParagraphSpan:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return ParagraphSpan(start, end)


def _split_region(text: str, start: int, end: int, pattern: re.Pattern) -> List[ParagraphSpan]:
    spans = []
    pos = start
    for match in pattern.finditer(text, start, end):
        spans.append(_trimmed(text, pos, match.start()))
        pos = match.end()
    spans.append(_trimmed(text, pos, end))
    return [span for span in spans if span.end > span.start]


def split_paragraphs(text: str, split_on_indent: bool = False) -> List[ParagraphSpan]:
    """
    Split the buffer on blank-line separators.

    Args:
        text: Normalized source text (LF line endings)
        split_on_indent: Also start a paragraph at every indented line

    Returns:
        Paragraph spans trimmed of surrounding whitespace. A buffer without
        separators is one paragraph; a whitespace-only buffer has none.
    """
    spans = _split_region(text, 0, len(text), BLANK_LINE_SEPARATOR)
    if not split_on_indent:
        return spans

    indented: List[ParagraphSpan] = []
    for span in spans:
        indented.extend(_split_region(text, span.start, span.end, INDENTED_LINE))
    return indented


def assemble_paragraph(
    source: SourceBuffer,
    span: ParagraphSpan,
    index: int,
    options: SegmenterOptions = DEFAULT_OPTIONS,
) -> Paragraph:
    """Run sentence detection and tokenization on one paragraph."""
    detector = SentenceDetector(options)
    sentences = []
    for sentence_span in detector.detect(source.text, span.start, span.end):
        tokens = tokenize(source, sentence_span.start, sentence_span.end)
        sentences.append(
            Sentence(
                start=sentence_span.start,
                end=sentence_span.end,
                tokens=tuple(tokens),
                is_quoted=sentence_span.is_quoted,
                source=source,
            )
        )
    return Paragraph(
        index=index,
        start=span.start,
        end=span.end,
        sentences=tuple(sentences),
        source=source,
    )
