"""
Segmentation of free-form prose into paragraphs, sentences and tokens.

This package provides:
- Code point scanning with newline normalization
- Punctuation classification (typographic quotes and dashes included)
- Sentence boundary detection with abbreviation, quotation and ellipsis rules
- Tokenization with hyphenated, contraction and number merging
- Paragraph assembly and optional parallel fan-out per paragraph
- Structural verification of the resulting Document
"""

from .engine import CancellationToken, Segmenter, segment
from .lexicon import Lexicon
from .options import DEFAULT_ABBREVIATIONS, DEFAULT_OPTIONS, SegmenterOptions
from .paragraphs import assemble_paragraph, split_paragraphs
from .punctuation import PunctCategory, PunctClass, classify, classify_at
from .scanner import Scanner, scan
from .sentences import SentenceDetector, detect_sentences
from .tokenizer import tokenize
from .verify import calculate_coverage, verify_document

__all__ = [
    "CancellationToken",
    "DEFAULT_ABBREVIATIONS",
    "DEFAULT_OPTIONS",
    "Lexicon",
    "PunctCategory",
    "PunctClass",
    "Scanner",
    "SegmenterOptions",
    "Segmenter",
    "SentenceDetector",
    "assemble_paragraph",
    "calculate_coverage",
    "classify",
    "classify_at",
    "detect_sentences",
    "scan",
    "segment",
    "split_paragraphs",
    "tokenize",
    "verify_document",
]
