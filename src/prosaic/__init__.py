"""prosaic: paragraph, sentence and token segmentation for plain prose."""

from .core.errors import (
    ConfigurationError,
    EncodingError,
    SegmentationCancelled,
    SegmentationError,
)
from .core.models import Document, Paragraph, Sentence, SourceBuffer, Token, TokenKind
from .segmentation import CancellationToken, Lexicon, SegmenterOptions, segment

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "ConfigurationError",
    "Document",
    "EncodingError",
    "Lexicon",
    "Paragraph",
    "SegmentationCancelled",
    "SegmentationError",
    "SegmenterOptions",
    "Sentence",
    "SourceBuffer",
    "Token",
    "TokenKind",
    "segment",
]
