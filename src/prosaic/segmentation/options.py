"""Immutable segmenter configuration passed explicitly into ``segment``."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.errors import ConfigurationError
from .lexicon import (
    Collocation,
    Lexicon,
    merge_orthographic_context,
    normalize_collocations,
    normalize_entries,
    normalize_orthographic_context,
    starts_sentence_by_context,
)

DEFAULT_ABBREVIATIONS: FrozenSet[str] = frozenset(
    {"mr", "mrs", "ms", "dr", "prof", "sr", "jr", "st", "vs", "etc", "e.g", "i.e"}
)
DEFAULT_QUOTE_LOOKAHEAD = 2


class SegmenterOptions(BaseModel):
    """
    Policy knobs for segmentation.

    Abbreviations are stored lowercase without a trailing period. The
    quote lookahead is the number of characters allowed between a
    terminator inside a quotation and the close quote that finalizes it.
    """

    model_config = ConfigDict(frozen=True)

    abbreviations: FrozenSet[str] = DEFAULT_ABBREVIATIONS
    quote_lookahead: int = Field(default=DEFAULT_QUOTE_LOOKAHEAD, ge=0)
    sentence_starters: FrozenSet[str] = frozenset()
    collocations: FrozenSet[Collocation] = frozenset()
    orthographic_context: Dict[str, int] = {}
    split_on_indent: bool = False
    workers: int = Field(default=1, ge=1)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid segmenter options: {e}") from e

    @field_validator("abbreviations", mode="before")
    @classmethod
    def _check_abbreviations(cls, v: Any) -> FrozenSet[str]:
        return normalize_entries(v, "abbreviation")

    @field_validator("sentence_starters", mode="before")
    @classmethod
    def _check_starters(cls, v: Any) -> FrozenSet[str]:
        return normalize_entries(v, "sentence starter")

    @field_validator("collocations", mode="before")
    @classmethod
    def _check_collocations(cls, v: Any) -> FrozenSet[Collocation]:
        return normalize_collocations(v)

    @field_validator("orthographic_context", mode="before")
    @classmethod
    def _check_orthographic_context(cls, v: Any) -> Dict[str, int]:
        return normalize_orthographic_context(v)

    def _updated(self, **changes: Any) -> "SegmenterOptions":
        data = {
            "abbreviations": self.abbreviations,
            "quote_lookahead": self.quote_lookahead,
            "sentence_starters": self.sentence_starters,
            "collocations": self.collocations,
            "orthographic_context": self.orthographic_context,
            "split_on_indent": self.split_on_indent,
            "workers": self.workers,
        }
        data.update(changes)
        return SegmenterOptions(**data)

    def with_abbreviations(self, *extra: str) -> "SegmenterOptions":
        """Return a copy with additional abbreviations."""
        return self._updated(abbreviations=set(self.abbreviations) | set(extra))

    def with_sentence_starters(self, *extra: str) -> "SegmenterOptions":
        return self._updated(
            sentence_starters=set(self.sentence_starters) | set(extra)
        )

    def with_lexicon(self, lexicon: Lexicon) -> "SegmenterOptions":
        """Return a copy extended by every entry of ``lexicon``."""
        return self._updated(
            abbreviations=self.abbreviations | lexicon.abbreviations,
            sentence_starters=self.sentence_starters | lexicon.sentence_starters,
            collocations=self.collocations | lexicon.collocations,
            orthographic_context=merge_orthographic_context(
                self.orthographic_context, lexicon.orthographic_context
            ),
        )

    @classmethod
    def from_lexicon(cls, lexicon: Lexicon, **overrides: Any) -> "SegmenterOptions":
        """Options whose word lists come entirely from ``lexicon``."""
        return cls(
            abbreviations=lexicon.abbreviations,
            sentence_starters=lexicon.sentence_starters,
            collocations=lexicon.collocations,
            orthographic_context=lexicon.orthographic_context,
            **overrides,
        )

    def is_abbreviation(self, word: str) -> bool:
        return word.rstrip(".").lower() in self.abbreviations

    def is_sentence_starter(self, word: str) -> bool:
        return word.lower() in self.sentence_starters

    def is_collocation(self, left: str, right: str) -> bool:
        return (left.rstrip(".").lower(), right.lower()) in self.collocations

    def starts_sentence(self, word: str) -> bool:
        """
        Does ``word`` open a new sentence after an abbreviation period?

        True for configured sentence starters, and for a capitalized word
        whose orthographic context shows it lowercase elsewhere but never
        capitalized inside a sentence.
        """
        if self.is_sentence_starter(word):
            return True
        if not word[:1].isupper():
            return False
        return starts_sentence_by_context(self.orthographic_context.get(word.lower(), 0))


DEFAULT_OPTIONS = SegmenterOptions()
