"""
Language data that tunes sentence boundary decisions.

A lexicon carries three sets and one table:

- abbreviation types: words whose trailing period is not a sentence end
- sentence starters: words that begin a new sentence even after an
  abbreviation period
- collocations: (left, right) word pairs where a period between them is
  never a sentence end, e.g. ("jan", "5")
- orthographic context: word -> bit flags recording where the word was
  seen capitalized or lowercase (sentence initial, internal, unknown)

The JSON layout matches precompiled Punkt language data::

    {"abbrev_types": [...], "sentence_starters": [...],
     "collocations": [["left", "right"], ...],
     "ortho_context": {"word": flags, ...}}
"""

from __future__ import annotations

import json
from collections.abc import Iterable as IterableABC
from collections.abc import Mapping as MappingABC
from collections.abc import Sequence as SequenceABC
from importlib import resources
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..core.errors import ConfigurationError

Collocation = Tuple[str, str]

# Orthographic context flags, as stored in Punkt language data
ORTHO_BEG_UC = 1 << 1
ORTHO_MID_UC = 1 << 2
ORTHO_UNK_UC = 1 << 3
ORTHO_BEG_LC = 1 << 4
ORTHO_MID_LC = 1 << 5
ORTHO_UNK_LC = 1 << 6
ORTHO_UC = ORTHO_BEG_UC | ORTHO_MID_UC | ORTHO_UNK_UC
ORTHO_LC = ORTHO_BEG_LC | ORTHO_MID_LC | ORTHO_UNK_LC
ORTHO_MASK = ORTHO_UC | ORTHO_LC

_REQUIRED_LISTS = ("abbrev_types", "sentence_starters", "collocations")


def normalize_entry(value: Any, what: str = "entry") -> str:
    """Lowercase, strip surrounding whitespace and trailing periods."""
    if not isinstance(value, str):
        raise ValueError(f"{what} must be a string, got {type(value).__name__}")
    entry = value.strip().rstrip(".").lower()
    if not entry:
        raise ValueError(f"{what} must not be empty: {value!r}")
    if any(ch.isspace() for ch in entry):
        raise ValueError(f"{what} must not contain whitespace: {value!r}")
    return entry


def normalize_entries(values: Any, what: str) -> FrozenSet[str]:
    if isinstance(values, str) or not isinstance(values, IterableABC):
        raise ValueError(f"{what} must be a collection of strings")
    return frozenset(normalize_entry(v, what) for v in values)


def normalize_collocations(values: Any) -> FrozenSet[Collocation]:
    if isinstance(values, str) or not isinstance(values, IterableABC):
        raise ValueError("collocations must be a collection of [left, right] pairs")
    pairs = set()
    for pair in values:
        if (
            isinstance(pair, str)
            or not isinstance(pair, SequenceABC)
            or len(pair) != 2
        ):
            raise ValueError(f"collocation must be a [left, right] pair: {pair!r}")
        left, right = pair
        pairs.add(
            (normalize_entry(left, "collocation"), normalize_entry(right, "collocation"))
        )
    return frozenset(pairs)


def normalize_orthographic_context(values: Any) -> Dict[str, int]:
    if not isinstance(values, MappingABC):
        raise ValueError("orthographic context must map words to integer flags")
    context: Dict[str, int] = {}
    for word, flags in values.items():
        if isinstance(flags, bool) or not isinstance(flags, int):
            raise ValueError(f"orthographic context for {word!r} must be an integer")
        if flags < 0 or flags & ~ORTHO_MASK:
            raise ValueError(f"unknown orthographic context flags for {word!r}: {flags}")
        key = normalize_entry(word, "orthographic context word")
        context[key] = context.get(key, 0) | flags
    return context


def merge_orthographic_context(
    left: Mapping[str, int], right: Mapping[str, int]
) -> Dict[str, int]:
    merged = dict(left)
    for word, flags in right.items():
        merged[word] = merged.get(word, 0) | flags
    return merged


def starts_sentence_by_context(flags: int) -> bool:
    """
    A capitalized word starts a sentence when it has been seen lowercase
    and never capitalized in the middle of a sentence.
    """
    return bool(flags & ORTHO_LC) and not flags & ORTHO_MID_UC


class Lexicon(BaseModel):
    """Immutable language data for boundary disambiguation."""

    model_config = ConfigDict(frozen=True)

    abbreviations: FrozenSet[str] = frozenset()
    sentence_starters: FrozenSet[str] = frozenset()
    collocations: FrozenSet[Collocation] = frozenset()
    orthographic_context: Dict[str, int] = {}

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid lexicon: {e}") from e

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

    def contains_abbrev(self, word: str) -> bool:
        return word.rstrip(".").lower() in self.abbreviations

    def contains_sentence_starter(self, word: str) -> bool:
        return word.lower() in self.sentence_starters

    def contains_collocation(self, left: str, right: str) -> bool:
        return (left.rstrip(".").lower(), right.lower()) in self.collocations

    def contains_orthographic_context(self, word: str) -> bool:
        return word.lower() in self.orthographic_context

    def get_orthographic_context(self, word: str) -> int:
        """Flags recorded for ``word``; 0 when it was never seen."""
        return self.orthographic_context.get(word.lower(), 0)

    def merge(self, other: "Lexicon") -> "Lexicon":
        """Union of both lexicons; orthographic flags are OR-ed per word."""
        return Lexicon(
            abbreviations=self.abbreviations | other.abbreviations,
            sentence_starters=self.sentence_starters | other.sentence_starters,
            collocations=self.collocations | other.collocations,
            orthographic_context=merge_orthographic_context(
                self.orthographic_context, other.orthographic_context
            ),
        )

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "Lexicon":
        """Build from the Punkt-style mapping; every key is required."""
        if not isinstance(data, dict):
            raise ConfigurationError("Lexicon data must be a JSON object")
        for key in _REQUIRED_LISTS:
            if not isinstance(data.get(key), list):
                raise ConfigurationError(f"Lexicon key {key!r} must be an array")
        if not isinstance(data.get("ortho_context"), dict):
            raise ConfigurationError("Lexicon key 'ortho_context' must be an object")
        for pair in data["collocations"]:
            if not isinstance(pair, list):
                raise ConfigurationError(
                    f"Lexicon collocation must be a [left, right] array: {pair!r}"
                )
        return cls(
            abbreviations=data["abbrev_types"],
            sentence_starters=data["sentence_starters"],
            collocations=[tuple(pair) for pair in data["collocations"]],
            orthographic_context=data["ortho_context"],
        )

    @classmethod
    def from_json(cls, text: str) -> "Lexicon":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Lexicon is not valid JSON: {e}") from e
        return cls.from_mapping(data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Lexicon":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read lexicon {path}: {e}") from e
        return cls.from_json(text)

    @classmethod
    def english(cls) -> "Lexicon":
        """Packaged English abbreviations, starters, collocations and context."""
        data = resources.files("prosaic.segmentation").joinpath("data/english.json")
        return cls.from_json(data.read_text(encoding="utf-8"))

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "abbrev_types": sorted(self.abbreviations),
            "sentence_starters": sorted(self.sentence_starters),
            "collocations": [list(pair) for pair in sorted(self.collocations)],
            "ortho_context": dict(sorted(self.orthographic_context.items())),
        }


def iter_words(values: Iterable[str]) -> Iterable[str]:
    """Split comma separated values as given on the command line or in env."""
    for value in values:
        for part in value.split(","):
            if part.strip():
                yield part.strip()
