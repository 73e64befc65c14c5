"""
Punctuation classification for boundary detection and tokenization.

Typographic marks share roles with their ASCII counterparts: curly quotes
behave like straight quotes, the em dash like a hyphen-minus used as a
dash. Dropping them silently loses clause and sentence boundaries in real
prose.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Optional


class PunctCategory(str, Enum):
    NONE = "none"
    TERMINATOR = "terminator"
    QUOTE = "quote"
    DASH = "dash"
    APOSTROPHE = "apostrophe"
    ELLIPSIS = "ellipsis"


class QuoteRole(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    # Straight quotes before context is known
    EITHER = "either"


class QuoteStyle(str, Enum):
    STRAIGHT = "straight"
    CURLY = "curly"


class QuoteFamily(str, Enum):
    DOUBLE = "double"
    SINGLE = "single"


class DashKind(str, Enum):
    HYPHEN = "hyphen"
    EN_DASH = "en_dash"
    EM_DASH = "em_dash"


class PunctClass(NamedTuple):
    """Classification of one code point."""

    category: PunctCategory
    role: Optional[QuoteRole] = None
    style: Optional[QuoteStyle] = None
    family: Optional[QuoteFamily] = None
    dash: Optional[DashKind] = None

    @property
    def is_terminator(self) -> bool:
        return self.category is PunctCategory.TERMINATOR

    @property
    def is_quote(self) -> bool:
        return self.category is PunctCategory.QUOTE

    @property
    def is_open_quote(self) -> bool:
        return self.category is PunctCategory.QUOTE and self.role is QuoteRole.OPEN

    @property
    def is_close_quote(self) -> bool:
        return self.category is PunctCategory.QUOTE and self.role is QuoteRole.CLOSE

    @property
    def joins_words(self) -> bool:
        """Hyphen and en dash may glue letters into a compound."""
        return self.category is PunctCategory.DASH and self.dash in (
            DashKind.HYPHEN,
            DashKind.EN_DASH,
        )

    def with_role(self, role: QuoteRole) -> "PunctClass":
        return self._replace(role=role)


NONE = PunctClass(PunctCategory.NONE)
TERMINATOR = PunctClass(PunctCategory.TERMINATOR)
APOSTROPHE = PunctClass(PunctCategory.APOSTROPHE)
ELLIPSIS = PunctClass(PunctCategory.ELLIPSIS)


def _quote(role: QuoteRole, style: QuoteStyle, family: QuoteFamily) -> PunctClass:
    return PunctClass(PunctCategory.QUOTE, role=role, style=style, family=family)


def _dash(kind: DashKind) -> PunctClass:
    return PunctClass(PunctCategory.DASH, dash=kind)


_TABLE: Dict[str, PunctClass] = {
    ".": TERMINATOR,
    "!": TERMINATOR,
    "?": TERMINATOR,
    "‼": TERMINATOR,  # double exclamation
    "⁇": TERMINATOR,  # double question
    "⁈": TERMINATOR,  # question exclamation
    "⁉": TERMINATOR,  # exclamation question
    "‽": TERMINATOR,  # interrobang
    "…": ELLIPSIS,
    '"': _quote(QuoteRole.EITHER, QuoteStyle.STRAIGHT, QuoteFamily.DOUBLE),
    "'": _quote(QuoteRole.EITHER, QuoteStyle.STRAIGHT, QuoteFamily.SINGLE),
    "“": _quote(QuoteRole.OPEN, QuoteStyle.CURLY, QuoteFamily.DOUBLE),
    "”": _quote(QuoteRole.CLOSE, QuoteStyle.CURLY, QuoteFamily.DOUBLE),
    "„": _quote(QuoteRole.OPEN, QuoteStyle.CURLY, QuoteFamily.DOUBLE),
    "‘": _quote(QuoteRole.OPEN, QuoteStyle.CURLY, QuoteFamily.SINGLE),
    "’": _quote(QuoteRole.CLOSE, QuoteStyle.CURLY, QuoteFamily.SINGLE),
    "«": _quote(QuoteRole.OPEN, QuoteStyle.CURLY, QuoteFamily.DOUBLE),
    "»": _quote(QuoteRole.CLOSE, QuoteStyle.CURLY, QuoteFamily.DOUBLE),
    "-": _dash(DashKind.HYPHEN),
    "‐": _dash(DashKind.HYPHEN),
    "‑": _dash(DashKind.HYPHEN),
    "–": _dash(DashKind.EN_DASH),
    "—": _dash(DashKind.EM_DASH),
    "―": _dash(DashKind.EM_DASH),
    "ʼ": APOSTROPHE,
}

OPENING_BRACKETS = frozenset("([{")
CLOSING_BRACKETS = frozenset(")]}")


def classify(char: str) -> PunctClass:
    """Context-free class of a single code point."""
    if len(char) != 1:
        raise ValueError(f"classify() expects one code point, got {char!r}")
    return _TABLE.get(char, NONE)


def _char_at(text: str, index: int) -> str:
    if 0 <= index < len(text):
        return text[index]
    return ""


def _opens_context(char: str) -> bool:
    """True when a quote after ``char`` would start a quotation."""
    if not char or char.isspace() or char in OPENING_BRACKETS:
        return True
    cls = classify(char)
    return cls.is_open_quote or cls.category is PunctCategory.DASH


def classify_at(text: str, index: int) -> PunctClass:
    """
    Classify ``text[index]`` using its neighbours.

    Single quotes between two letters become apostrophes. Straight quotes
    are resolved to OPEN or CLOSE from surrounding whitespace; a straight
    quote with whitespace on both sides stays EITHER.
    """
    cls = classify(text[index])
    if not cls.is_quote:
        return cls

    prev_char = _char_at(text, index - 1)
    next_char = _char_at(text, index + 1)

    if cls.family is QuoteFamily.SINGLE and cls.role is not QuoteRole.OPEN:
        if prev_char.isalpha() and next_char.isalpha():
            return APOSTROPHE

    if cls.role is not QuoteRole.EITHER:
        return cls

    before_open = _opens_context(prev_char)
    after_space = not next_char or next_char.isspace()
    if before_open and not after_space:
        return cls.with_role(QuoteRole.OPEN)
    if not before_open:
        return cls.with_role(QuoteRole.CLOSE)
    return cls


def ellipsis_length(text: str, index: int, end: Optional[int] = None) -> int:
    """
    Length of the ellipsis run starting at ``index``, or 0.

    Three or more dots form an ellipsis; a horizontal ellipsis character
    absorbs any dots or further ellipsis characters that follow it.
    """
    limit = len(text) if end is None else end
    if index >= limit:
        return 0
    if text[index] == "…":
        j = index + 1
        while j < limit and text[j] in ".…":
            j += 1
        return j - index
    if text[index] == ".":
        j = index
        while j < limit and text[j] == ".":
            j += 1
        if j - index >= 3:
            # Trailing horizontal ellipsis characters join the run
            while j < limit and text[j] == "…":
                j += 1
            return j - index
    return 0


def is_closer(text: str, index: int) -> bool:
    """Closing quote or closing bracket at ``index``."""
    char = _char_at(text, index)
    if not char:
        return False
    if char in CLOSING_BRACKETS:
        return True
    return classify_at(text, index).is_close_quote
