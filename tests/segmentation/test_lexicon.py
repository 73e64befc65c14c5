"""Tests for lexicon loading and lookups."""

import json

import pytest

from prosaic.core.errors import ConfigurationError
from prosaic.segmentation.lexicon import (
    ORTHO_BEG_UC,
    ORTHO_MID_LC,
    ORTHO_MID_UC,
    Lexicon,
    iter_words,
    normalize_entry,
    starts_sentence_by_context,
)


def test_normalize_entry():
    assert normalize_entry(" Mr. ") == "mr"
    assert normalize_entry("e.g.") == "e.g"
    with pytest.raises(ValueError):
        normalize_entry("")
    with pytest.raises(ValueError):
        normalize_entry("two words")
    with pytest.raises(ValueError):
        normalize_entry(7)


class TestLexicon:
    """Punkt-style language data."""

    def test_lookups_ignore_case_and_trailing_period(self):
        lexicon = Lexicon(
            abbreviations=["Dr", "etc."],
            sentence_starters=["However"],
            collocations=[("Jan", "5")],
        )
        assert lexicon.contains_abbrev("DR.")
        assert lexicon.contains_abbrev("etc")
        assert not lexicon.contains_abbrev("doctor")
        assert lexicon.contains_sentence_starter("however")
        assert lexicon.contains_collocation("jan.", "5")
        assert not lexicon.contains_collocation("feb", "5")

    def test_from_json(self):
        data = {
            "abbrev_types": ["approx"],
            "sentence_starters": ["the"],
            "collocations": [["no", "1"]],
            "ortho_context": {},
        }
        lexicon = Lexicon.from_json(json.dumps(data))
        assert lexicon.abbreviations == frozenset({"approx"})
        assert lexicon.collocations == frozenset({("no", "1")})
        assert lexicon.orthographic_context == {}

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            '{"abbrev_types": []}',
            '{"abbrev_types": "mr", "sentence_starters": [], "collocations": [], "ortho_context": {}}',
            '{"abbrev_types": [""], "sentence_starters": [], "collocations": [], "ortho_context": {}}',
            '{"abbrev_types": [], "sentence_starters": [], "collocations": [["a"]], "ortho_context": {}}',
            '{"abbrev_types": [], "sentence_starters": [], "collocations": [5], "ortho_context": {}}',
            '{"abbrev_types": [], "sentence_starters": [], "collocations": []}',
            '{"abbrev_types": [], "sentence_starters": [], "collocations": [], "ortho_context": []}',
            '{"abbrev_types": [], "sentence_starters": [], "collocations": [], "ortho_context": {"the": "x"}}',
            '{"abbrev_types": [], "sentence_starters": [], "collocations": [], "ortho_context": {"the": 1024}}',
        ],
    )
    def test_malformed_data_rejected(self, payload):
        with pytest.raises(ConfigurationError):
            Lexicon.from_json(payload)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"abbreviations": None},
            {"abbreviations": 5},
            {"collocations": [5]},
            {"collocations": 5},
            {"orthographic_context": ["the"]},
            {"orthographic_context": {"the": -1}},
        ],
    )
    def test_malformed_fields_raise_configuration_error(self, kwargs):
        with pytest.raises(ConfigurationError):
            Lexicon(**kwargs)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Lexicon.load(tmp_path / "missing.json")

    def test_load_round_trip(self, tmp_path):
        lexicon = Lexicon(
            abbreviations=["viz"],
            sentence_starters=["so"],
            orthographic_context={"because": ORTHO_BEG_UC | ORTHO_MID_LC},
        )
        path = tmp_path / "lexicon.json"
        path.write_text(json.dumps(lexicon.to_mapping()), encoding="utf-8")
        assert Lexicon.load(path) == lexicon

    def test_english(self):
        english = Lexicon.english()
        assert english.contains_abbrev("Inc.")
        assert english.contains_abbrev("p.m")
        assert english.contains_sentence_starter("However")
        assert english.contains_collocation("fig", "1")
        assert english.get_orthographic_context("Because") == ORTHO_BEG_UC | ORTHO_MID_LC
        assert english.get_orthographic_context("zebra") == 0

    def test_merge(self):
        merged = Lexicon(abbreviations=["a1"]).merge(
            Lexicon(abbreviations=["b2"], sentence_starters=["the"])
        )
        assert merged.abbreviations == frozenset({"a1", "b2"})
        assert merged.sentence_starters == frozenset({"the"})

    def test_merge_ors_orthographic_flags(self):
        merged = Lexicon(orthographic_context={"may": ORTHO_BEG_UC}).merge(
            Lexicon(orthographic_context={"May": ORTHO_MID_UC, "one": ORTHO_MID_LC})
        )
        assert merged.get_orthographic_context("may") == ORTHO_BEG_UC | ORTHO_MID_UC
        assert merged.get_orthographic_context("one") == ORTHO_MID_LC

    def test_is_immutable(self):
        lexicon = Lexicon()
        with pytest.raises(Exception):
            lexicon.abbreviations = frozenset({"x"})


def test_iter_words():
    assert list(iter_words(["Fig, Eq", "approx", " , "])) == ["Fig", "Eq", "approx"]


class TestOrthographicContext:
    """Word -> flags recording where a word was seen and in which case."""

    def test_from_json(self):
        data = {
            "abbrev_types": [],
            "sentence_starters": [],
            "collocations": [],
            "ortho_context": {"Because": 34, "march": 38},
        }
        lexicon = Lexicon.from_json(json.dumps(data))
        assert lexicon.contains_orthographic_context("because")
        assert lexicon.contains_orthographic_context("MARCH")
        assert not lexicon.contains_orthographic_context("april")
        assert lexicon.get_orthographic_context("march") == 38

    def test_seen_lowercase_only_at_sentence_start(self):
        assert starts_sentence_by_context(ORTHO_BEG_UC | ORTHO_MID_LC)

    def test_capitalized_mid_sentence_is_not_a_start(self):
        assert not starts_sentence_by_context(ORTHO_BEG_UC | ORTHO_MID_UC | ORTHO_MID_LC)

    def test_never_seen_lowercase_is_not_a_start(self):
        assert not starts_sentence_by_context(ORTHO_BEG_UC)
        assert not starts_sentence_by_context(0)
