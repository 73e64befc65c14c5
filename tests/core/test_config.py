"""Tests for settings loading and conversion to SegmenterOptions."""

import json

import pytest

from prosaic.core.config import Settings
from prosaic.core.errors import ConfigurationError
from prosaic.segmentation.lexicon import Lexicon


def test_defaults(isolated_env):
    settings = Settings.load_config()
    assert settings.PROSAIC_LEXICON is None
    assert settings.PROSAIC_QUOTE_LOOKAHEAD == 2
    assert settings.PROSAIC_WORKERS == 1
    assert settings.LOG_LEVEL == "warning"


def test_yaml_auto_discovered(isolated_env):
    (isolated_env / ".prosaic.yaml").write_text(
        "PROSAIC_QUOTE_LOOKAHEAD: 5\nPROSAIC_ABBREVIATIONS:\n  - fig\n  - eq\n"
    )
    settings = Settings.load_config()
    assert settings.PROSAIC_QUOTE_LOOKAHEAD == 5
    assert settings.PROSAIC_ABBREVIATIONS == ["fig", "eq"]


def test_env_overrides_file(isolated_env, monkeypatch):
    (isolated_env / ".prosaic.yaml").write_text("PROSAIC_QUOTE_LOOKAHEAD: 5\n")
    monkeypatch.setenv("PROSAIC_QUOTE_LOOKAHEAD", "1")
    assert Settings.load_config().PROSAIC_QUOTE_LOOKAHEAD == 1


def test_explicit_toml(isolated_env):
    path = isolated_env / "segmenter.toml"
    path.write_text('PROSAIC_WORKERS = 3\nPROSAIC_LEXICON = "english"\n')
    settings = Settings.load_config(str(path))
    assert settings.PROSAIC_WORKERS == 3
    assert settings.PROSAIC_LEXICON == "english"


@pytest.mark.parametrize(
    "name,content",
    [
        ("settings.ini", "[x]\n"),
        ("bad.yaml", "- just\n- a list\n"),
        ("zero.yaml", "PROSAIC_WORKERS: 0\n"),
        ("negative.toml", "PROSAIC_QUOTE_LOOKAHEAD = -2\n"),
    ],
)
def test_invalid_config_files(isolated_env, name, content):
    path = isolated_env / name
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        Settings.load_config(str(path))


@pytest.mark.parametrize(
    "name,value",
    [
        ("PROSAIC_WORKERS", "0"),
        ("PROSAIC_QUOTE_LOOKAHEAD", "soon"),
        ("PROSAIC_ABBREVIATIONS", "[\"fig\""),
        ("PROSAIC_SPLIT_ON_INDENT", "maybe"),
    ],
)
def test_invalid_env_values(isolated_env, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        Settings.load_config()


def test_missing_config_file(isolated_env):
    with pytest.raises(ConfigurationError):
        Settings.load_config("nope.yaml")


class TestLexiconResolution:
    """PROSAIC_LEXICON names a packaged lexicon or a JSON file."""

    def test_minimal(self, isolated_env):
        assert Settings(PROSAIC_LEXICON="minimal").lexicon() is None
        assert Settings().lexicon() is None

    def test_english(self, isolated_env):
        assert Settings(PROSAIC_LEXICON="english").lexicon() == Lexicon.english()

    def test_path(self, isolated_env):
        path = isolated_env / "custom.json"
        path.write_text(
            json.dumps(
                {
                    "abbrev_types": ["viz"],
                    "sentence_starters": [],
                    "collocations": [],
                    "ortho_context": {},
                }
            )
        )
        lexicon = Settings(PROSAIC_LEXICON=str(path)).lexicon()
        assert lexicon.contains_abbrev("viz")

    def test_missing_path(self, isolated_env):
        with pytest.raises(ConfigurationError):
            Settings(PROSAIC_LEXICON="missing.json").lexicon()


class TestToOptions:
    """Settings plus CLI overrides become SegmenterOptions."""

    def test_plain(self, isolated_env):
        options = Settings().to_options()
        assert options.quote_lookahead == 2
        assert options.is_abbreviation("dr")
        assert not options.is_abbreviation("approx")

    def test_lexicon_and_overrides(self, isolated_env):
        settings = Settings(
            PROSAIC_LEXICON="english",
            PROSAIC_ABBREVIATIONS=["fig"],
            PROSAIC_SENTENCE_STARTERS=["Anyway"],
        )
        options = settings.to_options(
            quote_lookahead=0, workers=2, abbreviations=["eq"]
        )
        assert options.quote_lookahead == 0
        assert options.workers == 2
        assert options.is_abbreviation("approx")
        assert options.is_abbreviation("fig")
        assert options.is_abbreviation("eq")
        assert options.is_sentence_starter("anyway")
        assert options.is_sentence_starter("however")

    def test_env_list(self, isolated_env, monkeypatch):
        monkeypatch.setenv("PROSAIC_ABBREVIATIONS", '["approx"]')
        assert Settings.load_config().to_options().is_abbreviation("approx")

    def test_env_comma_list(self, isolated_env, monkeypatch):
        monkeypatch.setenv("PROSAIC_ABBREVIATIONS", "fig, approx")
        monkeypatch.setenv("PROSAIC_SENTENCE_STARTERS", "Anyway")
        settings = Settings.load_config()
        assert settings.PROSAIC_ABBREVIATIONS == ["fig", "approx"]
        assert settings.PROSAIC_SENTENCE_STARTERS == ["Anyway"]
        assert settings.to_options().is_abbreviation("approx")

    def test_unknown_override(self, isolated_env):
        with pytest.raises(ConfigurationError):
            Settings().to_options(lookahead=3)

    def test_bad_abbreviation_override(self, isolated_env):
        with pytest.raises(ConfigurationError):
            Settings().to_options(abbreviations=[""])
