import json
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from .errors import ConfigurationError


class Settings(BaseSettings):
    # Segmentation policy
    PROSAIC_LEXICON: Optional[str] = None  # english | minimal | path to JSON
    # Comma separated or a JSON array when read from the environment
    PROSAIC_ABBREVIATIONS: Annotated[List[str], NoDecode] = []  # Extra abbreviations
    PROSAIC_SENTENCE_STARTERS: Annotated[List[str], NoDecode] = []  # Extra starters
    PROSAIC_QUOTE_LOOKAHEAD: int = Field(default=2, ge=0)
    PROSAIC_SPLIT_ON_INDENT: bool = False
    PROSAIC_WORKERS: int = Field(default=1, ge=1)  # Paragraph fan-out

    # Verification reports
    PROSAIC_VERIFY_DIR: str = "var/verify"

    # Observability
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: str = "warning"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("PROSAIC_ABBREVIATIONS", "PROSAIC_SENTENCE_STARTERS", mode="before")
    @classmethod
    def _split_word_list(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        if v.strip().startswith("["):
            return json.loads(v)
        from ..segmentation.lexicon import iter_words

        return list(iter_words([v]))

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        config_path: Optional[Path]
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_file}")
        else:
            # Auto-discover .prosaic.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".prosaic.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path is not None:
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config format: {config_path.suffix}"
                )

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must hold a mapping")

        # Environment variables override file values; CLI flags override both
        try:
            env_settings = cls()
            explicit_env = env_settings.model_fields_set
            merged = {**config_data, **env_settings.model_dump(include=explicit_env)}
            return cls.model_validate(merged)
        except (ValidationError, SettingsError) as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    def lexicon(self):
        """Resolve PROSAIC_LEXICON to a Lexicon, or None for the built-in defaults."""
        from ..segmentation.lexicon import Lexicon

        name = (self.PROSAIC_LEXICON or "").strip()
        if not name or name == "minimal":
            return None
        if name == "english":
            return Lexicon.english()
        return Lexicon.load(name)

    def to_options(self, **overrides: Any):
        """Build SegmenterOptions from these settings plus CLI overrides."""
        from ..segmentation.options import SegmenterOptions

        options = SegmenterOptions(
            quote_lookahead=overrides.pop("quote_lookahead", self.PROSAIC_QUOTE_LOOKAHEAD),
            split_on_indent=overrides.pop("split_on_indent", self.PROSAIC_SPLIT_ON_INDENT),
            workers=overrides.pop("workers", self.PROSAIC_WORKERS),
        )
        lexicon = self.lexicon()
        if lexicon is not None:
            options = options.with_lexicon(lexicon)

        extra_abbreviations = list(self.PROSAIC_ABBREVIATIONS)
        extra_abbreviations.extend(overrides.pop("abbreviations", []))
        if extra_abbreviations:
            options = options.with_abbreviations(*extra_abbreviations)
        if self.PROSAIC_SENTENCE_STARTERS:
            options = options.with_sentence_starters(*self.PROSAIC_SENTENCE_STARTERS)
        if overrides:
            raise ConfigurationError(f"Unknown option overrides: {sorted(overrides)}")
        return options

