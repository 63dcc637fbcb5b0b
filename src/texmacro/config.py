"""Centralised configuration using pydantic-settings.

All settings are read through the Settings class.  The CLI calls
``get_settings()`` once at startup; core functions never read settings
themselves and take what they need as arguments.  Tests construct
``Settings(_env_file=None, ...)`` directly for isolation.

Environment variables use double-underscore nesting: ``PATHS__INPUT``,
``MACROS__DIRECTORY``, ``PANDOC__EXECUTABLE``, ``LOG__LEVEL``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from texmacro.macros.table import MacroSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class PathsConfig(BaseModel):
    """Input document and output locations."""

    input: Path = Path("paper.markdown")
    output_dir: Path = Path("tmp/autogen")

    @property
    def pre_path(self) -> Path:
        """Diagnostic copy of the pre-processed markdown."""
        return self.output_dir / f"{self.input.name}.pre"

    @property
    def tex_path(self) -> Path:
        return self.output_dir / f"{self.input.name}.tex"


def _default_sources() -> list[MacroSource]:
    # Priority order: base macros, operator tables, overlay macros
    return [
        MacroSource(path=Path("pre_macros.csv")),
        MacroSource(path=Path("ttbf_op.csv"), wrap="ttbfop"),
        MacroSource(path=Path("it_op.csv"), wrap="itop"),
        MacroSource(path=Path("post_macros.csv")),
    ]


class MacroConfig(BaseModel):
    """Macro table locations, in application order."""

    directory: Path = Path("macros")
    sources: list[MacroSource] = Field(default_factory=_default_sources)

    def resolved_sources(self) -> list[MacroSource]:
        """Sources with relative paths joined onto ``directory``."""
        return [
            source.model_copy(update={"path": self.directory / source.path})
            for source in self.sources
        ]


class PandocConfig(BaseModel):
    """Pandoc executable and formats."""

    executable: str = "pandoc"
    reader: str = "markdown"
    writer: str = "latex"
    timeout: int = 60


class LogConfig(BaseModel):
    """Log file location and console verbosity."""

    dir: Path = Path("logs")
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def level_is_known(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value!r}"
            raise ValueError(msg)
        return level


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic ``.env`` loading and type validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    paths: PathsConfig = PathsConfig()
    macros: MacroConfig = MacroConfig()
    pandoc: PandocConfig = PandocConfig()
    log: LogConfig = LogConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
