"""EdgewalkSettings: one frozen object for flags, environment, and edgewalk.toml.

Later sources lose to earlier ones:

1. keyword arguments (the CLI's global flags),
2. ``EDGEWALK_*`` variables, ``__`` separating section and key
   (``EDGEWALK_PAGING__PAGE_SIZE=32``),
3. the ``[store]``, ``[paging]`` and ``[seed]`` tables of the config file,
4. the section models' defaults.

A relative ``store.path`` resolves against :attr:`EdgewalkSettings.root`,
the directory holding the config file, so a store sits next to its
``edgewalk.toml`` wherever the CLI is run from.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from edgewalk.config.discovery import locate_config, read_config
from edgewalk.config.models import PagingConfig, SeedConfig, StoreConfig

# Config file for the settings object being built by from_cli().
_config_file: ContextVar[Path | None] = ContextVar("edgewalk_config_file", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Section tables of the config file in effect."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._tables = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._tables.get(field_name), field_name, field_name in self._tables

    def __call__(self) -> dict[str, Any]:
        return self._tables


class EdgewalkSettings(BaseSettings):
    """Settings for one CLI invocation.

    Attributes:
        root: Base directory for a relative store path.
        config_path: The config file read, or None when running on defaults.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "EDGEWALK_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    store: StoreConfig = Field(default_factory=StoreConfig)
    paging: PagingConfig = Field(default_factory=PagingConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)

    @property
    def db_path(self) -> Path:
        """SQLite file backing the document store."""
        path = Path(self.store.path).expanduser()
        return path if path.is_absolute() else self.root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, TomlSettingsSource(settings_cls, _config_file.get())

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> EdgewalkSettings:
        """Build settings for a CLI run.

        *config_path* is the ``-c`` flag; without it the file comes from
        ``EDGEWALK_CONFIG`` or a walk up from *root* (default: the cwd).
        *root* defaults to the config file's directory.

        Raises:
            ConfigFileError: The named file is missing or the TOML is bad.
        """
        toml_path = locate_config(config_path, root)
        if root is None:
            root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _config_file.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **cli_flags)
        finally:
            _config_file.reset(token)
