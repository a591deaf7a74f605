"""Layered configuration loading.

Sources, highest precedence first:

1. keyword overrides passed to ``load_config`` (the CLI flags)
2. ``COMPACTION__SECTION__KEY`` environment variables
3. ``<project>/.compaction/config.yaml``
4. ``~/.config/compaction/config.yaml``
5. model defaults

YAML layers are deep-merged before pydantic-settings sees them, so a repo
file can override one key of a section without restating the rest.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from compaction.config.constants import CONFIG_DIR_NAME, ENV_PREFIX
from compaction.config.models import CompactionConfig, ContextConfig, LoggingConfig, ServerConfig
from compaction.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/compaction/config.yaml").expanduser()
REPO_CONFIG_NAME = "config.yaml"


def repo_config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIR_NAME / REPO_CONFIG_NAME


def _read_yaml(path: Path) -> dict[str, Any]:
    """Mapping stored at ``path``; a missing or empty file is ``{}``."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _merge(lower: dict[str, Any], upper: dict[str, Any]) -> dict[str, Any]:
    """Recursive dict merge; ``upper`` wins on conflicts."""
    merged = dict(lower)
    for key, value in upper.items():
        below = merged.get(key)
        merged[key] = _merge(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return merged


class _YamlLayer(PydanticBaseSettingsSource):
    """Feeds the already merged YAML mapping to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._data


def _settings_for(data: dict[str, Any]) -> type[BaseSettings]:
    """Settings class bound to one load's YAML data (no shared class state)."""

    class _Settings(BaseSettings):
        model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_nested_delimiter="__", case_sensitive=False)

        logging: LoggingConfig = LoggingConfig()
        context: ContextConfig = ContextConfig()
        server: ServerConfig = ServerConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlLayer(settings_cls, data))

    return _Settings


def load_config(project_root: Path | None = None, **overrides: Any) -> CompactionConfig:
    """Build the effective configuration for ``project_root`` (default: cwd).

    ``overrides`` are per-section mappings, e.g.
    ``load_config(root, context={"max_tracked_files": 5})``. The project root
    is also the default ``context.project_root``.

    Raises:
        ConfigError: A YAML file does not parse, or a value fails validation
    """
    root = (project_root or Path.cwd()).resolve()

    data = _merge(_read_yaml(GLOBAL_CONFIG_PATH), _read_yaml(repo_config_path(root)))
    context = data.get("context")
    if context is None:
        data["context"] = {"project_root": str(root)}
    elif isinstance(context, dict):
        context.setdefault("project_root", str(root))

    try:
        settings = _settings_for(data)(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(location, first.get("input"), first["msg"]) from e
    return CompactionConfig.model_validate(settings.model_dump())
