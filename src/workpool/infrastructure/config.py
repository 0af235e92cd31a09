"""Configuration for workpool.

Settings are read from TOML files and from environment variables named
``WORKPOOL_<SECTION>__<SETTING>``, for example
``WORKPOOL_POOL__DEFAULT_WORKER_COUNT=8``. From highest to lowest priority:

1. Environment variables
2. The project file: ``.workpool/config.toml`` in the working directory, or
   ``workpool.toml`` if that does not exist
3. The user file in the platform's config directory
4. ``/etc/workpool/config.toml``
5. Defaults declared on the settings models below
"""

import json
import logging
import os
from pathlib import Path

import platformdirs
from attrs import frozen
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

logger = logging.getLogger(__name__)

APP_NAME = "workpool"
ENV_PREFIX = "WORKPOOL_"
ENV_NESTED_DELIMITER = "__"
SYSTEM_CONFIG_DIR = Path("/etc") / APP_NAME


class PoolConfig(BaseModel):
    """Settings for pools built with ``ThreadPool.from_config``."""

    default_worker_count: int = Field(
        default=4,
        ge=1,
        le=256,
        description="Number of worker threads (1 to 256)",
    )

    thread_name_prefix: str = Field(
        default="workpool-worker",
        min_length=1,
        description="Worker thread names are this prefix followed by the worker id",
    )


class LoggingConfig(BaseModel):
    """Logging settings used by the ``workpool`` command."""

    log_level: str = Field(
        default="INFO",
        description="Level for workpool loggers: DEBUG, INFO, WARNING, ERROR or CRITICAL",
    )

    log_task_events: bool = Field(
        default=False,
        description="Log each task a worker picks up at INFO instead of DEBUG",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level {v!r}")
        return level


class WorkpoolConfig(BaseSettings):
    """All workpool settings, merged from files and the environment."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        extra="ignore",
        case_sensitive=False,
    )

    pool: PoolConfig = Field(default_factory=PoolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources take precedence
        file_sources = []
        for config_file in active_config_files():
            logger.debug(f"Reading {config_file.scope} configuration from {config_file.path}")
            file_sources.append(TomlConfigSettingsSource(settings_cls, toml_file=config_file.path))
        return (env_settings, *file_sources, init_settings)


@frozen
class ConfigFile:
    """A location where a configuration file is looked for."""

    scope: str
    path: Path

    @property
    def exists(self) -> bool:
        return self.path.is_file()


@frozen
class ResolvedSetting:
    """The effective value of one setting and the source that provided it."""

    section: str
    name: str
    value: object
    source: str

    @property
    def key(self) -> str:
        return f"{self.section}.{self.name}"


def config_file_candidates() -> list[ConfigFile]:
    """Every location a configuration file is looked for, highest priority first."""
    cwd = Path.cwd()
    user_dir = Path(platformdirs.user_config_dir(APP_NAME, appauthor=False))
    return [
        ConfigFile("project", cwd / f".{APP_NAME}" / "config.toml"),
        ConfigFile("project", cwd / f"{APP_NAME}.toml"),
        ConfigFile("user", user_dir / "config.toml"),
        ConfigFile("system", SYSTEM_CONFIG_DIR / "config.toml"),
    ]


def active_config_files() -> list[ConfigFile]:
    """The configuration files that are read, highest priority first.

    Only the first existing file of each scope is used, so
    ``.workpool/config.toml`` hides ``workpool.toml``.
    """
    active: list[ConfigFile] = []
    for candidate in config_file_candidates():
        if candidate.exists and all(f.scope != candidate.scope for f in active):
            active.append(candidate)
    return active


def config_file_for_scope(scope: str) -> Path:
    """Path of the preferred configuration file for "project", "user" or "system"."""
    for candidate in config_file_candidates():
        if candidate.scope == scope:
            return candidate.path
    raise ValueError(f"Unknown configuration scope {scope!r}")


def env_var_name(section: str, name: str) -> str:
    return f"{ENV_PREFIX}{section}{ENV_NESTED_DELIMITER}{name}".upper()


def _sections() -> list[tuple[str, type[BaseModel]]]:
    return [(name, field.annotation) for name, field in WorkpoolConfig.model_fields.items()]


def resolve_settings() -> list[ResolvedSetting]:
    """Load the configuration and report where each value came from.

    The source is the environment variable, the path of the configuration
    file, or "default".

    Raises:
        pydantic.ValidationError: If a file or variable holds an invalid value
    """
    config = WorkpoolConfig()
    file_data = []
    for config_file in active_config_files():
        source = TomlConfigSettingsSource(WorkpoolConfig, toml_file=config_file.path)
        file_data.append((config_file.path, source.toml_data))
    environment = {key.upper() for key in os.environ}

    resolved = []
    for section, model in _sections():
        for name in model.model_fields:
            variable = env_var_name(section, name)
            if variable in environment:
                source = f"environment ({variable})"
            else:
                source = next(
                    (str(path) for path, data in file_data if name in data.get(section, {})),
                    "default",
                )
            value = getattr(getattr(config, section), name)
            resolved.append(ResolvedSetting(section, name, value, source))
    return resolved


def _toml_literal(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(str(value))


def render_example_config() -> str:
    """A commented TOML file that sets every setting to its default.

    Comments are taken from the field descriptions of the settings models.
    """
    lines = [
        f"# {APP_NAME} configuration",
        f"# Environment variables {ENV_PREFIX}<SECTION>{ENV_NESTED_DELIMITER}<SETTING> "
        f"override these values.",
    ]
    for section, model in _sections():
        lines += ["", f"[{section}]"]
        for index, (name, field) in enumerate(model.model_fields.items()):
            if index:
                lines.append("")
            lines.append(f"# {field.description}")
            lines.append(f"# Environment variable: {env_var_name(section, name)}")
            default = field.get_default(call_default_factory=True)
            lines.append(f"{name} = {_toml_literal(default)}")
    return "\n".join(lines) + "\n"


def write_config_file(scope: str = "user", overwrite: bool = False) -> Path:
    """Write the example configuration to the file for ``scope``.

    Raises:
        ValueError: If scope is unknown
        FileExistsError: If the file exists and overwrite is False
        PermissionError: If the file cannot be written
    """
    path = config_file_for_scope(scope)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Configuration file already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_example_config(), encoding="utf-8")
    logger.info(f"Wrote {scope} configuration file {path}")
    return path


_config: WorkpoolConfig | None = None


def get_config(reload: bool = False) -> WorkpoolConfig:
    """The process-wide configuration, loaded on first use or when ``reload`` is set."""
    global _config

    if _config is None or reload:
        _config = WorkpoolConfig()
    return _config
