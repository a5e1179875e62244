"""Configuration loading.

Layers, lowest to highest precedence:

1. Built-in defaults (``craprs.config.models``)
2. Global YAML: ``~/.config/craprs/config.yaml``
3. Project YAML: ``<project>/.craprs.yaml``
4. Environment: ``CRAPRS__<SECTION>__<KEY>``
5. Keyword overrides passed to ``load_config`` (the CLI options)

YAML layers are deep-merged per section: a project file that sets only
``coverage.tool`` keeps a global ``coverage.timeout_sec``.
"""

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from craprs.config.models import (
    AnalysisConfig,
    CoverageConfig,
    CrapConfig,
    LoggingConfig,
    ReportConfig,
)
from craprs.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/craprs/config.yaml").expanduser()
PROJECT_CONFIG_NAME = ".craprs.yaml"

# Merged YAML layers of the load_config call in progress
_yaml_layer: ContextVar[dict[str, Any]] = ContextVar("craprs_yaml_layer")


def _load_yaml(path: Path) -> dict[str, Any]:
    """Parse one YAML layer; a missing or empty file is an empty layer."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class CrapSettings(BaseSettings):
    """Environment-aware mirror of ``CrapConfig``."""

    model_config = SettingsConfigDict(
        env_prefix="CRAPRS__",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_settings = InitSettingsSource(settings_cls, init_kwargs=_yaml_layer.get({}))
        # First wins
        return (init_settings, env_settings, yaml_settings)


def load_config(project_dir: Path | None = None, **overrides: Any) -> CrapConfig:
    """Resolve the configuration for one project.

    Args:
        project_dir: Cargo project root holding ``.craprs.yaml``. Defaults to
            the current working directory.
        **overrides: Per-section values with the highest precedence, e.g.
            ``coverage={"tool": "llvm-cov"}``.

    Raises:
        ConfigError: A YAML layer does not parse, or a value fails validation.
    """
    project_dir = project_dir or Path.cwd()
    layer = _deep_merge(
        _load_yaml(GLOBAL_CONFIG_PATH),
        _load_yaml(project_dir / PROJECT_CONFIG_NAME),
    )

    token = _yaml_layer.set(layer)
    try:
        settings = CrapSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(field, first.get("input"), first["msg"]) from e
    finally:
        _yaml_layer.reset(token)
    return CrapConfig.model_validate(settings.model_dump())
