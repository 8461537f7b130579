import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from aicc.application.config_models import ControllerConfig
from aicc.domain.constants import CONFIG_DIRNAME, CONFIG_FILENAME
from aicc.domain.providers.catalog import ProviderCatalog


class ConfigLoadError(Exception):
    def __init__(self, message: str, *, path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge mapping keys. For non-dict values, overlay wins.

    Per-provider maps (models, timeouts, credentials) merge by provider id.
    """
    merged: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    """
    Load YAML file and ensure root is a mapping.
    """
    # Protect against TOCTOU race conditions.
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except Exception as e:  # pragma: no cover
        raise ConfigLoadError("Failed to read config file", path=path, cause=e) from e

    try:
        data = yaml.safe_load(raw)
    except Exception as e:
        raise ConfigLoadError("Malformed YAML", path=path, cause=e) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigLoadError("YAML root must be a mapping", path=path)

    return data


def config_path(root: Path) -> Path:
    return root / CONFIG_DIRNAME / CONFIG_FILENAME


def _anchor_working_dir(data: dict[str, Any], root: Path) -> dict[str, Any]:
    """
    Resolve a relative ``working_dir`` against the directory holding ``.aicc/``.
    """
    value = data.get("working_dir")
    if not isinstance(value, str):
        return data
    path = Path(value).expanduser()
    if path.is_absolute():
        return data
    return {**data, "working_dir": str((root / path).resolve())}


def _load_root(root: Path) -> dict[str, Any]:
    return _anchor_working_dir(_load_yaml_mapping(config_path(root)), root)


def load_config(*, project_root: Path | None = None, user_home: Path | None = None) -> ControllerConfig:
    """
    Load and merge config with precedence (highest wins):
    CLI args (handled in CLI) > project > user > defaults.

    Files:
      - user:    user_home/.aicc/config.yml
      - project: project_root/.aicc/config.yml

    A relative working_dir is taken relative to the root holding that file.
    """
    project_root = project_root or Path.cwd()
    user_home = user_home or Path.home()

    merged: dict[str, Any] = {}
    merged = _deep_merge(merged, _load_root(user_home))
    if project_root.resolve() != user_home.resolve():
        merged = _deep_merge(merged, _load_root(project_root))

    try:
        return ControllerConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid configuration ({e.error_count()} error(s)): {e}", cause=e) from e


def resolve_credentials(
    config: ControllerConfig,
    catalog: ProviderCatalog,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build the per-provider credential map handed to the orchestrator.

    Precedence (highest wins): the provider's conventional environment
    variable (e.g. OPENAI_API_KEY), AICC_<ID>_API_KEY, the config file.
    Providers that need no credential are skipped.
    """
    environ = os.environ if environ is None else environ

    credentials: dict[str, str] = {}
    for provider in catalog.all():
        if not provider.requires_credential:
            continue
        candidates = [
            environ.get(provider.credential_env) if provider.credential_env else None,
            environ.get(f"AICC_{provider.id.upper()}_API_KEY"),
            config.credentials.get(provider.id),
        ]
        for value in candidates:
            if value and value.strip():
                credentials[provider.id] = value.strip()
                break

    return credentials
