from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

CONFIG_DEFAULT = "ghissues.config.yaml"
DEFAULT_BASE_URL = "https://api.github.com"
TOKEN_FALLBACK_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


@dataclass
class Settings:
    base_url: str = DEFAULT_BASE_URL
    user: str | None = None
    repo: str | None = None
    token: str | None = None
    # None keeps the transport default (requests never times out on its own)
    timeout: float | None = None
    logging_json_enabled: bool = False
    logging_level: str = "INFO"
    load_dotenv: bool = True
    dotenv_path: str | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.user and self.repo and self.token)

    def require_target(self) -> tuple[str, str]:
        if not self.user or not self.repo:
            raise ConfigError(
                "GitHub user and repo must be configured "
                "(github.user / github.repo or GHISSUES_USER / GHISSUES_REPO)"
            )
        return self.user, self.repo


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:], None)
    return value


def _parse_timeout(value: Any) -> float | None:
    if value is None or value == '':
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'Invalid timeout value: {value!r}') from exc
    if timeout <= 0:
        raise ConfigError(f'Timeout must be positive, got {timeout}')
    return timeout


def _read_yaml(p: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(p.read_text(encoding='utf-8'))
    except OSError as exc:
        raise ConfigError(f'Cannot read configuration file {p}: {exc}') from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f'Configuration root in {p} must be a mapping')
    return cast(dict[str, Any], raw)


def _load_env_files(dotenv_path: str | None) -> None:
    if dotenv_path:
        if Path(dotenv_path).exists():
            load_dotenv(dotenv_path, override=False)
        return
    for location in ('.env', '.env.local'):
        if Path(location).exists():
            load_dotenv(location, override=False)
            break


def load_settings(path: str | Path | None = None) -> Settings:
    """Build :class:`Settings` from YAML, ``.env`` files and the environment.

    Precedence (lowest to highest): built-in defaults, the YAML file,
    ``GHISSUES_*`` environment variables. An explicit ``path`` that does not
    exist is an error; the default file is optional.
    """
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f'Configuration file not found: {p}')
        raw = _read_yaml(p)
    else:
        default = Path(CONFIG_DEFAULT)
        raw = _read_yaml(default) if default.exists() else {}

    gh = cast(dict[str, Any], raw.get('github', {}) or {})
    http = cast(dict[str, Any], raw.get('http', {}) or {})
    logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
    env_cfg = cast(dict[str, Any], raw.get('environment', {}) or {})

    settings = Settings(
        logging_json_enabled=bool(logging_config.get('json_enabled', False)),
        logging_level=str(logging_config.get('level', 'INFO')),
        load_dotenv=bool(env_cfg.get('load_dotenv', True)),
        dotenv_path=env_cfg.get('dotenv_path'),
    )
    # .env values must be visible before '$VAR' references are resolved
    if settings.load_dotenv:
        _load_env_files(settings.dotenv_path)

    settings.base_url = _resolve_env_var(gh.get('base_url')) or DEFAULT_BASE_URL
    settings.user = _resolve_env_var(gh.get('user'))
    settings.repo = _resolve_env_var(gh.get('repo'))
    settings.token = _resolve_env_var(gh.get('token'))
    settings.timeout = _parse_timeout(http.get('timeout'))

    settings.base_url = os.getenv('GHISSUES_BASE_URL') or settings.base_url
    settings.user = os.getenv('GHISSUES_USER') or settings.user
    settings.repo = os.getenv('GHISSUES_REPO') or settings.repo
    settings.token = os.getenv('GHISSUES_TOKEN') or settings.token
    if not settings.token:
        for var in TOKEN_FALLBACK_VARS:
            if os.getenv(var):
                settings.token = os.getenv(var)
                break
    if os.getenv('GHISSUES_TIMEOUT'):
        settings.timeout = _parse_timeout(os.getenv('GHISSUES_TIMEOUT'))
    return settings


__all__ = ["CONFIG_DEFAULT", "DEFAULT_BASE_URL", "Settings", "load_settings"]
