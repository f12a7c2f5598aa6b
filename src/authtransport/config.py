"""Transport configuration from YAML file.

Reads the ``transport:`` section of a YAML file:

    transport:
      recheck_before_refresh: true
      pool_connections: 10
      pool_maxsize: 10
      max_retries: 0
      mount_prefixes: ["https://"]
      token_file: ${AUTH_TRANSPORT_TOKEN_FILE:-/var/run/tokens.json}
      token_key: https://api.example.com/

Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
AUTH_TRANSPORT_TOKEN_FILE and AUTH_TRANSPORT_TOKEN_KEY override the token file
settings.
"""

import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
import yaml
from requests.adapters import HTTPAdapter

from authtransport.oauth2.exceptions import InvalidConfigurationError
from authtransport.oauth2.fetchers.base import TokenFetcher
from authtransport.oauth2.fetchers.file import FileTokenFetcher
from authtransport.oauth2.models import OAuth2Token
from authtransport.transport.authorized import AuthorizedTransport
from authtransport.transport.session import build_authorized_session

logger = logging.getLogger(__name__)

TOKEN_FILE_ENV = "AUTH_TRANSPORT_TOKEN_FILE"
TOKEN_KEY_ENV = "AUTH_TRANSPORT_TOKEN_KEY"


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class TransportConfig:
    """Authorized transport configuration."""

    recheck_before_refresh: bool = True
    pool_connections: int = 10
    pool_maxsize: int = 10
    max_retries: int = 0
    mount_prefixes: List[str] = field(default_factory=lambda: ["https://", "http://"])
    token_file: Optional[str] = None
    token_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransportConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown transport settings: {sorted(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        try:
            for name in ("pool_connections", "pool_maxsize", "max_retries"):
                if name in values:
                    values[name] = int(values[name])
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"Invalid integer transport setting: {e}") from e
        if "recheck_before_refresh" in values:
            values["recheck_before_refresh"] = _as_bool(values["recheck_before_refresh"])
        if isinstance(values.get("mount_prefixes"), str):
            values["mount_prefixes"] = [values["mount_prefixes"]]
        return cls(**values)

    def validate(self) -> None:
        """
        Raises:
            InvalidConfigurationError: If any setting is out of range
        """
        errors = []
        if self.pool_connections < 1:
            errors.append(f"pool_connections must be >= 1, got {self.pool_connections}")
        if self.pool_maxsize < 1:
            errors.append(f"pool_maxsize must be >= 1, got {self.pool_maxsize}")
        if self.max_retries < 0:
            errors.append(f"max_retries must be >= 0, got {self.max_retries}")
        if not self.mount_prefixes:
            errors.append("mount_prefixes must not be empty")
        if errors:
            raise InvalidConfigurationError("; ".join(errors))

    def build_underlying(self) -> HTTPAdapter:
        """Build the HTTPAdapter that sends authorized requests."""
        return HTTPAdapter(
            pool_connections=self.pool_connections,
            pool_maxsize=self.pool_maxsize,
            max_retries=self.max_retries,
        )


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> TransportConfig:
    """Load transport configuration.

    Without a path, defaults are used (plus overrides and environment).
    Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.

    Raises:
        FileNotFoundError: If config_path is given but does not exist
        InvalidConfigurationError: If the settings are invalid
    """
    transport_config: Dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from file: {config_path}")
        yaml_data = _expand_env_vars(load_yaml(config_path))
        transport_config = yaml_data.get("transport", {}) or {}

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        transport_config = _deep_merge(transport_config, overrides)

    if os.getenv(TOKEN_FILE_ENV):
        transport_config["token_file"] = os.getenv(TOKEN_FILE_ENV)
    if os.getenv(TOKEN_KEY_ENV):
        transport_config["token_key"] = os.getenv(TOKEN_KEY_ENV)

    config = TransportConfig.from_dict(transport_config)
    config.validate()
    return config


def build_transport(
    config: TransportConfig,
    fetcher: Optional[TokenFetcher] = None,
    token: Optional[OAuth2Token] = None,
) -> AuthorizedTransport:
    """Build an AuthorizedTransport from configuration.

    Without an explicit fetcher, the configured token file is used.
    """
    if fetcher is None:
        if not config.token_file:
            raise InvalidConfigurationError(
                f"No token fetcher given and no token_file configured (set {TOKEN_FILE_ENV})"
            )
        fetcher = FileTokenFetcher(config.token_file, config.token_key)

    logger.debug(
        "Building authorized transport",
        extra={"fetcher": repr(fetcher), "recheck_before_refresh": config.recheck_before_refresh},
    )
    return AuthorizedTransport(
        fetcher,
        token=token,
        underlying=config.build_underlying(),
        recheck_before_refresh=config.recheck_before_refresh,
    )


def build_session(
    config: TransportConfig,
    fetcher: Optional[TokenFetcher] = None,
    token: Optional[OAuth2Token] = None,
) -> requests.Session:
    """Build a requests.Session with a configured transport mounted on mount_prefixes."""
    transport = build_transport(config, fetcher=fetcher, token=token)
    return build_authorized_session(transport, config.mount_prefixes)


__all__ = [
    "TransportConfig",
    "load_config",
    "load_yaml",
    "build_transport",
    "build_session",
    "TOKEN_FILE_ENV",
    "TOKEN_KEY_ENV",
]
