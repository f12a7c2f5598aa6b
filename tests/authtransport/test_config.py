"""Tests for transport configuration."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from requests.adapters import HTTPAdapter

from authtransport.config import (
    TOKEN_FILE_ENV,
    TOKEN_KEY_ENV,
    TransportConfig,
    _deep_merge,
    _expand_env_vars,
    build_session,
    build_transport,
    load_config,
    load_yaml,
)
from authtransport.oauth2.exceptions import InvalidConfigurationError
from authtransport.oauth2.fetchers import CallableTokenFetcher, FileTokenFetcher
from authtransport.oauth2.models import OAuth2Token
from authtransport.transport.authorized import AuthorizedTransport

# =========================================================================
# load_yaml / env expansion
# =========================================================================


class TestLoadYaml:
    def test_returns_empty_dict_for_nonexistent_file(self):
        assert load_yaml(Path("/nonexistent/path/config.yaml")) == {}

    def test_loads_yaml_file(self, tmp_path):
        config_file = tmp_path / "test.yaml"
        config_file.write_text("transport:\n  pool_maxsize: 4\n")
        assert load_yaml(config_file) == {"transport": {"pool_maxsize": 4}}

    def test_returns_empty_dict_for_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_yaml(config_file) == {}


class TestExpandEnvVars:
    def test_expands_variable(self):
        with patch.dict(os.environ, {"TOKEN_DIR": "/run/tokens"}):
            assert _expand_env_vars("${TOKEN_DIR}/api.json") == "/run/tokens/api.json"

    def test_uses_default_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("${TOKEN_DIR:-/tmp}") == "/tmp"

    def test_leaves_unset_variable_without_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("${TOKEN_DIR}") == "${TOKEN_DIR}"

    def test_recurses_into_containers(self):
        with patch.dict(os.environ, {"PREFIX": "https://"}):
            data = {"mount_prefixes": ["${PREFIX}"], "nested": {"x": "${PREFIX}"}, "n": 3}
            assert _expand_env_vars(data) == {
                "mount_prefixes": ["https://"],
                "nested": {"x": "https://"},
                "n": 3,
            }


class TestDeepMerge:
    def test_overlay_wins(self):
        assert _deep_merge({"a": 1, "b": {"c": 1}}, {"b": {"d": 2}}) == {
            "a": 1,
            "b": {"c": 1, "d": 2},
        }


# =========================================================================
# TransportConfig
# =========================================================================


class TestTransportConfig:
    def test_defaults(self):
        config = TransportConfig()

        assert config.recheck_before_refresh is True
        assert config.pool_connections == 10
        assert config.pool_maxsize == 10
        assert config.max_retries == 0
        assert config.mount_prefixes == ["https://", "http://"]
        assert config.token_file is None
        config.validate()

    def test_from_dict_coerces_types(self):
        config = TransportConfig.from_dict(
            {
                "pool_connections": "4",
                "pool_maxsize": "8",
                "max_retries": "2",
                "recheck_before_refresh": "false",
                "mount_prefixes": "https://api.example.com/",
            }
        )

        assert config.pool_connections == 4
        assert config.pool_maxsize == 8
        assert config.max_retries == 2
        assert config.recheck_before_refresh is False
        assert config.mount_prefixes == ["https://api.example.com/"]

    def test_from_dict_ignores_unknown_keys(self):
        config = TransportConfig.from_dict({"pool_maxsize": 3, "colour": "blue"})
        assert config.pool_maxsize == 3

    def test_from_dict_rejects_bad_integer(self):
        with pytest.raises(InvalidConfigurationError, match="integer"):
            TransportConfig.from_dict({"pool_maxsize": "lots"})

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"pool_connections": 0}, "pool_connections"),
            ({"pool_maxsize": 0}, "pool_maxsize"),
            ({"max_retries": -1}, "max_retries"),
            ({"mount_prefixes": []}, "mount_prefixes"),
        ],
    )
    def test_validate_rejects(self, overrides, message):
        with pytest.raises(InvalidConfigurationError, match=message):
            TransportConfig(**overrides).validate()

    def test_build_underlying(self):
        adapter = TransportConfig(pool_connections=2, pool_maxsize=5, max_retries=3).build_underlying()

        assert isinstance(adapter, HTTPAdapter)
        assert adapter.max_retries.total == 3


# =========================================================================
# load_config
# =========================================================================


class TestLoadConfig:
    def test_defaults_without_path(self):
        assert load_config() == TransportConfig()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_reads_transport_section(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "transport:\n"
            "  pool_maxsize: 20\n"
            "  recheck_before_refresh: false\n"
            "  token_file: /run/tokens.json\n"
            "  token_key: https://api.example.com/\n"
        )

        config = load_config(config_file)

        assert config.pool_maxsize == 20
        assert config.recheck_before_refresh is False
        assert config.token_file == "/run/tokens.json"
        assert config.token_key == "https://api.example.com/"

    def test_file_without_transport_section(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("other: {}\n")

        assert load_config(config_file) == TransportConfig()

    def test_expands_env_vars(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TOKEN_DIR", "/secrets")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("transport:\n  token_file: ${TOKEN_DIR}/tokens.json\n")

        assert load_config(config_file).token_file == "/secrets/tokens.json"

    def test_overrides_applied(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("transport:\n  pool_maxsize: 20\n")

        config = load_config(config_file, overrides={"pool_maxsize": 2})
        assert config.pool_maxsize == 2

    def test_env_overrides_token_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(TOKEN_FILE_ENV, "/env/tokens.json")
        monkeypatch.setenv(TOKEN_KEY_ENV, "api")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("transport:\n  token_file: /yaml/tokens.json\n")

        config = load_config(config_file)

        assert config.token_file == "/env/tokens.json"
        assert config.token_key == "api"

    def test_invalid_settings_raise(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("transport:\n  max_retries: -2\n")

        with pytest.raises(InvalidConfigurationError):
            load_config(config_file)


# =========================================================================
# build_transport / build_session
# =========================================================================


class TestBuildTransport:
    def test_uses_given_fetcher(self):
        fetcher = CallableTokenFetcher(lambda current: OAuth2Token(access_token="x"))
        token = OAuth2Token(access_token="initial")

        transport = build_transport(TransportConfig(recheck_before_refresh=False), fetcher, token)

        assert isinstance(transport, AuthorizedTransport)
        assert transport.fetcher is fetcher
        assert transport.recheck_before_refresh is False
        assert transport.get_token() == token
        assert isinstance(transport.underlying, HTTPAdapter)

    def test_falls_back_to_token_file(self, tmp_path):
        path = tmp_path / "tokens.json"
        path.write_text(json.dumps({"api": {"access_token": "from-file"}}))

        transport = build_transport(TransportConfig(token_file=str(path), token_key="api"))

        assert isinstance(transport.fetcher, FileTokenFetcher)
        transport.refresh_token()
        assert transport.get_token().access_token == "from-file"

    def test_requires_fetcher_or_token_file(self):
        with pytest.raises(InvalidConfigurationError, match="token_file"):
            build_transport(TransportConfig())


class TestBuildSession:
    def test_mounts_on_configured_prefixes(self):
        fetcher = CallableTokenFetcher(lambda current: OAuth2Token(access_token="x"))
        config = TransportConfig(mount_prefixes=["https://api.example.com/"])

        session = build_session(config, fetcher)

        adapter = session.get_adapter("https://api.example.com/items")
        assert isinstance(adapter, AuthorizedTransport)
        assert not isinstance(session.get_adapter("https://elsewhere.example.com/"), AuthorizedTransport)
