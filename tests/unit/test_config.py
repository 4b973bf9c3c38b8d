"""Tests for tobacco_watch.core.config."""

import os

import pytest
from pydantic import ValidationError

from tobacco_watch.core.config import (
    AcquisitionConfig,
    BappebtiConfig,
    TobaccoWatchConfig,
    WeatherConfig,
    _auto_cast,
    _merge_env_vars,
    load_config,
)
from tobacco_watch.core.exceptions import ConfigError
from tobacco_watch.core.models import ProviderType


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and working dir."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TOBACCO_WATCH_"):
            monkeypatch.delenv(key)


class TestBappebtiConfig:
    def test_defaults(self):
        c = BappebtiConfig()
        assert c.base_url == "https://infoharga.bappebti.go.id"
        assert c.commodities == [
            "TEMBAKAU BOYOLALI",
            "TEMBAKAU BURLEY",
            "TEMBAKAU KASTURI",
        ]
        assert c.request_timeout == 10.0

    def test_trailing_slash_stripped(self):
        c = BappebtiConfig(base_url="https://example.com/")
        assert c.base_url == "https://example.com"

    def test_base_url_requires_scheme(self):
        with pytest.raises(ValidationError, match="http"):
            BappebtiConfig(base_url="infoharga.bappebti.go.id")

    def test_rate_limit_bounds(self):
        with pytest.raises(ValidationError, match="between 1 and 10"):
            BappebtiConfig(rate_limit=0)
        with pytest.raises(ValidationError, match="between 1 and 10"):
            BappebtiConfig(rate_limit=11)

    def test_timeout_positive(self):
        with pytest.raises(ValidationError, match="request_timeout"):
            BappebtiConfig(request_timeout=0)

    def test_commodities_from_csv(self):
        c = BappebtiConfig(commodities="TEMBAKAU BURLEY, TEMBAKAU KASTURI")
        assert c.commodities == ["TEMBAKAU BURLEY", "TEMBAKAU KASTURI"]


class TestAcquisitionConfig:
    def test_default_chain_is_live_then_research(self):
        c = AcquisitionConfig()
        assert c.providers == [ProviderType.BAPPEBTI, ProviderType.RESEARCH]

    def test_empty_chain_rejected(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            AcquisitionConfig(providers=[])

    def test_duplicates_rejected(self):
        with pytest.raises(ValidationError, match="duplicates"):
            AcquisitionConfig(providers=["research", "research"])

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError):
            AcquisitionConfig(providers=["carrier-pigeon"])

    def test_csv_string_accepted(self):
        c = AcquisitionConfig(providers="bappebti,news,research")
        assert c.providers == [
            ProviderType.BAPPEBTI,
            ProviderType.NEWS,
            ProviderType.RESEARCH,
        ]


class TestWeatherConfig:
    def test_defaults(self):
        c = WeatherConfig()
        assert c.api_key is None
        assert c.default_region == "Jember"
        assert c.multi_regions == ["Jember", "Surabaya", "Malang", "Banyuwangi"]


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config()
        assert isinstance(config, TobaccoWatchConfig)
        assert config.api.port == 8080

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TOBACCO_WATCH_WEATHER__API_KEY", "secret")
        monkeypatch.setenv("TOBACCO_WATCH_BAPPEBTI__REQUEST_TIMEOUT", "5")
        config = load_config()
        assert config.weather.api_key == "secret"
        assert config.bappebti.request_timeout == 5

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "custom.yml"
        path.write_text(
            "storage:\n  sqlite_path: /tmp/prices.db\n"
            "acquisition:\n  providers: [news, research]\n"
        )
        config = load_config(str(path))
        assert config.storage.sqlite_path == "/tmp/prices.db"
        assert config.acquisition.providers == [
            ProviderType.NEWS,
            ProviderType.RESEARCH,
        ]

    def test_env_beats_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yml"
        path.write_text("api:\n  port: 9000\n")
        monkeypatch.setenv("TOBACCO_WATCH_API__PORT", "9100")
        assert load_config(str(path)).api.port == 9100

    def test_default_file_picked_up(self, tmp_path):
        (tmp_path / "tobacco-watch.yml").write_text("api:\n  port: 9200\n")
        assert load_config().api.port == 9200

    def test_missing_file_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("/nonexistent/tobacco-watch.yml")

    def test_non_mapping_yaml_raises(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(path))

    def test_invalid_value_wrapped(self, monkeypatch):
        monkeypatch.setenv("TOBACCO_WATCH_BAPPEBTI__RATE_LIMIT", "50")
        with pytest.raises(ConfigError):
            load_config()


class TestEnvHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("False", False), ("42", 42), ("2.5", 2.5), ("abc", "abc")],
    )
    def test_auto_cast(self, raw, expected):
        assert _auto_cast(raw) == expected

    def test_merge_nested(self, monkeypatch):
        monkeypatch.setenv("TOBACCO_WATCH_WEATHER__DEFAULT_REGION", "Malang")
        merged = _merge_env_vars({"weather": {"api_key": "k"}}, "TOBACCO_WATCH_")
        assert merged["weather"] == {"api_key": "k", "default_region": "Malang"}

    def test_merge_leaves_base_untouched(self, monkeypatch):
        monkeypatch.setenv("TOBACCO_WATCH_WEATHER__DEFAULT_REGION", "Malang")
        base = {"weather": {"api_key": "k"}}
        _merge_env_vars(base, "TOBACCO_WATCH_")
        assert base == {"weather": {"api_key": "k"}}

    def test_config_var_skipped(self, monkeypatch):
        monkeypatch.setenv("TOBACCO_WATCH_CONFIG", "somewhere.yml")
        assert "config" not in _merge_env_vars({}, "TOBACCO_WATCH_")
