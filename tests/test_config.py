"""Tests for configuration adapters."""

import json
from pathlib import Path

import pytest

from wayline.adapters.config import AppConfig, ProviderRegistryLoader


def test_config_loads_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    monkeypatch.delenv("TIMEZONE", raising=False)
    config = AppConfig(_env_file=None)

    assert config.host == "0.0.0.0"
    assert config.port == 8000
    assert config.timezone == "Europe/Madrid"
    assert config.departure_window_limit == 30
    assert config.departure_broadened_window_limit == 60
    assert config.departure_bucket_size == 5
    assert config.departure_cache_ttl_seconds == 7200
    assert config.cache_sweep_interval_seconds == 600
    assert config.places_page_size == 30


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given environment variables, when loading config, then they are used."""
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
    monkeypatch.setenv("TRANSITLAND_API_KEY", "secret")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = AppConfig(_env_file=None)

    assert config.port == 9000
    assert config.mongodb_uri == "mongodb://db:27017"
    assert config.transitland_api_key == "secret"
    assert config.log_level == "DEBUG"


def test_config_validates_timezone() -> None:
    """Given an unknown timezone, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="valid IANA timezone"):
        AppConfig(_env_file=None, timezone="Mars/Olympus_Mons")


def test_config_validates_log_level() -> None:
    """Given an unknown log level, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="log_level must be one of"):
        AppConfig(_env_file=None, log_level="chatty")


def test_config_rejects_non_positive_limits() -> None:
    """Given a zero bucket size, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="must be positive"):
        AppConfig(_env_file=None, departure_bucket_size=0)


@pytest.mark.parametrize("timeout", [0, -1.5])
def test_config_rejects_non_positive_upstream_timeout(timeout: float) -> None:
    """Given a zero or negative upstream timeout, when loading config, then validation fails."""
    with pytest.raises(ValueError, match="must be positive"):
        AppConfig(_env_file=None, upstream_timeout_seconds=timeout)


def test_config_requires_broadened_window_to_be_larger() -> None:
    """Given a broadened window not above the first, when loading, then validation fails."""
    with pytest.raises(ValueError, match="must be larger"):
        AppConfig(_env_file=None, departure_window_limit=60, departure_broadened_window_limit=60)


def test_config_requires_default_radius_within_max() -> None:
    """Given a default radius above the maximum, when loading, then validation fails."""
    with pytest.raises(ValueError, match="must not exceed"):
        AppConfig(_env_file=None, default_radius_meters=6000, max_radius_meters=5000)


class TestProviderRegistryLoader:
    """Tests for loading the provider registry."""

    def test_when_json_file_loaded_then_providers_available(self, tmp_path: Path) -> None:
        """Given a JSON registry, when loading, then providers are looked up by id."""
        path = tmp_path / "available_providers.json"
        path.write_text(
            json.dumps(
                {
                    "providers": [
                        {
                            "onestop_id": "f-metro",
                            "name": "Metrovalencia",
                            "mergeable": {"f-tram": True},
                            "showlines": True,
                            "color": "#e30613",
                        },
                        {"onestop_id": "f-tram", "name": "Tram", "mergeable": {"f-metro": True}},
                    ]
                }
            ),
            encoding="utf-8",
        )

        registry = ProviderRegistryLoader.load(str(path))

        assert [p.onestop_id for p in registry.get_providers()] == ["f-metro", "f-tram"]
        metro = registry.get_provider("f-metro")
        assert metro is not None
        assert metro.mergeable_partners() == ["f-tram"]
        assert metro.show_lines is True
        assert registry.get_provider("f-unknown") is None

    def test_when_toml_file_loaded_then_providers_available(self, tmp_path: Path) -> None:
        """Given a TOML registry, when loading, then providers are parsed."""
        path = tmp_path / "providers.toml"
        path.write_text(
            """
[[providers]]
onestop_id = "f-metro"
name = "Metrovalencia"

[providers.mergeable]
"f-tram" = true
""",
            encoding="utf-8",
        )

        registry = ProviderRegistryLoader.load(str(path))

        assert registry.get_provider("f-metro").mergeable == {"f-tram": True}

    def test_when_file_missing_then_file_not_found(self, tmp_path: Path) -> None:
        """Given a missing file, when loading, then FileNotFoundError is raised."""
        with pytest.raises(FileNotFoundError, match="Provider registry not found"):
            ProviderRegistryLoader.load(str(tmp_path / "missing.json"))

    def test_when_providers_is_not_a_list_then_value_error(self) -> None:
        """Given a malformed registry, when parsing, then ValueError is raised."""
        with pytest.raises(ValueError, match="must be a list"):
            ProviderRegistryLoader.parse({"providers": {"onestop_id": "f-metro"}})

    def test_when_entry_invalid_then_skipped(self) -> None:
        """Given entries without onestop id or not tables, when parsing, then they are skipped."""
        providers = ProviderRegistryLoader.parse(
            {"providers": [{"name": "No id"}, "f-metro", {"onestop_id": "f-tram"}]}
        )

        assert [p.onestop_id for p in providers] == ["f-tram"]

    def test_when_mergeable_is_not_a_table_then_treated_as_absent(self) -> None:
        """Given mergeable set to a string, when parsing, then provider declares nothing."""
        providers = ProviderRegistryLoader.parse(
            {"providers": [{"onestop_id": "f-metro", "mergeable": "yes"}]}
        )

        assert providers[0].mergeable is None
        assert providers[0].declares_mergeability() is False

    def test_when_display_metadata_requested_then_mergeable_hidden(self) -> None:
        """Given a provider, when building display metadata, then aliases are used."""
        providers = ProviderRegistryLoader.parse(
            {
                "providers": [
                    {
                        "onestop_id": "f-bikes",
                        "name": "Valenbisi",
                        "type": "bike",
                        "mergeable": {},
                        "logo": "valenbisi.png",
                    }
                ]
            }
        )

        metadata = providers[0].display_metadata()

        assert metadata == {
            "onestop_id": "f-bikes",
            "name": "Valenbisi",
            "showlines": False,
            "logo": "valenbisi.png",
            "type": "bike",
        }
