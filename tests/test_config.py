import pytest

from config import DEFAULT_ADMIN_LOCATION_PATTERNS, DEFAULT_API_URL, load_settings

ENV_VARS = (
    "INVENTORY_API_URL",
    "INVENTORY_API_TIMEOUT",
    "INVENTORY_API_TOKEN",
    "STATS_REFRESH_SECONDS",
    "SEARCH_DEBOUNCE_MS",
    "ADMIN_LOCATION_PATTERNS",
    "LOG_LEVEL",
)



def _clear_env(monkeypatch):
    # setenv first so values load_dotenv writes are undone after the test
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / ".env"
    path.write_text("")
    return str(path)


def test_defaults(env_file):
    settings = load_settings(env_file)

    assert settings.api_url == DEFAULT_API_URL
    assert settings.api_timeout == 10.0
    assert settings.api_token == ""
    assert settings.stats_refresh_seconds == 5.0
    assert settings.search_debounce_seconds == 0.5
    assert settings.admin_location_patterns == DEFAULT_ADMIN_LOCATION_PATTERNS
    assert settings.log_level == "INFO"


def test_environment_overrides(env_file, monkeypatch):
    monkeypatch.setenv("INVENTORY_API_URL", "https://stock.example/api/")
    monkeypatch.setenv("SEARCH_DEBOUNCE_MS", "250")
    monkeypatch.setenv("ADMIN_LOCATION_PATTERNS", "走道.*; ;X[0-9]")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings(env_file)

    assert settings.api_url == "https://stock.example/api"
    assert settings.search_debounce_ms == 250
    assert settings.admin_location_patterns == ("走道.*", "X[0-9]")
    assert settings.log_level == "DEBUG"


def test_values_from_env_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    path = tmp_path / ".env"
    path.write_text("INVENTORY_API_TOKEN=abc123\nSTATS_REFRESH_SECONDS=2.5\n")

    settings = load_settings(str(path))

    assert settings.api_token == "abc123"
    assert settings.stats_refresh_seconds == 2.5


def test_invalid_number(env_file, monkeypatch):
    monkeypatch.setenv("INVENTORY_API_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="INVENTORY_API_TIMEOUT"):
        load_settings(env_file)
