import pytest

from taskpaper.config import DEFAULT_HOST, DEFAULT_PORT, ConfigError, load_config

CONFIG_KEYS = [
    "TASKPAPER_LIBRARY_PATH",
    "TASKPAPER_SERVICE_TOKEN",
    "TASKPAPER_COMMIT_EDITS",
    "TASKPAPER_LOG_LEVEL",
    "TASKPAPER_HOST",
    "TASKPAPER_PORT",
]


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch, tmp_path):
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_load_config_requires_library_path():
    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert "TASKPAPER_LIBRARY_PATH" in str(excinfo.value)


def test_load_config_reads_env_with_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKPAPER_LIBRARY_PATH", str(tmp_path))

    config = load_config()

    assert config.library_path == tmp_path.resolve()
    assert config.service_token is None
    assert config.commit_edits is True
    assert config.log_level == "INFO"
    assert config.host == DEFAULT_HOST
    assert config.port == DEFAULT_PORT


def test_load_config_reads_dotenv_relative_path(tmp_path):
    (tmp_path / ".env").write_text(
        'export TASKPAPER_LIBRARY_PATH="./library"\n'
        "# comment\n"
        "TASKPAPER_COMMIT_EDITS=off\n",
        encoding="utf-8",
    )

    config = load_config()

    assert config.library_path == (tmp_path / "library").resolve()
    assert config.commit_edits is False


def test_load_config_prefers_env_over_dotenv(monkeypatch, tmp_path):
    env_root = tmp_path / "env"
    (tmp_path / ".env").write_text(
        f"TASKPAPER_LIBRARY_PATH={tmp_path / 'dotenv'}\n", encoding="utf-8"
    )
    monkeypatch.setenv("TASKPAPER_LIBRARY_PATH", str(env_root))

    config = load_config()

    assert config.library_path == env_root.resolve()


def test_load_config_reads_service_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKPAPER_LIBRARY_PATH", str(tmp_path))
    monkeypatch.setenv("TASKPAPER_SERVICE_TOKEN", " secret ")
    monkeypatch.setenv("TASKPAPER_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKPAPER_HOST", "0.0.0.0")
    monkeypatch.setenv("TASKPAPER_PORT", "9000")

    config = load_config()

    assert config.service_token == "secret"
    assert config.log_level == "DEBUG"
    assert config.host == "0.0.0.0"
    assert config.port == 9000


@pytest.mark.parametrize(
    "key, value",
    [
        ("TASKPAPER_COMMIT_EDITS", "maybe"),
        ("TASKPAPER_PORT", "http"),
        ("TASKPAPER_PORT", "70000"),
        ("TASKPAPER_LOG_LEVEL", "chatty"),
    ],
)
def test_load_config_rejects_invalid_values(monkeypatch, tmp_path, key, value):
    monkeypatch.setenv("TASKPAPER_LIBRARY_PATH", str(tmp_path))
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert key in str(excinfo.value)
