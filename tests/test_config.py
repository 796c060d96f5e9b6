import textwrap

import pytest

from ghissues.config import DEFAULT_BASE_URL, Settings, load_settings
from ghissues.errors import ConfigError

_ENV_VARS = (
    "GHISSUES_BASE_URL",
    "GHISSUES_USER",
    "GHISSUES_REPO",
    "GHISSUES_TOKEN",
    "GHISSUES_TIMEOUT",
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "SANDBOX_TOKEN",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # delenv before loading also removes anything python-dotenv sets during the test
    for var in _ENV_VARS:
        # setenv first so monkeypatch records the original state and restores it
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_any_configuration():
    settings = load_settings()

    assert settings == Settings()
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout is None
    assert not settings.has_credentials


def test_yaml_file_with_env_references(tmp_path, monkeypatch):
    monkeypatch.setenv("SANDBOX_TOKEN", "ghp_fromenv")
    cfg = tmp_path / "custom.yaml"
    cfg.write_text(
        textwrap.dedent(
            """\
            github:
              base_url: https://ghe.example.com/api/v3
              user: testnakov
              repo: test-nakov-repo
              token: $SANDBOX_TOKEN
            http:
              timeout: 12.5
            logging:
              json_enabled: true
              level: DEBUG
            environment:
              load_dotenv: false
            """
        )
    )

    settings = load_settings(cfg)

    assert settings.base_url == "https://ghe.example.com/api/v3"
    assert (settings.user, settings.repo, settings.token) == (
        "testnakov",
        "test-nakov-repo",
        "ghp_fromenv",
    )
    assert settings.timeout == 12.5
    assert settings.logging_json_enabled is True
    assert settings.logging_level == "DEBUG"
    assert settings.has_credentials
    assert settings.require_target() == ("testnakov", "test-nakov-repo")


def test_default_file_is_picked_up_from_cwd(tmp_path):
    (tmp_path / "ghissues.config.yaml").write_text("github:\n  user: octo\n  repo: sandbox\n")

    settings = load_settings()

    assert (settings.user, settings.repo) == ("octo", "sandbox")


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    (tmp_path / "ghissues.config.yaml").write_text("github:\n  user: octo\n  repo: sandbox\n")
    monkeypatch.setenv("GHISSUES_REPO", "other-repo")
    monkeypatch.setenv("GHISSUES_TIMEOUT", "7")

    settings = load_settings()

    assert settings.user == "octo"
    assert settings.repo == "other-repo"
    assert settings.timeout == 7.0


def test_token_falls_back_to_github_token(monkeypatch):
    monkeypatch.setenv("GH_TOKEN", "from-gh")
    assert load_settings().token == "from-gh"

    monkeypatch.setenv("GITHUB_TOKEN", "from-github")
    assert load_settings().token == "from-github"

    monkeypatch.setenv("GHISSUES_TOKEN", "explicit")
    assert load_settings().token == "explicit"


def test_dotenv_file_is_loaded(tmp_path):
    (tmp_path / ".env").write_text(
        "GHISSUES_USER=dotenv-user\nGHISSUES_REPO=dotenv-repo\nGHISSUES_TOKEN=dotenv-token\n"
    )

    settings = load_settings()

    assert settings.has_credentials
    assert settings.user == "dotenv-user"


def test_dotenv_does_not_override_existing_environment(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("GHISSUES_USER=dotenv-user\n")
    monkeypatch.setenv("GHISSUES_USER", "shell-user")

    assert load_settings().user == "shell-user"


def test_dotenv_can_be_disabled(tmp_path):
    (tmp_path / ".env").write_text("GHISSUES_USER=dotenv-user\n")
    (tmp_path / "ghissues.config.yaml").write_text("environment:\n  load_dotenv: false\n")

    assert load_settings().user is None


def test_missing_explicit_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_settings(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "content, match",
    [
        ("github: [unclosed", "Invalid YAML"),
        ("- just\n- a list\n", "must be a mapping"),
        ("http:\n  timeout: soon\n", "Invalid timeout"),
        ("http:\n  timeout: 0\n", "must be positive"),
    ],
)
def test_invalid_files_raise_config_error(tmp_path, content, match):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text(content)

    with pytest.raises(ConfigError, match=match):
        load_settings(cfg)


def test_require_target_reports_missing_repo():
    with pytest.raises(ConfigError, match="user and repo"):
        Settings(user="octo").require_target()
