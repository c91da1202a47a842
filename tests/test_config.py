"""Tests for configuration loading."""

import textwrap
from pathlib import Path

import pytest

from job_portal.config import PortalConfig, load_config
from job_portal.errors import ConfigError
from job_portal.listview.paginator import PaginationMode

CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment overrides out of the tests."""
    for name in ("JOB_PORTAL_API_URL", "JOB_PORTAL_TOKEN", "JOB_PORTAL_CONFIG"):
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(text))
    return path


def test_shipped_config_loads():
    """Test the repository config validates."""
    config = load_config(str(CONFIG_PATH))

    assert config.api.base_url == "http://localhost:5000"
    assert config.view("saved_jobs").pagination == PaginationMode.CLIENT
    assert config.view("jobs").default_sort == "relevance"
    assert config.transition_table("admin").canonical("shortlisted") == "accepted"


def test_minimal_config(tmp_path):
    path = write_config(
        tmp_path,
        """
        views:
          jobs:
            resource: jobs
        """,
    )

    config = load_config(str(path))

    view = config.view("jobs")
    assert view.page_size == 10
    assert view.debounce_seconds == 0.3
    assert view.search_fields == ["title"]


def test_environment_overrides(tmp_path, monkeypatch):
    path = write_config(tmp_path, "api:\n  base_url: http://localhost:5000\n")
    monkeypatch.setenv("JOB_PORTAL_API_URL", "https://portal.example.com")
    monkeypatch.setenv("JOB_PORTAL_TOKEN", "abc123")

    config = load_config(str(path))

    assert config.api.base_url == "https://portal.example.com"
    assert config.api.token == "abc123"


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = write_config(tmp_path, "views: {}\n")
    monkeypatch.setenv("JOB_PORTAL_CONFIG", str(path))

    assert load_config().views == {}


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize(
    "text",
    [
        "views: [unclosed\n",
        "- just\n- a list\n",
        "views:\n  jobs:\n    resource: jobs\n    page_size: 0\n",
        "views:\n  jobs:\n    resource: jobs\n    workflow: missing\n",
    ],
)
def test_invalid_config(tmp_path, text):
    """Test broken files raise ConfigError at load time."""
    with pytest.raises(ConfigError):
        load_config(str(write_config(tmp_path, text)))


def test_unknown_view():
    with pytest.raises(ConfigError, match="Unknown view"):
        PortalConfig().view("archived")


def test_transition_tables():
    config = PortalConfig(
        workflows={
            "strict": {"mode": "strict"},
            "broken": {"mode": "strict", "statuses": ["pending", "done"]},
        }
    )

    assert config.transition_table(None) is None
    assert config.transition_table("strict").targets("pending") == ["reviewed"]
    with pytest.raises(ConfigError):
        config.transition_table("broken")
    with pytest.raises(ConfigError):
        config.transition_table("unknown")
