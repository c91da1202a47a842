"""Tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from job_portal.filters.facets import FacetDefinition
from job_portal.main import main, parse_facets

CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


@pytest.fixture
def controller():
    controller = MagicMock()
    controller.facet_definitions = {
        "status": FacetDefinition(key="status", kind="enum", field="status"),
        "salary": FacetDefinition(key="salary", kind="numeric_range", field="salary"),
    }
    return controller


def test_parse_facets(controller):
    values = parse_facets(["status=pending", "salary=10,", "salary=,50"], controller)

    assert values == {"status": "pending", "salary": [None, 50.0]}


@pytest.mark.parametrize("pair", ["status", "color=red"])
def test_parse_facets_rejects_bad_input(controller, pair):
    with pytest.raises(ValueError):
        parse_facets([pair], controller)


def test_main_prints_page(capsys, monkeypatch):
    """Test a full run against a mocked API."""
    monkeypatch.delenv("JOB_PORTAL_API_URL", raising=False)
    client = MagicMock()
    client.get.return_value = {
        "data": [
            {"id": 1, "name": "Acme", "industry": "Software"},
            {"id": 2, "name": "Globex", "industry": "Logistics"},
        ]
    }

    with patch("job_portal.main.setup_logging"), patch(
        "job_portal.views.build_client", return_value=client
    ):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(CONFIG_PATH), "--view", "followed_companies", "--query", "acme"])

    assert exc_info.value.code == 0
    output = capsys.readouterr().out
    assert "followed_companies: page 1/1 - 1 matching" in output
    assert "1. Acme" in output
    assert "Globex" not in output


def test_main_unknown_view(capsys):
    with patch("job_portal.main.setup_logging"):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(CONFIG_PATH), "--view", "archived"])

    assert exc_info.value.code == 2
    assert "Unknown view" in capsys.readouterr().err
