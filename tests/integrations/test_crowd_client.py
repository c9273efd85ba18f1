"""Unit tests for CrowdClient and UpstreamSource."""
import pytest
import requests
from unittest.mock import MagicMock, patch

from config.settings import Settings
from locsync.core.errors import FetchError, UpstreamFormatError
from locsync.integrations.crowd import UpstreamSource, get_client
from locsync.integrations.crowd.client import CrowdClient


@pytest.fixture
def client():
    return CrowdClient(base_url="https://translate.example.org/", project="site")


def _response(text, status_error=None):
    response = MagicMock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    else:
        response.raise_for_status.return_value = None
    return response


def test_init_strips_trailing_slash(client):
    assert client.base_url == "https://translate.example.org"
    assert client.timeout == 30


def test_get_client_uses_settings():
    settings = Settings(crowd_base_url="https://crowd.test", crowd_project="docs", crowd_timeout=5)
    c = get_client(settings)
    assert (c.base_url, c.project, c.timeout) == ("https://crowd.test", "docs", 5)


@patch("locsync.integrations.crowd.client.requests.Session.get")
def test_languages_page(mock_get, client):
    mock_get.return_value = _response("<table></table>")

    assert client.languages_page() == "<table></table>"
    mock_get.assert_called_once_with(
        "https://translate.example.org/projects/site/languages",
        timeout=30,
    )


@patch("locsync.integrations.crowd.client.requests.Session.get")
def test_export(mock_get, client):
    mock_get.return_value = _response("de:\n  a: b\n")

    assert client.export("pt-br") == "de:\n  a: b\n"
    mock_get.assert_called_once_with(
        "https://translate.example.org/projects/site/export/pt-br.yml",
        timeout=30,
    )
    assert mock_get.return_value.encoding == "utf-8"


@patch("locsync.integrations.crowd.client.requests.Session.get")
def test_http_error_includes_body(mock_get, client):
    mock_get.return_value = _response("Not Found", requests.HTTPError("404 Client Error"))

    with pytest.raises(FetchError) as excinfo:
        client.export("xx")

    assert "Body: Not Found" in str(excinfo.value)


@patch("locsync.integrations.crowd.client.requests.Session.get")
def test_connection_error(mock_get, client):
    mock_get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(FetchError, match="refused"):
        client.languages_page()


class TestUpstreamSource:
    def test_fetch_tree_parses_yaml(self):
        client = MagicMock()
        client.export.return_value = "de:\n  site:\n    title: Titel\n"
        assert UpstreamSource(client).fetch_tree("de") == {"de": {"site": {"title": "Titel"}}}
        client.export.assert_called_once_with("de")

    def test_fetch_tree_keeps_yes_no_keys(self):
        client = MagicMock()
        client.export.return_value = "de:\n  answer:\n    no: Nein\n    yes: Ja\n"
        assert UpstreamSource(client).fetch_tree("de") == {"de": {"answer": {"no": "Nein", "yes": "Ja"}}}

    def test_fetch_tree_invalid_yaml(self):
        client = MagicMock()
        client.export.return_value = "de: [oops\n"
        with pytest.raises(UpstreamFormatError):
            UpstreamSource(client).fetch_tree("de")

    def test_list_languages(self):
        client = MagicMock()
        client.languages_page.return_value = (
            "<table><tr><td>de</td><td>German</td></tr></table>"
        )
        languages = UpstreamSource(client).list_languages()
        assert [(l.code, l.name) for l in languages] == [("de", "German")]
