"""
FigmaAPIClient mock 測試：不需要真實 Figma Token，session.get 以 MagicMock 取代。
"""
from unittest.mock import MagicMock

import pytest
import requests

from figma_tokens.errors import ConfigurationError, FetchError
from figma_tokens.figma_reader import FigmaAPIClient
from tests.helpers import make_file_payload


def make_response(payload=None, status=200, json_error=None):
    resp = MagicMock()
    resp.status_code = status
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status} Client Error", response=MagicMock(status_code=status)
        )
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


def make_client(response=None, side_effect=None):
    client = FigmaAPIClient("test_token")
    client.session.get = MagicMock(return_value=response, side_effect=side_effect)
    return client


# ─── 建構與 header ───────────────────────────────────────────────────────────

def test_token_header_attached():
    client = FigmaAPIClient("secret")
    assert client.session.headers["X-Figma-Token"] == "secret"


def test_empty_token_rejected():
    with pytest.raises(ConfigurationError):
        FigmaAPIClient("")


# ─── get_file ────────────────────────────────────────────────────────────────

class TestGetFile:
    def test_success(self):
        client = make_client(make_response(make_file_payload()))
        f = client.get_file("ABC")
        assert f.name == "Design System"
        client.session.get.assert_called_once()
        url = client.session.get.call_args[0][0]
        assert url == "https://api.figma.com/v1/files/ABC"

    def test_http_error_carries_status(self):
        client = make_client(make_response(status=404))
        with pytest.raises(FetchError) as exc:
            client.get_file("missing")
        assert exc.value.status_code == 404
        assert "Failed to fetch Figma file" in str(exc.value)
        assert client.session.get.call_count == 1

    def test_network_error(self):
        client = make_client(side_effect=requests.ConnectionError("connection refused"))
        with pytest.raises(FetchError) as exc:
            client.get_file("ABC")
        assert "connection refused" in str(exc.value)
        assert exc.value.status_code is None

    def test_invalid_json(self):
        client = make_client(make_response(json_error=ValueError("Expecting value")))
        with pytest.raises(FetchError):
            client.get_file("ABC")

    def test_schema_mismatch_becomes_fetch_error(self):
        payload = make_file_payload()
        del payload["document"]
        client = make_client(make_response(payload))
        with pytest.raises(FetchError) as exc:
            client.get_file("ABC")
        assert "document" in str(exc.value)

    def test_empty_key_rejected_without_request(self):
        client = make_client(make_response(make_file_payload()))
        with pytest.raises(ValueError):
            client.get_file("")
        client.session.get.assert_not_called()


# ─── projects ────────────────────────────────────────────────────────────────

def test_get_project():
    client = make_client(make_response({"id": "P1", "name": "Brand", "files": []}))
    project = client.get_project("P1")
    assert project.name == "Brand"
    assert client.session.get.call_args[0][0].endswith("/projects/P1")


def test_get_team_projects():
    client = make_client(make_response({"name": "Team", "projects": [
        {"id": "1", "name": "A"}, {"id": "2", "name": "B"},
    ]}))
    projects = client.get_team_projects("T1")
    assert [p.name for p in projects] == ["A", "B"]
    assert client.session.get.call_args[0][0].endswith("/teams/T1/projects")


def test_get_team_projects_empty_is_not_error():
    client = make_client(make_response({"name": "Team", "projects": []}))
    assert client.get_team_projects("T1") == []


# ─── images / comments ───────────────────────────────────────────────────────

class TestImages:
    def test_params(self):
        client = make_client(make_response({"err": None, "images": {"1:2": "https://img/1"}}))
        images = client.get_images("ABC", ["1:2", "1:3"], format="svg", scale=2)
        assert images == {"1:2": "https://img/1"}
        kwargs = client.session.get.call_args[1]
        assert kwargs["params"] == {"ids": "1:2,1:3", "format": "svg", "scale": 2}

    def test_defaults(self):
        client = make_client(make_response({"images": {}}))
        client.get_images("ABC", ["1:2"])
        params = client.session.get.call_args[1]["params"]
        assert params["format"] == "png"
        assert params["scale"] == 1

    def test_bad_format_rejected(self):
        client = make_client(make_response({"images": {}}))
        with pytest.raises(ValueError):
            client.get_images("ABC", ["1:2"], format="gif")
        client.session.get.assert_not_called()

    def test_bad_scale_rejected(self):
        client = make_client(make_response({"images": {}}))
        with pytest.raises(ValueError):
            client.get_images("ABC", ["1:2"], scale=0)

    def test_request_failure(self):
        client = make_client(make_response(status=500))
        with pytest.raises(FetchError) as exc:
            client.get_images("ABC", ["1:2"])
        assert exc.value.status_code == 500
        assert client.session.get.call_count == 1


def test_get_comments_passthrough():
    comments = [{"id": "c1", "message": "hi", "user": {"handle": "amy"}}]
    client = make_client(make_response({"comments": comments}))
    assert client.get_comments("ABC") == comments
    assert client.session.get.call_args[0][0].endswith("/files/ABC/comments")


def test_get_comments_missing_key():
    client = make_client(make_response({}))
    assert client.get_comments("ABC") == []
