"""
Tests for StreamtimeClient.

httpx.request is mocked at the module level; no test talks to Streamtime.
"""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from finder.integrations.streamtime_client import (
    SEARCH_VIEW_JOB_ITEMS,
    SEARCH_VIEW_JOBS,
    StreamtimeClient,
)

REQUEST = "finder.integrations.streamtime_client.httpx.request"


def make_response(status_code=200, payload=None, headers=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.text = text if text is not None else json.dumps(payload)
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return StreamtimeClient(api_key="test-key", base_url="https://st.example/v1/")


class TestStreamtimeClientInit:
    """Test StreamtimeClient initialization."""

    def test_init_with_key(self):
        c = StreamtimeClient(api_key="abc")
        assert c.api_key == "abc"

    def test_init_without_key_raises(self):
        with patch("finder.integrations.streamtime_client.config.STREAMTIME_API_KEY", ""):
            with pytest.raises(ValueError, match="No Streamtime API key"):
                StreamtimeClient()

    def test_init_from_config_key(self):
        with patch("finder.integrations.streamtime_client.config.STREAMTIME_API_KEY", "env-key"):
            c = StreamtimeClient()
        assert c.api_key == "env-key"

    def test_base_url_trailing_slash_stripped(self, client):
        assert client.base_url == "https://st.example/v1"

    def test_from_config_unconfigured(self):
        with patch("finder.integrations.streamtime_client.config.STREAMTIME_API_KEY", ""):
            assert StreamtimeClient.from_config() is None


class TestRequest:
    """Test StreamtimeClient.request()."""

    def test_sends_bearer_token(self, client):
        with patch(REQUEST, return_value=make_response(payload=[])) as mock_request:
            client.request("/users")

        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://st.example/v1/users")
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"

    def test_non_2xx_returns_none(self, client):
        with patch(REQUEST, return_value=make_response(500, text="boom")):
            assert client.request("/users") is None

    def test_transport_error_returns_none(self, client):
        with patch(REQUEST, side_effect=httpx.ConnectTimeout("timed out")):
            assert client.request("/users") is None

    def test_bad_json_returns_none(self, client):
        with patch(REQUEST, return_value=make_response(payload=ValueError("bad json"), text="<html>")):
            assert client.request("/users") is None

    def test_429_retries_once(self, client):
        responses = [
            make_response(429, headers={"Retry-After": "2"}, text=""),
            make_response(payload=[{"id": 1}]),
        ]
        with patch(REQUEST, side_effect=responses) as mock_request, patch(
            "finder.integrations.streamtime_client.time.sleep"
        ) as mock_sleep:
            result = client.request("/users")

        assert result == [{"id": 1}]
        assert mock_request.call_count == 2
        mock_sleep.assert_called_once_with(2)

    def test_429_twice_gives_up(self, client):
        limited = make_response(429, text="")
        with patch(REQUEST, return_value=limited) as mock_request, patch(
            "finder.integrations.streamtime_client.time.sleep"
        ):
            assert client.request("/users") is None
        assert mock_request.call_count == 2


class TestListUsers:
    """Test StreamtimeClient.list_users()."""

    def test_returns_list(self, client):
        with patch(REQUEST, return_value=make_response(payload=[{"id": 1}, {"id": 2}])):
            assert client.list_users() == [{"id": 1}, {"id": 2}]

    def test_non_list_payload_is_none(self, client):
        with patch(REQUEST, return_value=make_response(payload={"error": "nope"})):
            assert client.list_users() is None


class TestSearch:
    """Test StreamtimeClient.search() and search_all()."""

    def test_search_body(self, client):
        with patch(REQUEST, return_value=make_response(payload={"searchResults": []})) as mock_request:
            client.search(SEARCH_VIEW_JOBS, max_results=200, offset=400)

        args, kwargs = mock_request.call_args
        assert args[0] == "POST"
        assert args[1] == "https://st.example/v1/search?search_view=7&include_statistics=false"
        assert kwargs["json"] == {
            "offset": 400,
            "maxResults": 200,
            "filterGroupCollection": {
                "conditionMatchTypeId": 1,
                "filterGroups": [],
                "filterGroupCollections": [],
            },
        }

    def test_search_missing_results_is_none(self, client):
        with patch(REQUEST, return_value=make_response(payload={"total": 0})):
            assert client.search(SEARCH_VIEW_JOBS) is None

    def test_search_all_pages(self, client):
        pages = [
            make_response(payload={"searchResults": [{"id": i} for i in range(200)]}),
            make_response(payload={"searchResults": [{"id": i} for i in range(200, 250)]}),
        ]
        with patch(REQUEST, side_effect=pages) as mock_request:
            results = client.search_all(SEARCH_VIEW_JOB_ITEMS, max_total=5000)

        assert len(results) == 250
        offsets = [c.kwargs["json"]["offset"] for c in mock_request.call_args_list]
        assert offsets == [0, 200]

    def test_search_all_partial_on_failure(self, client):
        pages = [
            make_response(payload={"searchResults": [{"id": i} for i in range(200)]}),
            make_response(503, text="unavailable"),
        ]
        with patch(REQUEST, side_effect=pages):
            results = client.search_all(SEARCH_VIEW_JOBS)

        assert len(results) == 200
