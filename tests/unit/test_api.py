"""Tests for sfconnect.api module."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from sfconnect.api import Connection


def make_response(status_code=200, json_data=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else {}
    resp.text = text
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return resp


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


class TestConnectionInit:
    def test_sets_bearer_header(self, session):
        conn = Connection("https://x.my.salesforce.com/", "tok", session=session)

        assert conn.server_url == "https://x.my.salesforce.com"
        assert conn.instance_url == conn.server_url
        assert conn.session_id == "tok"
        assert session.headers["Authorization"] == "Bearer tok"
        session.request.assert_not_called()

    @pytest.mark.parametrize("url, token", [("", "tok"), ("https://x", ""), (None, None)])
    def test_requires_url_and_token(self, url, token):
        with pytest.raises(ValueError):
            Connection(url, token)

    def test_repr_hides_token(self, session):
        assert "tok" not in repr(Connection("https://x", "tok", session=session))


class TestConnectionCalls:
    def test_query_uses_pinned_version(self, session):
        session.request.return_value = make_response(json_data={"totalSize": 1, "records": []})
        conn = Connection("https://x", "tok", api_version="v60.0", session=session)

        res = conn.query("SELECT Id FROM Account")

        assert res["totalSize"] == 1
        args, kwargs = session.request.call_args
        assert args == ("GET", "https://x/services/data/v60.0/query")
        assert kwargs["params"] == {"q": "SELECT Id FROM Account"}
        assert kwargs["timeout"] == 30.0

    def test_discovers_latest_version(self, session):
        session.request.side_effect = [
            make_response(
                json_data=[
                    {"version": "59.0", "url": "/services/data/v59.0"},
                    {"version": "61.0", "url": "/services/data/v61.0"},
                    {"version": "60.0", "url": "/services/data/v60.0"},
                ]
            ),
            make_response(json_data={"DailyApiRequests": {"Max": 100, "Remaining": 99}}),
        ]
        conn = Connection("https://x", "tok", session=session)

        limits = conn.limits()

        assert conn.api_version == "v61.0"
        assert limits["DailyApiRequests"]["Remaining"] == 99
        assert session.request.call_args[0][1] == "https://x/services/data/v61.0/limits"

    def test_query_all_iter_follows_next_records_url(self, session):
        session.request.side_effect = [
            make_response(json_data={"records": [{"Id": "1"}], "nextRecordsUrl": "/next/2"}),
            make_response(json_data={"records": [{"Id": "2"}]}),
        ]
        conn = Connection("https://x", "tok", api_version="v60.0", session=session)

        ids = [r["Id"] for r in conn.query_all_iter("SELECT Id FROM Account")]

        assert ids == ["1", "2"]
        assert session.request.call_args[0][1] == "https://x/next/2"

    def test_describe_object(self, session):
        session.request.return_value = make_response(json_data={"name": "Account"})
        conn = Connection("https://x", "tok", api_version="v60.0", session=session)

        assert conn.describe_object("Account")["name"] == "Account"
        assert session.request.call_args[0][1].endswith("/sobjects/Account/describe")

    def test_identity(self, session):
        session.request.return_value = make_response(json_data={"preferred_username": "a@b.c"})
        conn = Connection("https://x", "tok", session=session)

        assert conn.identity()["preferred_username"] == "a@b.c"
        assert session.request.call_args[0][1] == "https://x/services/oauth2/userinfo"

    def test_request_relative_path(self, session):
        session.request.return_value = make_response()
        conn = Connection("https://x", "tok", session=session)

        conn.request("GET", "/services/data/")

        assert session.request.call_args[0][1] == "https://x/services/data/"


class TestRetry:
    @patch("sfconnect.api.time.sleep")
    def test_retries_on_503(self, sleep, session):
        session.request.side_effect = [make_response(503), make_response(json_data={"ok": True})]
        conn = Connection("https://x", "tok", api_version="v60.0", session=session)

        assert conn.query("SELECT Id FROM User") == {"ok": True}
        assert session.request.call_count == 2
        sleep.assert_called_once()

    @patch("sfconnect.api.time.sleep")
    def test_client_error_raises(self, sleep, session):
        session.request.return_value = make_response(401, json_data=[{"errorCode": "INVALID_SESSION_ID"}])
        conn = Connection("https://x", "tok", api_version="v60.0", session=session)

        with pytest.raises(requests.HTTPError):
            conn.query("SELECT Id FROM User")
        sleep.assert_not_called()

    @patch("sfconnect.api.time.sleep")
    def test_network_error_reraised_after_retries(self, sleep, session):
        session.request.side_effect = requests.ConnectionError("down")
        conn = Connection("https://x", "tok", api_version="v60.0", session=session)

        with pytest.raises(requests.ConnectionError):
            conn.query("SELECT Id FROM User")
        assert session.request.call_count == 3
