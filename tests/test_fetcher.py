import pytest
import requests

from bdrss.exceptions import FetchError
from bdrss.fetchers.flaresolverr import FlareSolverrFetcher
from bdrss.utils import http


class FakeResponse:
    def __init__(self, body=None, status_code=200, invalid_json=False):
        self.body = body
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.body


@pytest.fixture()
def calls(monkeypatch):
    recorded = []

    def install(response=None, error=None):
        def fake_post(url, json=None, headers=None, timeout=None):
            recorded.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            if error is not None:
                raise error
            return response
        monkeypatch.setattr(http.requests, "post", fake_post, raising=True)
        return recorded

    return install


def test_fetch_posts_request_get_command(calls):
    recorded = calls(FakeResponse({"status": "ok", "solution": {"response": "<html>ok</html>"}}))
    fetcher = FlareSolverrFetcher("http://proxy.test:8191/")

    assert fetcher.fetch("https://bdnews24.com/opinion") == "<html>ok</html>"

    [call] = recorded
    assert call["url"] == "http://proxy.test:8191/v1"
    assert call["json"] == {
        "cmd": "request.get",
        "url": "https://bdnews24.com/opinion",
        "maxTimeout": 60000,
    }
    assert call["headers"] == {"Content-Type": "application/json"}
    assert call["timeout"] == 65


def test_missing_solution_is_a_fetch_error(calls):
    calls(FakeResponse({"status": "ok"}))
    with pytest.raises(FetchError, match="no solution"):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")


def test_proxy_error_status_is_reported(calls):
    calls(FakeResponse({"status": "error", "message": "Challenge not solved"}))
    with pytest.raises(FetchError, match="Challenge not solved"):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")


def test_solution_without_body_is_a_fetch_error(calls):
    calls(FakeResponse({"solution": {"status": 200}}))
    with pytest.raises(FetchError):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")


def test_connection_error_is_wrapped(calls):
    calls(error=requests.exceptions.ConnectionError("Connection refused"))
    with pytest.raises(FetchError, match="Connection refused") as excinfo:
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")
    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)


def test_timeout_is_wrapped(calls):
    calls(error=requests.exceptions.Timeout("read timed out"))
    with pytest.raises(FetchError, match="timed out"):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")


def test_http_error_status_is_wrapped(calls):
    calls(FakeResponse({"solution": {"response": "<html/>"}}, status_code=500))
    with pytest.raises(FetchError, match="500"):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")


def test_non_json_body_is_a_fetch_error(calls):
    calls(FakeResponse(invalid_json=True))
    with pytest.raises(FetchError, match="Invalid JSON"):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")


def test_fetch_is_attempted_once(calls):
    recorded = calls(error=requests.exceptions.ConnectionError("down"))
    with pytest.raises(FetchError):
        FlareSolverrFetcher().fetch("https://bdnews24.com/opinion")
    assert len(recorded) == 1
