"""Tests for the fetch client and the URL checks around it.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made during ``fetch_page`` / ``fetch_job_description`` tests.
- Redirects are simulated with 302 responses; ``httpx`` follows them through
  the mocked transport, so ``effective_url`` is exercised for real.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from jobdesc.config import settings
from jobdesc.errors import (
    EmptyDescription,
    FetchFailed,
    GenericRedirectDetected,
    ManualInputRequired,
)
from jobdesc.scraper.extractor import fetch_job_description
from jobdesc.scraper.fetcher import check_redirect, ensure_fetchable, fetch_page
from jobdesc.scraper.models import FetchedPage, ParsedUrl


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_JOB_HTML = """\
<!DOCTYPE html>
<html>
<head><title>Backend Engineer</title></head>
<body>
  <nav><a href="/">Home</a> <a href="/jobs">Jobs</a></nav>
  <main>
    <h1>Backend Engineer</h1>
    <p>We build payment infrastructure used by thousands of merchants.</p>
    <ul>
      <li>Design APIs</li>
      <li>Own services in production</li>
      <li>Mentor junior engineers</li>
    </ul>
  </main>
</body>
</html>
"""

_HTML_HEADERS = {"content-type": "text/html; charset=utf-8"}


# ---------------------------------------------------------------------------
# ParsedUrl
# ---------------------------------------------------------------------------

class TestParsedUrl:
    def test_splits_parts(self) -> None:
        parsed = ParsedUrl.from_string("HTTPS://Board.Example/job?id=123")
        assert parsed.scheme == "https"
        assert parsed.host == "board.example"
        assert parsed.path == "/job"
        assert parsed.query == "id=123"

    def test_empty_path_becomes_root(self) -> None:
        assert ParsedUrl.from_string("https://board.example").path == "/"


# ---------------------------------------------------------------------------
# ensure_fetchable
# ---------------------------------------------------------------------------

class TestEnsureFetchable:
    @pytest.mark.parametrize("url", ["http://example.com/job", "https://example.com/job"])
    def test_http_urls_pass(self, url: str) -> None:
        ensure_fetchable(url)

    @pytest.mark.parametrize(
        "url",
        ["ftp://example.com/job.txt", "mailto:jobs@example.com", "example.com/job", ""],
    )
    def test_other_schemes_need_manual_input(self, url: str) -> None:
        with pytest.raises(ManualInputRequired) as exc_info:
            ensure_fetchable(url)
        assert "provided manually" in str(exc_info.value)


# ---------------------------------------------------------------------------
# check_redirect
# ---------------------------------------------------------------------------

class TestCheckRedirect:
    def test_query_stripped_to_generic_page(self) -> None:
        with pytest.raises(GenericRedirectDetected) as exc_info:
            check_redirect("https://board.example/job?id=123", "https://board.example/careers")
        assert "generic careers page" in str(exc_info.value)

    def test_query_stripped_same_path(self) -> None:
        with pytest.raises(GenericRedirectDetected):
            check_redirect("https://board.example/job?id=123", "https://board.example/job")

    def test_query_stripped_trailing_slash_is_same_path(self) -> None:
        with pytest.raises(GenericRedirectDetected):
            check_redirect("https://board.example/job?id=123", "https://board.example/job/")

    def test_query_preserved_is_fine(self) -> None:
        check_redirect("https://board.example/job?id=123", "https://board.example/job?id=123")

    def test_query_changed_is_fine(self) -> None:
        check_redirect("https://board.example/job?id=123", "https://www.board.example/job?id=123&ref=x")

    def test_id_moved_into_path_is_fine(self) -> None:
        check_redirect("https://board.example/jobs?id=123", "https://board.example/jobs/123")

    def test_no_original_query_is_fine(self) -> None:
        check_redirect("https://board.example/job/123", "https://board.example/careers")

    def test_identical_urls_are_fine(self) -> None:
        check_redirect("https://board.example/job/123", "https://board.example/job/123")

    @pytest.mark.parametrize(
        ("original", "effective"),
        [
            ("https://lnkd.in/abc?trk=share", "https://www.linkedin.com/jobs/view/123"),
            ("https://t.co/xyz?amp=1", "https://careers.example/jobs/42"),
            ("https://board.example/job?id=123", "https://jobs.board.example/careers"),
        ],
    )
    def test_query_stripped_to_other_host_is_fine(self, original: str, effective: str) -> None:
        check_redirect(original, effective)

    def test_host_comparison_ignores_case(self) -> None:
        with pytest.raises(GenericRedirectDetected):
            check_redirect("https://Board.Example/job?id=123", "https://board.example/careers")


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------

class TestFetchPage:
    def test_successful_fetch_returns_fetched_page(self) -> None:
        with respx.mock:
            respx.get("https://example.com/job").mock(
                return_value=httpx.Response(200, text=_JOB_HTML, headers=_HTML_HEADERS)
            )
            page = fetch_page("https://example.com/job")

        assert isinstance(page, FetchedPage)
        assert page.url == "https://example.com/job"
        assert page.effective_url == "https://example.com/job"
        assert page.status_code == 200
        assert page.content_type == "text/html; charset=utf-8"
        assert b"Backend Engineer" in page.body

    def test_sends_browser_headers(self) -> None:
        with respx.mock:
            route = respx.get("https://example.com/job").mock(
                return_value=httpx.Response(200, text=_JOB_HTML, headers=_HTML_HEADERS)
            )
            fetch_page("https://example.com/job")

        request = route.calls.last.request
        assert request.headers["user-agent"] == settings.user_agent
        assert "text/html" in request.headers["accept"]

    def test_follows_redirects(self) -> None:
        with respx.mock:
            respx.get("https://example.com/j/42").mock(
                return_value=httpx.Response(301, headers={"location": "https://example.com/jobs/42"})
            )
            respx.get("https://example.com/jobs/42").mock(
                return_value=httpx.Response(200, text=_JOB_HTML, headers=_HTML_HEADERS)
            )
            page = fetch_page("https://example.com/j/42")

        assert page.url == "https://example.com/j/42"
        assert page.effective_url == "https://example.com/jobs/42"

    def test_http_error_raises_fetch_failed(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            with pytest.raises(FetchFailed) as exc_info:
                fetch_page("https://example.com/missing")

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert str(exc_info.value).startswith("Failed to retrieve job description:")

    def test_network_error_raises_fetch_failed(self) -> None:
        with respx.mock:
            respx.get("https://example.com/down").mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(FetchFailed) as exc_info:
                fetch_page("https://example.com/down")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_large_body_is_truncated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "max_body_bytes", 10)
        with respx.mock:
            respx.get("https://example.com/big").mock(
                return_value=httpx.Response(200, content=b"x" * 100)
            )
            page = fetch_page("https://example.com/big")

        assert page.body == b"x" * 10

    def test_streamed_body_stops_at_cap(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "max_body_bytes", 25)
        chunks = [bytes([ord("a") + n]) * 10 for n in range(10)]
        with respx.mock:
            respx.get("https://example.com/huge").mock(
                return_value=httpx.Response(200, content=iter(chunks))
            )
            page = fetch_page("https://example.com/huge")

        assert page.body == b"a" * 10 + b"b" * 10 + b"c" * 5

    def test_body_under_cap_is_untouched(self) -> None:
        with respx.mock:
            respx.get("https://example.com/small").mock(
                return_value=httpx.Response(200, content=b"small body")
            )
            page = fetch_page("https://example.com/small")

        assert page.body == b"small body"


# ---------------------------------------------------------------------------
# fetch_job_description (end to end)
# ---------------------------------------------------------------------------

class TestFetchJobDescription:
    def test_returns_markdown(self) -> None:
        with respx.mock:
            respx.get("https://example.com/job").mock(
                return_value=httpx.Response(200, text=_JOB_HTML, headers=_HTML_HEADERS)
            )
            markdown = fetch_job_description("https://example.com/job")

        assert markdown.startswith("# Backend Engineer")
        assert "- Design APIs\n- Own services in production\n- Mentor junior engineers" in markdown
        assert "Home" not in markdown

    def test_rejects_non_http_before_fetching(self) -> None:
        with respx.mock(assert_all_called=False) as mock:
            with pytest.raises(ManualInputRequired):
                fetch_job_description("file:///etc/passwd")
        assert mock.calls.call_count == 0

    def test_generic_redirect_detected(self) -> None:
        with respx.mock:
            respx.route(host="board.example", path="/job").mock(
                return_value=httpx.Response(302, headers={"location": "https://board.example/careers"})
            )
            respx.route(host="board.example", path="/careers").mock(
                return_value=httpx.Response(200, text=_JOB_HTML, headers=_HTML_HEADERS)
            )
            with pytest.raises(GenericRedirectDetected):
                fetch_job_description("https://board.example/job?id=123")

    def test_shortener_redirect_to_posting_is_followed(self) -> None:
        with respx.mock:
            respx.route(host="lnkd.in", path="/abc").mock(
                return_value=httpx.Response(302, headers={"location": "https://jobs.example/view/123"})
            )
            respx.get("https://jobs.example/view/123").mock(
                return_value=httpx.Response(200, text=_JOB_HTML, headers=_HTML_HEADERS)
            )
            markdown = fetch_job_description("https://lnkd.in/abc?trk=share")

        assert markdown.startswith("# Backend Engineer")

    def test_plain_text_response(self) -> None:
        with respx.mock:
            respx.get("https://example.com/job.txt").mock(
                return_value=httpx.Response(
                    200,
                    text="Data Analyst\n\nWork with SQL and dashboards.",
                    headers={"content-type": "text/plain"},
                )
            )
            markdown = fetch_job_description("https://example.com/job.txt")

        assert markdown == "Data Analyst\n\nWork with SQL and dashboards."

    def test_empty_page_raises_empty_description(self) -> None:
        with respx.mock:
            respx.get("https://example.com/blank").mock(
                return_value=httpx.Response(200, text="<html><body></body></html>", headers=_HTML_HEADERS)
            )
            with pytest.raises(EmptyDescription):
                fetch_job_description("https://example.com/blank")
