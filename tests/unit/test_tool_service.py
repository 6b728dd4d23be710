"""Tests for the bulk alt text and metadata runs."""
import requests

from api.repositories.local import LocalRepository
from api.services import tool_service
from mixerai.exceptions import AIServiceError


class FakeAIClient:
    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def complete_json(self, system_prompt, user_content, max_tokens=800):
        self.calls.append((system_prompt, user_content))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeFetcher:
    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.fetched = []

    def fetch_html(self, url):
        self.fetched.append(url)
        if self.error is not None:
            raise self.error
        return self.pages[url]


class TestAltTextLocale:
    """Tests for alt_text_locale."""

    def test_explicit_language_wins(self):
        assert tool_service.alt_text_locale("https://x.fr/a.png", "de") == ("de", "DE")

    def test_url_tld(self):
        assert tool_service.alt_text_locale("https://x.fr/a.png", None) == ("fr", "FR")

    def test_data_url(self):
        assert tool_service.alt_text_locale("data:image/png;base64,AA", None) == ("en", "US")


class TestGenerateAltTexts:
    """Tests for generate_alt_texts."""

    def test_pauses_before_each_call(self):
        client = FakeAIClient([{"altText": "One"}, {"altText": "Two"}])
        sleeps = []

        results, error = tool_service.generate_alt_texts(
            client, ["https://a.com/1.png", "https://a.de/2.png"], None, delay_seconds=5, sleep=sleeps.append
        )

        assert error is None
        assert results == [
            {"imageUrl": "https://a.com/1.png", "altText": "One"},
            {"imageUrl": "https://a.de/2.png", "altText": "Two"},
        ]
        assert sleeps == [5, 5]
        assert "'de'" in client.calls[1][0]

    def test_invalid_url_does_not_call_ai(self):
        client = FakeAIClient([{"altText": "Fine"}])

        results, error = tool_service.generate_alt_texts(
            client, ["not-a-url", 42, "https://a.com/1.png"], None, delay_seconds=0
        )

        assert results[0] == {"imageUrl": "not-a-url", "error": "Invalid image URL format."}
        assert results[1]["error"] == "Invalid image URL format."
        assert results[2]["altText"] == "Fine"
        assert error == "One or more images failed processing."
        assert len(client.calls) == 1

    def test_ai_failure_becomes_item_error(self):
        client = FakeAIClient([AIServiceError("AI down"), {"altText": "Ok"}])

        results, error = tool_service.generate_alt_texts(
            client, ["https://a.com/1.png", "https://a.com/2.png"], "en", delay_seconds=0
        )

        assert results[0] == {"imageUrl": "https://a.com/1.png", "error": "AI down"}
        assert results[1]["altText"] == "Ok"
        assert error == "One or more images failed AI generation."


class TestGenerateMetadataBatch:
    """Tests for generate_metadata_batch."""

    META = {"metaTitle": "Title", "metaDescription": "Description", "keywords": ["a"]}

    def test_page_content_reaches_prompt(self):
        client = FakeAIClient([self.META])
        fetcher = FakeFetcher({"https://acme.com": "<html><body><p>Fizzy cola</p></body></html>"})

        results, error = tool_service.generate_metadata_batch(
            client, fetcher, ["https://acme.com"], None, delay_seconds=0
        )

        assert error is None
        assert results == [{"url": "https://acme.com", **self.META}]
        assert "Fizzy cola" in client.calls[0][1]

    def test_fetch_failure_still_generates(self):
        client = FakeAIClient([self.META])
        fetcher = FakeFetcher(error=requests.ConnectionError("down"))

        results, error = tool_service.generate_metadata_batch(
            client, fetcher, ["https://acme.com"], "fr", delay_seconds=0
        )

        assert error is None
        assert results[0]["metaTitle"] == "Title"
        assert "could not be retrieved" in client.calls[0][1]
        assert "'fr'" in client.calls[0][0]

    def test_invalid_url(self):
        results, error = tool_service.generate_metadata_batch(
            FakeAIClient([]), FakeFetcher(), ["ftp://acme.com"], None, delay_seconds=0
        )

        assert results == [{"url": "ftp://acme.com", "error": "Invalid URL format."}]
        assert error == "One or more URLs failed metadata generation."


class TestRecordToolRun:
    def test_status_follows_error(self):
        repo = LocalRepository()

        tool_service.record_tool_run(repo, "u1", "metadata_generator", {"urls": []}, {"results": []})
        tool_service.record_tool_run(repo, "u1", "metadata_generator", {}, {}, error_message="Boom")

        rows = repo.rows("tool_run_history")
        assert [r["status"] for r in rows] == ["success", "failure"]
        assert rows[1]["error_message"] == "Boom"

    def test_store_failure_is_swallowed(self):
        class BrokenRepo:
            def record_tool_run(self, values):
                raise RuntimeError("db down")

        tool_service.record_tool_run(BrokenRepo(), "u1", "alt_text_generator", {}, {})
