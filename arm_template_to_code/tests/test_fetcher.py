import httpx
import pytest

from arm_template_to_code.pipeline.errors import RetrievalError
from arm_template_to_code.pipeline.fetcher import SchemaFetcher, is_url

SCHEMA_URL = "https://schema.example.com/schemas/2019-04-01/deploymentTemplate.json"


def make_fetcher(handler):
    return SchemaFetcher(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestSchemaFetcher:
    def test_fetch_json_over_http(self):
        def handler(request):
            assert str(request.url) == SCHEMA_URL
            return httpx.Response(200, json={"title": "Template"})

        with make_fetcher(handler) as fetcher:
            assert fetcher.fetch_json(SCHEMA_URL) == {"title": "Template"}

    def test_fetch_returns_bytes(self):
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b"{}"))
        assert fetcher.fetch(SCHEMA_URL) == b"{}"

    def test_utf8_bom_is_accepted(self):
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b'\xef\xbb\xbf{"a": 1}'))
        assert fetcher.fetch_json(SCHEMA_URL) == {"a": 1}

    def test_non_success_status(self):
        fetcher = make_fetcher(lambda request: httpx.Response(404))
        with pytest.raises(RetrievalError, match="404"):
            fetcher.fetch(SCHEMA_URL)

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RetrievalError):
            make_fetcher(handler).fetch(SCHEMA_URL)

    def test_invalid_json(self):
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(RetrievalError, match="not valid JSON"):
            fetcher.fetch_json(SCHEMA_URL)

    def test_local_file(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text('{"title": "Local"}')
        assert SchemaFetcher().fetch_json(str(path)) == {"title": "Local"}

    def test_missing_local_file(self, tmp_path):
        with pytest.raises(RetrievalError):
            SchemaFetcher().fetch(str(tmp_path / "missing.json"))


def test_is_url():
    assert is_url("https://example.com/a.json")
    assert is_url("http://example.com/a.json")
    assert not is_url("/tmp/a.json")
    assert not is_url("schemas/a.json")
