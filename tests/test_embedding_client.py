"""
Tests for the HTTP EmbeddingClient, with requests.post patched out.
"""

import numpy as np
import pytest
import requests

from rag_core import EmbeddingFailure, RAGConfig, RAGEngine
from rag_core.embedding import Embedder, EmbeddingClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON object could be decoded")
        return self.payload


def _ok(vectors, reverse=False):
    items = [{"index": i, "embedding": v} for i, v in enumerate(vectors)]
    if reverse:
        items = list(reversed(items))
    return FakeResponse({"data": items})


class FakePost:
    """Replays queued responses/exceptions and records each request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(json)
        return item


@pytest.fixture
def client():
    return EmbeddingClient(
        api_url="http://embeddings.local/v1/embeddings",
        model_name="test-model",
        max_retries=3,
        retry_delay=0,
    )


def _patch(monkeypatch, fake):
    monkeypatch.setattr("rag_core.embedding.client.requests.post", fake)
    return fake


class TestEmbed:
    """Tests for embed()."""

    def test_embed_single_text(self, monkeypatch, client):
        fake = _patch(monkeypatch, FakePost(_ok([[0.1, 0.2, 0.3]])))

        vector = client.embed("hello")

        assert vector == [0.1, 0.2, 0.3]
        assert client.embedding_dim == 3
        assert fake.calls[0]["url"] == "http://embeddings.local/v1/embeddings"
        assert fake.calls[0]["json"] == {"input": ["hello"], "model": "test-model"}
        assert fake.calls[0]["timeout"] == 60

    def test_no_auth_header_without_key(self, monkeypatch, client):
        fake = _patch(monkeypatch, FakePost(_ok([[1.0]])))
        client.embed("x")
        assert "Authorization" not in fake.calls[0]["headers"]

    def test_bearer_header_with_key(self, monkeypatch):
        fake = _patch(monkeypatch, FakePost(_ok([[1.0]])))
        EmbeddingClient("http://e", api_key="sk-test", retry_delay=0).embed("x")
        assert fake.calls[0]["headers"]["Authorization"] == "Bearer sk-test"

    def test_retries_then_succeeds(self, monkeypatch, client):
        fake = _patch(monkeypatch, FakePost(
            requests.ConnectionError("connection refused"),
            FakeResponse(status_code=503),
            _ok([[1.0, 0.0]]),
        ))

        assert client.embed("x") == [1.0, 0.0]
        assert len(fake.calls) == 3

    def test_gives_up_after_max_retries(self, monkeypatch, client):
        fake = _patch(monkeypatch, FakePost(requests.Timeout("timed out")))

        with pytest.raises(EmbeddingFailure) as exc_info:
            client.embed("x")

        assert len(fake.calls) == 3
        assert isinstance(exc_info.value.__cause__, requests.Timeout)

    @pytest.mark.parametrize("response", [
        FakeResponse(payload=None),
        FakeResponse(payload={"error": "bad model"}),
        FakeResponse(payload={"data": [{"index": 0}]}),
    ])
    def test_malformed_responses_fail(self, monkeypatch, client, response):
        _patch(monkeypatch, FakePost(response))
        with pytest.raises(EmbeddingFailure):
            client.embed("x")

    def test_empty_data_fails(self, monkeypatch, client):
        _patch(monkeypatch, FakePost(FakeResponse({"data": []})))
        with pytest.raises(EmbeddingFailure):
            client.embed("x")

    def test_is_an_embedder(self, client):
        assert isinstance(client, Embedder)


class TestEmbedTexts:
    """Tests for batched embed_texts()."""

    def test_batches_and_reorders(self, monkeypatch):
        def respond(payload):
            vectors = [[float(len(t)), 1.0] for t in payload["input"]]
            return _ok(vectors, reverse=True)

        fake = _patch(monkeypatch, FakePost(respond))
        client = EmbeddingClient("http://e", batch_size=2, retry_delay=0)

        result = client.embed_texts(["a", "bb", "ccc", "dddd", "eeeee"], show_progress=False)

        assert len(fake.calls) == 3
        assert [c["json"]["input"] for c in fake.calls] == [["a", "bb"], ["ccc", "dddd"], ["eeeee"]]
        assert result.dtype == np.float32
        assert result.shape == (5, 2)
        assert result[:, 0].tolist() == [1.0, 2.0, 3.0, 4.0, 5.0]
        assert client.embedding_dim == 2

    def test_count_mismatch_fails(self, monkeypatch):
        _patch(monkeypatch, FakePost(_ok([[1.0]])))
        client = EmbeddingClient("http://e", batch_size=4, retry_delay=0)
        with pytest.raises(EmbeddingFailure):
            client.embed_texts(["a", "b"], show_progress=False)


class TestClientWithEngine:
    """EmbeddingClient plugged into RAGEngine."""

    def test_from_config(self):
        cfg = RAGConfig(
            embedding_api_url="http://e/v1/embeddings",
            embedding_model="m",
            embedding_api_key="k",
            embedding_batch_size=8,
            embedding_max_retries=5,
            embedding_timeout=10,
        )
        client = EmbeddingClient.from_config(cfg)

        assert client.api_url == "http://e/v1/embeddings"
        assert client.model_name == "m"
        assert client.batch_size == 8
        assert client.max_retries == 5
        assert client.timeout == 10
        assert client.get_info()["has_api_key"] is True

    def test_engine_reports_embedding_info(self, monkeypatch, client):
        _patch(monkeypatch, FakePost(_ok([[1.0, 0.0]])))
        engine = RAGEngine(embedder=client)

        engine.ingest("hello world.", "doc")
        stats = engine.get_stats()

        assert stats["embedding_info"]["model_name"] == "test-model"
        assert stats["embedding_info"]["embedding_dim"] == 2

    def test_failing_client_is_skipped_during_ingest(self, monkeypatch, client):
        _patch(monkeypatch, FakePost(requests.ConnectionError("down")))
        engine = RAGEngine(embedder=client)

        report = engine.ingest_with_report("hello world.", "doc")

        assert report.stored == 0
        assert report.failed == 1
        assert engine.status().count == 0
