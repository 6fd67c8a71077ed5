import json

import pytest

from report_engine.analysis_client import AnalysisClient
from report_engine.blob_store import BlobStore
from report_engine.file_reader import RawUpload
from report_engine.providers import AnalysisProvider
from report_engine.store import InMemoryKeyValueStore
from report_engine.workspace import Workspace

# Only the signature matters; nothing decodes these payloads
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
PDF_BYTES = b"%PDF-1.4\n%fake\n"


class FakeProvider(AnalysisProvider):
    """Records every call and returns a canned reply (or raises)."""
    name = "fake"

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, parts, instructions, schema):
        self.calls.append({"parts": parts, "instructions": instructions, "schema": schema})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeProviderFactory:
    def __init__(self, provider):
        self.provider = provider
        self.created = []

    def __call__(self, name, api_key, model, max_tokens):
        self.created.append((name, api_key, model, max_tokens))
        return self.provider


@pytest.fixture
def sample_reply():
    return {
        "title": "T",
        "summary": "S",
        "keyInsights": [],
        "recommendations": [],
        "competitorAnalysis": "C",
        "trends": [],
    }


@pytest.fixture
def fake_provider(sample_reply):
    return FakeProvider(reply=json.dumps(sample_reply))


@pytest.fixture
def make_client():
    def _make(provider, api_key="test-key", provider_name="anthropic"):
        factory = FakeProviderFactory(provider)
        client = AnalysisClient(
            provider_name=provider_name,
            api_key_lookup=lambda _name: api_key,
            model="test-model",
            provider_factory=factory,
        )
        return client, factory
    return _make


@pytest.fixture
def blob_store(tmp_path):
    store = BlobStore(str(tmp_path / "blobs"))
    yield store
    store.close()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def workspace(kv_store, blob_store, fake_provider, make_client):
    client, _ = make_client(fake_provider)
    return Workspace(
        store=kv_store,
        analysis_client=client,
        files_key="test_files",
        customers_key="test_customers",
        blob_store=blob_store,
    )


@pytest.fixture
def text_upload():
    return RawUpload("report.txt", "text/plain", "Q3 outlook positive".encode("utf-8"))


@pytest.fixture
def png_upload():
    return RawUpload("chart.png", "image/png", PNG_BYTES)


@pytest.fixture
def pdf_upload():
    return RawUpload("annual.pdf", "application/pdf", PDF_BYTES)
