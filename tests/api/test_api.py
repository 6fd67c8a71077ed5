import json

import pytest
from fastapi.testclient import TestClient

from backend.main import app
from backend.state import get_workspace
from report_engine.workspace import Workspace
from conftest import FakeProvider, PDF_BYTES, PNG_BYTES


@pytest.fixture
def client(workspace):
    # No context manager: the lifespan (real database) never runs
    app.dependency_overrides[get_workspace] = lambda: workspace
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload(client, *files):
    response = client.post("/api/files/", files=[("files", f) for f in files])
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "service": "market-report-studio"}


def test_upload_list_and_stats(client):
    body = upload(client, ("report.txt", b"Q3 outlook positive", "text/plain"), ("chart.png", PNG_BYTES, "image/png"))
    assert body["failures"] == []
    names = [f["name"] for f in body["files"]]
    assert names == ["report.txt", "chart.png"]
    assert "content" not in body["files"][0]
    assert body["files"][0]["previewType"] == "text"
    assert body["files"][0]["selected"] is False

    listing = client.get("/api/files/", params={"sort": "name", "order": "asc"}).json()
    assert [f["name"] for f in listing] == ["chart.png", "report.txt"]
    assert client.get("/api/files/", params={"q": "REPORT"}).json()[0]["name"] == "report.txt"

    stats = client.get("/api/files/stats").json()
    assert stats == {"totalFiles": 2, "selectedFiles": 0, "totalSize": 19 + len(PNG_BYTES)}


def test_bad_utf8_is_reported_per_file(client):
    body = upload(client, ("bad.txt", b"\xff\xfe\xfa", "text/plain"), ("ok.txt", b"fine", "text/plain"))
    assert [f["name"] for f in body["files"]] == ["ok.txt"]
    assert body["failures"][0]["name"] == "bad.txt"


def test_preview_by_category(client):
    body = upload(
        client,
        ("report.txt", b"hello", "text/plain"),
        ("annual.pdf", PDF_BYTES, "application/pdf"),
        ("deck.pptx", b"PK", "application/vnd.openxmlformats-officedocument.presentationml.presentation"),
    )
    text_id, pdf_id, pptx_id = [f["id"] for f in body["files"]]

    assert client.get(f"/api/files/{text_id}/preview").json()["content"] == "hello"

    pdf_preview = client.get(f"/api/files/{pdf_id}/preview").json()
    assert pdf_preview["blobUrl"].startswith("blob:")
    blob = client.get(f"/api/files/{pdf_id}/blob")
    assert blob.status_code == 200
    assert blob.content == PDF_BYTES

    message = client.get(f"/api/files/{pptx_id}/preview").json()["message"]
    assert "cannot be displayed directly" in message


def test_download_returns_original_bytes(client):
    body = upload(client, ("chart.png", PNG_BYTES, "image/png"))
    response = client.get(f"/api/files/{body['files'][0]['id']}/download")
    assert response.content == PNG_BYTES
    assert "chart.png" in response.headers["content-disposition"]


def test_delete_prunes_selection(client):
    body = upload(client, ("a.txt", b"a", "text/plain"), ("b.txt", b"b", "text/plain"))
    a_id, b_id = [f["id"] for f in body["files"]]
    client.post("/api/selection/toggle-all")
    assert sorted(client.get("/api/selection/").json()["ids"]) == sorted([a_id, b_id])

    assert client.post("/api/files/delete", json={"ids": [a_id]}).json() == {"status": "deleted", "ids": [a_id]}
    assert client.get("/api/selection/").json()["ids"] == [b_id]
    assert client.get(f"/api/files/{a_id}").status_code == 404
    assert client.delete(f"/api/files/{a_id}").status_code == 404


def test_toggle_selection(client):
    file_id = upload(client, ("a.txt", b"a", "text/plain"))["files"][0]["id"]
    assert client.post(f"/api/selection/{file_id}/toggle").json()["selected"] is True
    assert client.post(f"/api/selection/{file_id}/toggle").json()["selected"] is False
    assert client.post("/api/selection/missing/toggle").status_code == 404


def test_customers_crud(client):
    created = client.post("/api/customers/", json={"name": "Acme", "grossMargin": 18.5}).json()
    assert created["grossMargin"] == 18.5
    assert created["selected"] is False

    updated = client.put(f"/api/customers/{created['id']}", json={"name": "Acme Corp"}).json()
    assert updated["name"] == "Acme Corp"
    assert client.post(f"/api/customers/{created['id']}/toggle").json()["selected"] is True
    assert client.post("/api/customers/", json={"name": ""}).status_code == 422

    assert client.delete(f"/api/customers/{created['id']}").status_code == 200
    assert client.get("/api/customers/").json() == []


def test_analysis_requires_selection(client):
    response = client.post("/api/analysis/run", json={"variant": "general"})
    assert response.status_code == 400


def test_analysis_run_and_exports(client):
    assert client.get("/api/analysis/latest").status_code == 404
    file_id = upload(client, ("report.txt", b"Q3 outlook positive", "text/plain"))["files"][0]["id"]
    client.post(f"/api/selection/{file_id}/toggle")

    body = client.post("/api/analysis/run", json={"variant": "general"}).json()
    assert body["variant"] == "general"
    assert body["result"]["title"] == "T"
    assert body["result"]["competitorAnalysis"] == "C"
    assert "customerStrategies" not in body["result"]
    assert client.get("/api/analysis/latest").json() == body

    md = client.get("/api/analysis/export/markdown")
    assert md.text.startswith("# T")
    assert "market_analysis_report_" in md.headers["content-disposition"]

    pdf = client.get("/api/analysis/export/pdf")
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")


def test_analysis_without_credentials(kv_store, blob_store, make_client):
    provider = FakeProvider(reply="{}")
    analysis_client, factory = make_client(provider, api_key=None)
    workspace = Workspace(kv_store, analysis_client, "f", "c", blob_store=blob_store)
    app.dependency_overrides[get_workspace] = lambda: workspace
    try:
        client = TestClient(app)
        file_id = upload(client, ("a.txt", b"a", "text/plain"))["files"][0]["id"]
        client.post(f"/api/selection/{file_id}/toggle")
        response = client.post("/api/analysis/run", json={"variant": "general"})
        assert response.status_code == 503
        assert "ANTHROPIC_API_KEY" in response.json()["detail"]
        assert factory.created == []
        assert client.get("/api/analysis/status").json()["credentials_configured"] is False
    finally:
        app.dependency_overrides.clear()


def test_malformed_reply_maps_to_bad_gateway(kv_store, blob_store, make_client):
    analysis_client, _ = make_client(FakeProvider(reply=json.dumps(["not", "an", "object"])))
    workspace = Workspace(kv_store, analysis_client, "f", "c", blob_store=blob_store)
    app.dependency_overrides[get_workspace] = lambda: workspace
    try:
        client = TestClient(app)
        file_id = upload(client, ("a.txt", b"a", "text/plain"))["files"][0]["id"]
        client.post(f"/api/selection/{file_id}/toggle")
        response = client.post("/api/analysis/run", json={"variant": "general"})
        assert response.status_code == 502
        assert response.json()["detail"].startswith("The AI reply could not be read")
    finally:
        app.dependency_overrides.clear()


def test_second_run_while_analyzing_is_rejected(client, workspace):
    workspace.is_analyzing = True
    response = client.post("/api/analysis/run", json={"variant": "general"})
    assert response.status_code == 409
    assert workspace.latest_result is None


def test_status_reports_default_variant(client):
    body = client.get("/api/analysis/status").json()
    assert body["default_variant"] in ("general", "energy", "customer")
    assert body["is_analyzing"] is False
