"""
HTTP API tests.
"""

import io
import zipfile

import pytest
from fastapi.testclient import TestClient

from aiagen import __version__
from aiagen.api import app
from aiagen.archive import parse_properties
from aiagen.generator import AiaGenerator, GenerationError

FORM = {
    "projectName": "Demo",
    "userId": "dev1",
    "searchPrompt": "coffee",
    "requirements": "make 2 buttons, on button1 click set screen1.backgroundcolor to red",
}


@pytest.fixture
def client(settings):
    with TestClient(app) as test_client:
        app.state.generator = AiaGenerator(settings)
        yield test_client


@pytest.mark.unit
def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


@pytest.mark.unit
def test_metrics(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "aia_generation_requests_total" in response.text


# ============================================================================
# /api/validate
# ============================================================================

@pytest.mark.unit
def test_validate_reports_features(client):
    response = client.post("/api/validate", json=FORM)

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    features = body["detectedFeatures"]
    assert features["button_count"] == 2
    assert features["button_actions"] == {"1": [{"kind": "set_background_color", "argument": "red"}]}


@pytest.mark.unit
def test_validate_names_bad_field(client):
    response = client.post("/api/validate", json={**FORM, "projectName": "9lives"})

    assert response.status_code == 400
    body = response.json()
    assert body["valid"] is False
    assert [e["field"] for e in body["errors"]] == ["projectName"]


# ============================================================================
# /api/generate-aia
# ============================================================================

@pytest.mark.integration
def test_generate_returns_archive(client, png_bytes, workspace_dir):
    files = [
        ("extensions", ("Foo.aix", b"PK\x03\x04", "application/octet-stream")),
        ("designImages", ("logo.png", png_bytes, "image/png")),
    ]
    response = client.post("/api/generate-aia", data=FORM, files=files)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == 'attachment; filename="Demo.aia"'

    with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
        assert zf.read("assets/logo.png") == png_bytes
        props = parse_properties(zf.read("youngandroidproject/project.properties").decode("utf-8"))
    assert props["external_comps"] == "com.appybuilder.Foo"
    assert list(workspace_dir.iterdir()) == []


@pytest.mark.unit
def test_generate_requires_project_name(client):
    response = client.post("/api/generate-aia", data={**FORM, "projectName": ""})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request body"
    assert "projectName" in [e["field"] for e in body["errors"]]


@pytest.mark.unit
def test_strict_mode_rejects_bad_extension(client):
    files = [("extensions", ("Foo.zip", b"zip", "application/zip"))]
    response = client.post("/api/generate-aia", data=FORM, files=files)

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == ["extensions"]


@pytest.mark.integration
def test_lenient_mode_drops_bad_extension(client):
    files = [("extensions", ("Foo.zip", b"zip", "application/zip"))]
    response = client.post("/api/generate-aia", data={**FORM, "validateStrict": "false"}, files=files)

    assert response.status_code == 200
    with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
        props = parse_properties(zf.read("youngandroidproject/project.properties").decode("utf-8"))
    assert props["external_comps"] == ""


@pytest.mark.unit
def test_generation_failure_is_500(client, monkeypatch):
    def fail(request):
        raise GenerationError("disk full")

    monkeypatch.setattr(app.state.generator, "generate", fail)
    response = client.post("/api/generate-aia", data=FORM)

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to generate AIA file"}


@pytest.mark.unit
def test_duplicate_design_image_names_rejected(client, png_bytes):
    files = [
        ("designImages", ("logo.png", png_bytes, "image/png")),
        ("designImages", ("logo.png", b"BBBB", "image/png")),
    ]
    response = client.post("/api/generate-aia", data=FORM, files=files)

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == ["designImages"]
