import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blogmigrator.api import routes_health
from blogmigrator.config import Settings, get_settings
from blogmigrator.main import create_app

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_ready_reports_missing_requirements(
    client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = Settings().model_copy(
        update={
            "blog_dir": tmp_path / "missing",
            "strapi_api_token": "",
            "strapi_token_file": tmp_path / ".api_token",
        }
    )
    monkeypatch.setattr(routes_health, "get_settings", lambda: settings)
    resp = client.get("/ready")
    assert resp.status_code == 503
    detail = resp.json()["detail"]
    assert detail.startswith("Missing: ")
    assert "Strapi API token" in detail


def test_ready_ok(client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    token_file = tmp_path / ".api_token"
    token_file.write_text("secret\n", encoding="utf-8")
    settings = Settings().model_copy(
        update={
            "blog_dir": tmp_path,
            "strapi_api_token": "",
            "strapi_token_file": token_file,
            "strapi_url": "http://strapi.local",
        }
    )
    monkeypatch.setattr(routes_health, "get_settings", lambda: settings)
    resp = client.get("/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "strapi_url": "http://strapi.local"}


def test_parse_named_template(client: TestClient) -> None:
    source = (FIXTURES / "named_object.html.twig").read_text(encoding="utf-8")
    resp = client.post(
        "/articles/parse", json={"category": "rca", "slug": "ce-este-rca", "source": source}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["grammar"] == "named_object"
    assert body["article"]["title"] == "Ce este asigurarea RCA"
    assert len(body["blocks"]) == 16
    assert body["blocks"][2] == {
        "type": "heading",
        "level": 2,
        "children": [{"type": "text", "text": "Definitie"}],
    }


def test_parse_raw_template(client: TestClient) -> None:
    resp = client.post(
        "/articles/parse",
        json={"category": "common", "slug": "x", "source": "plain text, no markers"},
    )
    assert resp.status_code == 200
    assert resp.json()["grammar"] == "raw"
    assert resp.json()["blocks"] == []


def test_parse_requires_fields(client: TestClient) -> None:
    resp = client.post("/articles/parse", json={"category": "rca"})
    assert resp.status_code == 422


def test_parse_rejects_oversized_source() -> None:
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: Settings().model_copy(
        update={"max_source_chars": 10}
    )
    resp = TestClient(app).post(
        "/articles/parse", json={"category": "rca", "slug": "s", "source": "x" * 11}
    )
    assert resp.status_code == 422
    assert "10 characters" in resp.json()["detail"]


def test_parse_source_with_lone_surrogate(client: TestClient) -> None:
    source = (
        '<meta name="description" content="x\ud800">'
        "{% block workarea_content %}text \ud800{% endblock %}"
    )
    body = json.dumps({"category": "common", "slug": "s", "source": source})
    resp = client.post(
        "/articles/parse", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 200
    assert resp.json()["article"]["rawHtml"] == "text ?"
    assert resp.json()["article"]["metaDescription"] == "x?"
