import pytest

from api import create_app
from conftest import bearer


def test_healthz(client):
    res = client.get("/api/healthz")
    assert res.status_code == 200
    assert res.data == b"OK"
    assert res.content_type.startswith("text/plain")


def test_metrics_count_fileserver_hits(client):
    assert "visited 0 times" in client.get("/admin/metrics").get_data(as_text=True)
    assert client.get("/app/").status_code == 200
    client.get("/app/index.html")
    client.get("/app/missing.txt")

    res = client.get("/admin/metrics")
    assert res.content_type.startswith("text/html")
    assert "Chirpy has been visited 3 times!" in res.get_data(as_text=True)


def test_api_routes_do_not_count(client):
    client.get("/api/healthz")
    assert "visited 0 times" in client.get("/admin/metrics").get_data(as_text=True)


def test_reset_clears_everything(client, make_user, login):
    make_user()
    token = login()["token"]
    client.post("/api/chirps", json={"body": "Say my name"}, headers=bearer(token))
    client.get("/app/")

    res = client.post("/admin/reset")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}

    assert client.get("/api/chirps").get_json() == []
    assert "visited 0 times" in client.get("/admin/metrics").get_data(as_text=True)
    res = client.post("/api/login", json={"email": "walt@breakingbad.com", "password": "s3cr3t!"})
    assert res.status_code == 401


@pytest.mark.parametrize("platform", ["prod", "staging", ""])
def test_reset_forbidden_outside_dev(make_user, platform):
    app = create_app("testing", overrides={"PLATFORM": platform})
    client = app.test_client()
    make_user()
    res = client.post("/admin/reset")
    assert res.status_code == 403
    assert res.get_json()["error"] == "FORBIDDEN"
    res = client.post("/api/login", json={"email": "walt@breakingbad.com", "password": "s3cr3t!"})
    assert res.status_code == 200


def test_unknown_route(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json()["error"] == "NOT_FOUND"


def test_reset_forbidden_without_platform(monkeypatch, make_user):
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("PLATFORM", raising=False)
    make_user()
    app = create_app()
    assert app.config["PLATFORM"] == "prod"

    res = app.test_client().post("/admin/reset")
    assert res.status_code == 403
    res = app.test_client().post("/api/login", json={"email": "walt@breakingbad.com", "password": "s3cr3t!"})
    assert res.status_code == 200
