"""
End-to-end checks of the public and admin apps through FastAPI's TestClient.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from digicard.admin_app import ADMIN_COOKIE_NAME, app as admin_app
from digicard.app import app
from digicard.core.csrf import CSRF_COOKIE_NAME
from digicard.services import card_service


@pytest.fixture()
def client(db_env):
    with TestClient(app) as c:
        yield c


def _register(client: TestClient, username: str, email: str, password: str = "secret1", **kwargs):
    client.get("/register")
    data = {
        "username": username,
        "email": email,
        "password": password,
        "csrf_token": client.cookies.get(CSRF_COOKIE_NAME),
    }
    return client.post("/register", data=data, **kwargs)


def _save_card(client: TestClient, **fields):
    client.get("/dashboard")
    data = {"csrf_token": client.cookies.get(CSRF_COOKIE_NAME), **fields}
    return client.post("/dashboard", data=data, follow_redirects=False)


def test_demo_card_needs_no_backend(client, monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("backend should not be queried for the demo card")

    monkeypatch.setattr(card_service._repo, "get_profile_by_username", boom)
    resp = client.get("/card/demo")
    assert resp.status_code == 200
    assert "Marie Martin" in resp.text
    assert "+33 6 12 34 56 78" in resp.text
    assert "https://wa.me/33612345678" in resp.text


def test_unknown_card_renders_not_found(client):
    resp = client.get("/card/nobody")
    assert resp.status_code == 404
    assert "This card doesn't exist." in resp.text
    assert client.get("/v/nobody.vcf").status_code == 404
    assert client.get("/q/nobody.png").status_code == 404


def test_register_rejects_bad_username(client):
    resp = _register(client, "Bad Name", "x@example.com")
    assert resp.status_code == 400
    assert "lowercase letters" in resp.text


def test_register_requires_csrf(client):
    resp = client.post("/register", data={"username": "jean", "email": "j@example.com", "password": "secret1"})
    assert resp.status_code == 403


def test_dashboard_requires_sign_in(client):
    resp = client.get("/dashboard", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


def test_edit_and_share_card(client):
    resp = _register(client, "jean", "jean@example.com", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard"

    resp = _save_card(
        client,
        first_name="Jean",
        last_name="Dupont",
        phone="+33612345678",
        phone_enabled="1",
        email="jean@example.com",
        telegram="@jean",
        telegram_enabled="1",
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard?saved=1"
    assert 'value="Dupont"' in client.get("/dashboard?saved=1").text

    card = client.get("/card/jean")
    assert card.status_code == 200
    assert "Jean Dupont" in card.text
    assert "+33 6 12 34 56 78" in card.text
    assert "https://t.me/jean" in card.text
    assert "mailto:" not in card.text

    vcf = client.get("/v/jean.vcf")
    assert vcf.status_code == 200
    assert vcf.headers["content-type"].startswith("text/vcard")
    assert 'filename="Jean_Dupont.vcf"' in vcf.headers["content-disposition"]
    assert "TEL;TYPE=CELL:+33612345678" in vcf.text.splitlines()
    assert "EMAIL" not in vcf.text

    qr = client.get("/q/jean.png")
    assert qr.status_code == 200
    assert qr.headers["content-type"] == "image/png"
    assert qr.content.startswith(b"\x89PNG")


def test_invalid_avatar_keeps_previous_card(client):
    _register(client, "jean", "jean@example.com")
    _save_card(client, first_name="Jean")
    client.get("/dashboard")
    resp = client.post(
        "/dashboard",
        data={"csrf_token": client.cookies.get(CSRF_COOKIE_NAME), "first_name": "Changed"},
        files={"avatar": ("me.gif", b"GIF89a", "image/gif")},
    )
    assert resp.status_code == 400
    assert "Unsupported image format" in resp.text
    assert "Jean" in client.get("/card/jean").text


def test_security_headers(client):
    resp = client.get("/healthz")
    assert resp.json() == {"ok": True}
    assert resp.headers["x-frame-options"] == "DENY"
    assert resp.headers["x-content-type-options"] == "nosniff"


def test_admin_stats(client):
    _register(client, "jean", "jean@example.com")
    client.get("/card/jean")
    client.get("/card/jean")
    client.get("/card/jean")
    client.get("/v/jean.vcf")
    client.cookies.clear()
    _register(client, "boss", "admin@example.com")

    with TestClient(admin_app) as admin:
        assert admin.get("/stats").status_code == 401
        resp = admin.post("/login", data={"email": "admin@example.com", "password": "secret1"}, follow_redirects=False)
        assert resp.status_code == 303
        assert admin.cookies.get(ADMIN_COOKIE_NAME)

        stats = admin.get("/stats", params={"days": 7}).json()
        assert stats["totals"]["total_users"] == 2
        assert stats["totals"]["total_views"] == 3
        assert stats["totals"]["total_contacts"] == 1
        assert stats["conversion_rate"] == pytest.approx(1 / 3)
        per_user = {v["username"]: v for v in stats["per_profile"].values()}
        assert per_user["jean"] == {"username": "jean", "views": 3, "contacts": 1}
        assert per_user["boss"]["views"] == 0
        assert len(stats["series"]) == 7
        assert sum(day["view"] for day in stats["series"]) == 3

        assert admin.get("/stats", params={"days": 14}).status_code == 400
        assert "Conversion rate" in admin.get("/").text


def test_admin_refuses_regular_users(client):
    _register(client, "jean", "jean@example.com")
    with TestClient(admin_app) as admin:
        resp = admin.post("/login", data={"email": "jean@example.com", "password": "secret1"}, follow_redirects=False)
        assert resp.headers["location"] == "/login?error=forbidden"
        assert admin.get("/stats").status_code == 401


def test_app_factories_return_module_apps():
    from digicard.admin_app import create_admin_app
    from digicard.app import create_app

    assert create_app() is app
    assert create_admin_app() is admin_app


def test_vcard_ignores_line_breaks_from_the_edit_form(client):
    _register(client, "jean", "jean@example.com")
    _save_card(client, first_name="Jean", last_name="Dupont", title="CEO\r\nEMAIL:attacker@evil.test")

    vcf = client.get("/v/jean.vcf")
    lines = vcf.text.split("\n")
    assert r"TITLE:CEO\nEMAIL:attacker@evil.test" in lines
    assert not any(line.startswith("EMAIL") for line in lines)
    assert "\r" not in vcf.text


def test_reloading_a_card_is_not_a_new_view(client):
    _register(client, "jean", "jean@example.com")
    client.get("/card/jean")
    client.get("/card/jean", headers={"referer": "http://testserver/card/jean"})
    client.get("/card/jean", headers={"referer": "https://elsewhere.example/card/jean"})

    events = card_service._repo.list_events()
    assert [e.event_type for e in events] == ["view", "view"]
