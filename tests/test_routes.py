"""
HTTP-level flows through the FastAPI app with a temporary data directory.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the notecalc package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from notecalc.app import create_app  # noqa: E402
from notecalc.core import config as core_config  # noqa: E402


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    """Point the app at a temp data dir and reset the settings cache."""
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("AUTH_EMAIL", "me@example.com")
    monkeypatch.setenv("AUTH_PASSWORD", "pw")
    monkeypatch.delenv("LOG_FILE", raising=False)
    core_config.get_settings.cache_clear()
    yield tmp_path
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(data_dir):
    with TestClient(create_app()) as test_client:
        yield test_client


def _csrf(client: TestClient) -> str:
    client.get("/login")
    token = client.cookies.get("csrf_token")
    assert token
    return token


def _read(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


# -------------------------- pages --------------------------
@pytest.mark.parametrize("url", ["/", "/home", "/index", "/about", "/help"])
def test_static_pages_render(client, url):
    response = client.get(url)
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert response.headers["x-frame-options"] == "DENY"


def test_weather(client):
    assert client.get("/weather").json() == {"forecast": "It is snowing", "location": "Vaasa"}


# -------------------------- auth --------------------------
def test_login_logout_flow(client):
    token = _csrf(client)
    bad = client.post("/login", data={"email": "me@example.com", "password": "nope", "csrf_token": token})
    assert bad.status_code == 401
    assert "Invalid email or password." in bad.text

    ok = client.post(
        "/login",
        data={"email": "me@example.com", "password": "pw", "csrf_token": token},
        follow_redirects=False,
    )
    assert ok.status_code == 303
    assert ok.headers["location"] == "/notes/index"
    assert client.cookies.get("session")

    again = client.get("/login", follow_redirects=False)
    assert again.status_code == 303
    assert "Logout" in client.get("/").text

    out = client.get("/logout", follow_redirects=False)
    assert out.status_code == 303
    assert out.headers["location"] == "/"
    assert client.get("/login", follow_redirects=False).status_code == 200


def test_post_without_csrf_token_is_forbidden(client):
    response = client.post("/notes/create", data={"title": "a", "body": "b"})
    assert response.status_code == 403


def test_login_is_rate_limited(client):
    token = _csrf(client)
    statuses = [
        client.post("/login", data={"email": "x@example.com", "password": "x", "csrf_token": token}).status_code
        for _ in range(11)
    ]
    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429


def test_apps_do_not_share_sessions(data_dir):
    with TestClient(create_app()) as first, TestClient(create_app()) as second:
        token = _csrf(first)
        first.post("/login", data={"email": "me@example.com", "password": "pw", "csrf_token": token})
        session_cookie = {"Cookie": f"session={first.cookies.get('session')}"}
        assert "Logout" in first.get("/").text
        assert "Logout" not in second.get("/", headers=session_cookie).text


# -------------------------- notes --------------------------
def test_note_crud(client, data_dir):
    token = _csrf(client)
    created = client.post(
        "/notes/create",
        data={"title": " Shopping ", "body": "milk, eggs", "csrf_token": token},
        follow_redirects=False,
    )
    assert created.status_code == 303
    assert _read(data_dir / "notes.json") == [{"title": "Shopping", "body": "milk, eggs"}]
    assert "milk, eggs" in client.get("/notes/index").text

    duplicate = client.post("/notes/create", data={"title": "Shopping", "body": "bread", "csrf_token": token})
    assert duplicate.status_code == 409
    assert "A note with that title already exists." in duplicate.text
    assert _read(data_dir / "notes.json")[0]["body"] == "milk, eggs"

    edit = client.get("/notes/update/Shopping")
    assert edit.status_code == 200
    assert "milk, eggs" in edit.text

    updated = client.post(
        "/notes/update/Shopping",
        data={"body": "eggs only", "csrf_token": token},
        follow_redirects=False,
    )
    assert updated.status_code == 303
    assert _read(data_dir / "notes.json") == [{"title": "Shopping", "body": "eggs only"}]

    deleted = client.post("/notes/delete/Shopping", data={"csrf_token": token}, follow_redirects=False)
    assert deleted.status_code == 303
    assert _read(data_dir / "notes.json") == []
    assert client.get("/notes/update/Shopping", follow_redirects=False).status_code == 303


def test_note_validation_redisplays_input(client, data_dir):
    token = _csrf(client)
    response = client.post("/notes/create", data={"title": "Kept title", "body": "  ", "csrf_token": token})
    assert response.status_code == 400
    assert "Both title and body are required." in response.text
    assert "Kept title" in response.text
    assert not (data_dir / "notes.json").exists() or _read(data_dir / "notes.json") == []


def test_note_empty_body_update_is_rejected(client, data_dir):
    token = _csrf(client)
    client.post("/notes/create", data={"title": "T", "body": "B", "csrf_token": token})
    response = client.post("/notes/update/T", data={"body": " ", "csrf_token": token})
    assert response.status_code == 400
    assert "Body is required." in response.text
    assert _read(data_dir / "notes.json") == [{"title": "T", "body": "B"}]


def test_note_titles_with_slashes_and_spaces(client, data_dir):
    token = _csrf(client)
    client.post("/notes/create", data={"title": "a/b c", "body": "x", "csrf_token": token})
    assert "a%2Fb%20c" in client.get("/notes/index").text
    assert client.get("/notes/update/a%2Fb%20c").status_code == 200
    client.post("/notes/delete/a%2Fb%20c", data={"csrf_token": token})
    assert _read(data_dir / "notes.json") == []


def test_updating_unknown_note_redirects(client, data_dir):
    token = _csrf(client)
    response = client.post(
        "/notes/update/ghost",
        data={"body": "boo", "csrf_token": token},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/notes/index"
    assert _read(data_dir / "notes.json") == []


# -------------------------- calculators --------------------------
def _calculator_form(token, **overrides):
    form = {"oid": "7", "manufacturer": "Acme", "grade": "8", "batteryType": "2", "csrf_token": token}
    form.update(overrides)
    return form


def test_calculator_crud(client, data_dir):
    token = _csrf(client)
    created = client.post("/calculators/create", data=_calculator_form(token), follow_redirects=False)
    assert created.status_code == 303
    assert created.headers["location"] == "/calculators"
    assert _read(data_dir / "calculators.json") == [
        {"oid": 7, "manufacturer": "Acme", "grade": 8, "batteryType": 2}
    ]
    assert "Acme" in client.get("/calculators").text

    duplicate = client.post("/calculators/create", data=_calculator_form(token, manufacturer="Other"))
    assert duplicate.status_code == 409
    assert "Invalid input. Please check the form fields." in duplicate.text

    assert client.get("/calculators/edit/7").status_code == 200
    updated = client.post(
        "/calculators/edit/7",
        data={"manufacturer": "Casio", "grade": "10", "batteryType": "3", "csrf_token": token},
        follow_redirects=False,
    )
    assert updated.status_code == 303
    assert _read(data_dir / "calculators.json") == [
        {"oid": 7, "manufacturer": "Casio", "grade": 10, "batteryType": 3}
    ]

    client.post("/calculators/delete/7", data={"csrf_token": token})
    assert _read(data_dir / "calculators.json") == []


def test_out_of_range_grade_never_reaches_storage(client, data_dir):
    token = _csrf(client)
    response = client.post("/calculators/create", data=_calculator_form(token, grade="11"))
    assert response.status_code == 400
    assert "Invalid input. Please check the form fields." in response.text
    assert 'value="11"' in response.text
    assert not (data_dir / "calculators.json").exists()


def test_invalid_calculator_edit_keeps_record(client, data_dir):
    token = _csrf(client)
    client.post("/calculators/create", data=_calculator_form(token))
    response = client.post(
        "/calculators/edit/7",
        data={"manufacturer": "Acme", "grade": "5", "batteryType": "9", "csrf_token": token},
    )
    assert response.status_code == 400
    assert _read(data_dir / "calculators.json")[0]["batteryType"] == 2


@pytest.mark.parametrize("oid", ["abc", "1.5", "404"])
def test_bad_or_unknown_calculator_ids_redirect(client, oid):
    response = client.get(f"/calculators/edit/{oid}", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/calculators"


# -------------------------- storage faults --------------------------
def test_write_failure_renders_server_error(client, data_dir):
    (data_dir / "notes.json").mkdir()
    token = _csrf(client)
    response = client.post("/notes/create", data={"title": "a", "body": "b", "csrf_token": token})
    assert response.status_code == 500
    assert "The data store could not be written." in response.text


def test_corrupt_storage_lists_as_empty(client, data_dir):
    (data_dir / "calculators.json").write_text("{oops", encoding="utf-8")
    response = client.get("/calculators")
    assert response.status_code == 200
    assert "No calculators yet." in response.text
