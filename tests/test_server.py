"""API tests with FastAPI's TestClient.

The database is replaced through ``app.dependency_overrides``: ``get_db``
yields an AsyncMock and each repository provider returns an in-memory
fake mirroring the real repository's interface and side effects.
"""

import json
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from applyform_db.models.enums import ApplicationStatus
from applyform_server.app import create_app
from applyform_server.config import ServerSettings
from applyform_server.dependencies import (
    get_admin_session_repo,
    get_application_repo,
    get_db,
    get_form_config_repo,
)

from helpers.forms import q

API = "/api/v1"
PASSWORD = "hunter2"

SCHEMA = [
    q("full_name", required=True),
    q("email", "email", required=True, errorMessage="Please enter a valid email."),
    q("position", "select", options=["Company Driver", "Owner Operator"]),
    q("resume", "file", group=2),
]


# =====================================================================
# Mock infrastructure
# =====================================================================

def _now():
    return datetime.now(timezone.utc)


@dataclass
class MockApplicationRow:
    id: int
    data: dict
    status: str = ApplicationStatus.PENDING.value
    created_at: datetime = field(default_factory=_now)


@dataclass
class MockConfigRow:
    config: Any


@dataclass
class MockSessionRow:
    token: str
    expires_at: datetime


class MockApplicationRepository:

    def __init__(self):
        self.rows: list[MockApplicationRow] = []

    async def create(self, db, *, data):
        row = MockApplicationRow(id=len(self.rows) + 1, data=data)
        self.rows.append(row)
        return row

    async def list_applications(self, db, *, status=None, limit=None, offset=0):
        rows = [r for r in self.rows if status is None or r.status == status.value]
        return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)

    async def update_status(self, db, application_id, status):
        for row in self.rows:
            if row.id == application_id:
                row.status = status.value
                return row
        return None


class MockFormConfigRepository:

    def __init__(self, config=None):
        self.row = MockConfigRow(config) if config is not None else None

    async def get_latest(self, db):
        return self.row

    async def save(self, db, config):
        self.row = MockConfigRow(config)
        return self.row


class MockAdminSessionRepository:

    def __init__(self):
        self.rows: dict[str, MockSessionRow] = {}
        self.purged = 0

    async def create(self, db, *, lifetime):
        row = MockSessionRow(secrets.token_hex(32), _now() + lifetime)
        self.rows[row.token] = row
        return row

    async def is_valid(self, db, token):
        row = self.rows.get(token)
        return row is not None and row.expires_at > _now()

    async def purge_expired(self, db):
        expired = [t for t, r in self.rows.items() if r.expires_at < _now()]
        for token in expired:
            del self.rows[token]
        self.purged += len(expired)
        return len(expired)


class MockNotifier:

    def __init__(self):
        self.sent = []

    async def application_received(self, application_id, data):
        self.sent.append((application_id, dict(data)))
        return True


# =====================================================================
# Fixtures
# =====================================================================

@pytest.fixture
def repos():
    return {
        "applications": MockApplicationRepository(),
        "configs": MockFormConfigRepository(SCHEMA),
        "sessions": MockAdminSessionRepository(),
    }


@pytest.fixture
def notifier():
    return MockNotifier()


@pytest.fixture
def settings(tmp_path):
    return ServerSettings(admin_password=PASSWORD, upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def db():
    return AsyncMock()


@pytest.fixture
def client(settings, repos, notifier, db):
    app = create_app(settings)

    async def fake_db():
        yield db

    app.dependency_overrides[get_db] = fake_db
    app.dependency_overrides[get_application_repo] = lambda: repos["applications"]
    app.dependency_overrides[get_form_config_repo] = lambda: repos["configs"]
    app.dependency_overrides[get_admin_session_repo] = lambda: repos["sessions"]
    app.state.notifier = notifier

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth(client):
    response = client.post(f"{API}/auth/login", json={"password": PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


VALID = {"full_name": "Jane Smith", "email": "jane@example.com", "position": "Company Driver"}


# =====================================================================
# Auth
# =====================================================================

class TestAuth:

    def test_login_issues_token(self, client, repos):
        response = client.post(f"{API}/auth/login", json={"password": PASSWORD})
        body = response.json()
        assert body["success"] is True
        assert len(body["token"]) == 64
        assert body["token"] in repos["sessions"].rows
        expires = datetime.fromisoformat(body["expires"])
        assert timedelta(hours=23) < expires - _now() <= timedelta(hours=24)

    def test_wrong_password(self, client):
        response = client.post(f"{API}/auth/login", json={"password": "nope"})
        assert response.status_code == 401

    def test_login_disabled_without_password(self, repos, notifier, tmp_path):
        app = create_app(ServerSettings(upload_dir=str(tmp_path)))
        app.dependency_overrides[get_admin_session_repo] = lambda: repos["sessions"]

        async def fake_db():
            yield AsyncMock()

        app.dependency_overrides[get_db] = fake_db
        with TestClient(app) as c:
            assert c.post(f"{API}/auth/login", json={"password": ""}).status_code == 403

    def test_login_purges_expired_tokens(self, client, repos):
        stale = MockSessionRow("old", _now() - timedelta(hours=1))
        repos["sessions"].rows["old"] = stale
        client.post(f"{API}/auth/login", json={"password": PASSWORD})
        assert "old" not in repos["sessions"].rows
        assert repos["sessions"].purged == 1

    def test_check(self, client, auth):
        response = client.get(f"{API}/auth/check", headers=auth)
        assert response.json() == {"success": True, "message": "Token is valid"}

    @pytest.mark.parametrize("headers", [
        {},
        {"Authorization": "Bearer"},
        {"Authorization": "Basic abc"},
        {"Authorization": "Bearer not-a-token"},
    ])
    def test_check_rejects(self, client, headers):
        assert client.get(f"{API}/auth/check", headers=headers).status_code == 401

    def test_expired_token_rejected(self, client, repos):
        repos["sessions"].rows["t"] = MockSessionRow("t", _now() - timedelta(seconds=1))
        response = client.get(f"{API}/auth/check", headers={"Authorization": "Bearer t"})
        assert response.status_code == 401


# =====================================================================
# Form config
# =====================================================================

class TestFormConfig:

    def test_get_stored(self, client):
        assert client.get(f"{API}/form-config").json() == SCHEMA

    def test_get_empty(self, client, repos):
        repos["configs"].row = None
        assert client.get(f"{API}/form-config").json() == []

    def test_save_requires_admin(self, client):
        response = client.post(f"{API}/form-config", json={"config": []})
        assert response.status_code == 401

    def test_save(self, client, auth, repos):
        new = [q("name", mode="single", required=True)]
        response = client.post(f"{API}/form-config", json={"config": new}, headers=auth)
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert repos["configs"].row.config == new

    @pytest.mark.parametrize("config", [
        None,
        {"id": "a"},
        [{"id": "a", "type": "hologram", "title": "A"}],
        [q("a"), q("a")],
        [q("plate", mode="single", pattern="[A-Z")],
    ])
    def test_save_rejects_invalid(self, client, auth, repos, config):
        response = client.post(f"{API}/form-config", json={"config": config}, headers=auth)
        assert response.status_code == 400
        assert repos["configs"].row.config == SCHEMA


# =====================================================================
# Submission
# =====================================================================

class TestSubmit:

    def test_json_submission(self, client, repos, notifier):
        response = client.post(f"{API}/applications", json=VALID)
        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "message": "Application submitted successfully",
            "id": 1,
        }
        assert repos["applications"].rows[0].data == VALID
        assert notifier.sent == [(1, VALID)]

    def test_notifies_only_after_commit(self, client, db, notifier):
        db.commit.side_effect = RuntimeError("commit failed")
        with pytest.raises(RuntimeError, match="commit failed"):
            client.post(f"{API}/applications", json=VALID)
        db.commit.assert_awaited()
        assert notifier.sent == []

    def test_stored_schema_with_bad_pattern_uses_defaults(self, client, repos):
        repos["configs"].row = MockConfigRow([q("plate", mode="single", pattern="[A-Z")])
        response = client.post(f"{API}/applications", json={"plate": "ABC"})
        assert response.status_code == 400
        assert "full_name" in response.json()["errors"]

    def test_validation_errors_per_field(self, client, repos):
        response = client.post(
            f"{API}/applications",
            json={"full_name": " ", "email": "nope", "position": "Astronaut"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"] == {
            "full_name": "This field is required.",
            "email": "Please enter a valid email.",
            "position": "Please enter a valid value.",
        }
        assert repos["applications"].rows == []

    @pytest.mark.parametrize("payload", [b"", b"not json", b"[1, 2]", b"{}"])
    def test_bad_json_body(self, client, payload):
        response = client.post(
            f"{API}/applications", content=payload,
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_falls_back_to_default_schema(self, client, repos):
        repos["configs"].row = None
        response = client.post(f"{API}/applications", json=VALID)
        assert response.status_code == 400
        assert "phone" in response.json()["errors"]

    def test_multipart_with_file(self, client, repos, settings, auth):
        response = client.post(
            f"{API}/applications",
            data={"data": json.dumps(VALID)},
            files={"resume": ("cv.PDF", b"%PDF-1.4 resume", "application/pdf")},
        )
        assert response.status_code == 201

        stored = repos["applications"].rows[0].data
        path = stored["resume"]
        assert path.startswith("/uploads/upload_") and path.endswith(".pdf")
        name = path.rsplit("/", 1)[1]

        download = client.get(f"{API}/uploads/{name}", headers=auth)
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4 resume"

    def test_multipart_without_data_part(self, client):
        response = client.post(
            f"{API}/applications",
            files={"resume": ("cv.pdf", b"%PDF", "application/pdf")},
        )
        assert response.status_code == 400

    def test_multipart_with_bad_data_part(self, client):
        response = client.post(
            f"{API}/applications",
            data={"data": "not json"},
            files={"resume": ("cv.pdf", b"%PDF", "application/pdf")},
        )
        assert response.status_code == 400

    def test_invalid_multipart_stores_no_file(self, client, settings):
        response = client.post(
            f"{API}/applications",
            data={"data": json.dumps({"email": "jane@example.com"})},
            files={"resume": ("cv.pdf", b"%PDF", "application/pdf")},
        )
        assert response.status_code == 400
        upload_dir = Path(settings.upload_dir)
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


# =====================================================================
# Review
# =====================================================================

class TestReview:

    def _submit(self, client, **overrides):
        return client.post(f"{API}/applications", json={**VALID, **overrides}).json()["id"]

    def test_list_requires_admin(self, client):
        assert client.get(f"{API}/applications").status_code == 401

    def test_list_summaries_newest_first(self, client, auth):
        self._submit(client)
        self._submit(client, full_name="John Doe", position="Owner Operator")

        rows = client.get(f"{API}/applications", headers=auth).json()
        assert [r["id"] for r in rows] == [2, 1]
        assert rows[0]["full_name"] == "John Doe"
        assert rows[0]["first_name"] == "John"
        assert rows[0]["last_name"] == "Doe"
        assert rows[0]["email"] == "jane@example.com"
        assert rows[0]["position"] == "Owner Operator"
        assert rows[0]["status"] == "pending"

    def test_status_filter(self, client, auth):
        first = self._submit(client)
        self._submit(client)
        client.patch(f"{API}/applications", json={"id": first, "status": "accepted"}, headers=auth)

        accepted = client.get(f"{API}/applications?status=accepted", headers=auth).json()
        assert [r["id"] for r in accepted] == [first]
        assert len(client.get(f"{API}/applications?status=all", headers=auth).json()) == 2
        assert len(client.get(f"{API}/applications?status=bogus", headers=auth).json()) == 2

    @pytest.mark.parametrize("body", [
        {"id": 1, "status": "archived"},
        {"status": "accepted"},
        {"id": 1},
    ])
    def test_patch_invalid(self, client, auth, body):
        self._submit(client)
        response = client.patch(f"{API}/applications", json=body, headers=auth)
        assert response.status_code == 400

    def test_patch_unknown_id(self, client, auth):
        response = client.patch(
            f"{API}/applications", json={"id": 99, "status": "rejected"}, headers=auth,
        )
        assert response.status_code == 404

    def test_patch(self, client, auth, repos):
        app_id = self._submit(client)
        response = client.patch(
            f"{API}/applications", json={"id": app_id, "status": "reviewing"}, headers=auth,
        )
        assert response.json() == {"success": True}
        assert repos["applications"].rows[0].status == "reviewing"

    @pytest.mark.parametrize("name", ["upload_ffff.pdf", "..%2Fsecret", "passwd"])
    def test_unknown_upload(self, client, auth, name):
        assert client.get(f"{API}/uploads/{name}", headers=auth).status_code == 404

    def test_upload_requires_admin(self, client):
        assert client.get(f"{API}/uploads/upload_ab.pdf").status_code == 401
