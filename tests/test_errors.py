"""
Tests for the 500 paths: storage failures are turned into a rendered page with
a generic message and never leak query text or tracebacks.
"""
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from profilehub.core.errors import ErrorKind, Result, StoreError
from profilehub.models.friend import Friend
from profilehub.models.user import User
from profilehub.repositories.users import UserRepository
from profilehub.services.sessions import SessionStore

SQL_TEXT = "SELECT password_hash FROM users"


def _storage_failure(self, *args, **kwargs):
    return Result.failure(ErrorKind.STORAGE)


def _raise_store_error(self, *args, **kwargs):
    raise StoreError(SQL_TEXT)


def _assert_no_internals(html: str):
    assert SQL_TEXT not in html
    assert "Traceback" not in html
    assert "StoreError" not in html


class TestRegisterFailures:
    def test_create_storage_failure(self, client: TestClient, monkeypatch, db):
        monkeypatch.setattr(UserRepository, "create", _storage_failure)

        response = client.post("/register", data={"login": "alice", "password": "pw123", "display_name": "Alice"})

        assert response.status_code == 500
        assert "Registration failed" in response.text
        assert 'action="/register"' in response.text
        assert db.scalars(select(User)).all() == []

    def test_lookup_failure(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(UserRepository, "find_by_login", _raise_store_error)

        response = client.post("/register", data={"login": "alice", "password": "pw123", "display_name": "Alice"})

        assert response.status_code == 500
        assert "Registration failed" in response.text
        _assert_no_internals(response.text)

    def test_constraint_race_reports_login_taken(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(UserRepository, "create", lambda self, *a, **k: Result.failure(ErrorKind.CONSTRAINT))

        response = client.post("/register", data={"login": "alice", "password": "pw123", "display_name": "Alice"})

        assert response.status_code == 400
        assert "Login is already taken" in response.text


class TestSettingsFailures:
    def _alice_with_bio(self, client: TestClient, register):
        register("alice", display_name="Alice")
        client.post("/settings", data={"display_name": "", "bio": "hello"})

    def test_update_failure_rerenders_prior_fields(self, client: TestClient, register, monkeypatch, db):
        self._alice_with_bio(client, register)
        monkeypatch.setattr(UserRepository, "update", _storage_failure)

        response = client.post("/settings", data={"display_name": "Renamed Person", "bio": "changed"})

        assert response.status_code == 500
        assert "Failed to save" in response.text
        assert 'value="Alice"' in response.text
        assert ">hello</textarea>" in response.text
        assert "Renamed Person" not in response.text
        assert "changed" not in response.text
        db.expire_all()
        user = db.scalar(select(User).where(User.login == "alice"))
        assert (user.display_name, user.bio) == ("Alice", "hello")

    def test_session_refresh_failure(self, client: TestClient, register, monkeypatch):
        self._alice_with_bio(client, register)
        monkeypatch.setattr(SessionStore, "update", _raise_store_error)

        response = client.post("/settings", data={"display_name": "", "bio": "changed"})

        assert response.status_code == 500
        assert "Failed to save" in response.text
        _assert_no_internals(response.text)


class TestFriendFailures:
    def _bob_and_alice(self, client: TestClient, register):
        register("alice")
        client.post("/logout")
        register("bob")

    def test_add_failure(self, client: TestClient, register, monkeypatch, db):
        self._bob_and_alice(client, register)
        monkeypatch.setattr(UserRepository, "add_friend", _storage_failure)

        response = client.post("/friends/add", data={"login": "alice"})

        assert response.status_code == 500
        assert "Could not update friends" in response.text
        assert db.scalars(select(Friend)).all() == []

    def test_remove_failure(self, client: TestClient, register, monkeypatch):
        self._bob_and_alice(client, register)
        client.post("/friends/add", data={"login": "alice"})
        monkeypatch.setattr(UserRepository, "remove_friend", _storage_failure)

        response = client.post("/friends/remove", data={"user_id": "1"})

        assert response.status_code == 500
        assert "Could not update friends" in response.text
        assert 'data-login="alice"' in response.text


class TestUnhandledStorageFailures:
    def test_store_error_renders_generic_page(self, client: TestClient, register, monkeypatch):
        register("alice")
        monkeypatch.setattr(UserRepository, "find_by_login", _raise_store_error)

        response = client.get("/u/alice")

        assert response.status_code == 500
        assert "Something went wrong" in response.text
        _assert_no_internals(response.text)

    def test_sqlalchemy_error_renders_generic_page(self, client: TestClient, register, monkeypatch):
        register("alice")

        def broken(self, owner_id):
            raise OperationalError(SQL_TEXT, {}, Exception("disk I/O error"))

        monkeypatch.setattr(UserRepository, "list_friends", broken)

        response = client.get("/friends")

        assert response.status_code == 500
        assert "Something went wrong" in response.text
        assert "disk I/O error" not in response.text
        _assert_no_internals(response.text)
