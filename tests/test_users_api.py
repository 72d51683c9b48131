"""Profile CRUD and password workflows."""
from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import DuplicateKeyError

from conftest import ADMIN_EMAIL, USER_PASSWORD, login
from hrdesk.models.user import User

pytestmark = pytest.mark.unit


def test_list_users_is_admin_only(client, admin_headers, employee):
    _, user_headers = employee

    assert client.get("/api/users/", headers=user_headers).status_code == 403

    response = client.get("/api/users/", headers=admin_headers)
    assert response.status_code == 200
    emails = {u["email"] for u in response.json()["data"]}
    assert emails == {ADMIN_EMAIL, "ana@example.com"}


def test_list_newest_users_limits_to_five(client, admin_headers):
    for i in range(6):
        client.post(
            "/api/auth/save-user",
            json={"email": f"user{i}@example.com", "password": USER_PASSWORD},
            headers=admin_headers,
        )

    response = client.get("/api/users/", params={"new": "true"}, headers=admin_headers)

    assert [u["email"] for u in response.json()["data"]] == [f"user{i}@example.com" for i in range(5, 0, -1)]


def test_stats_counts_accounts_per_month(client, admin_headers, employee, other_employee):
    _, user_headers = employee

    assert client.get("/api/users/stats", headers=user_headers).status_code == 403

    response = client.get("/api/users/stats", headers=admin_headers)
    assert response.status_code == 200
    stats = response.json()["data"]
    # the seeded admin and both employees were created just now
    assert len(stats) == 1
    assert stats[0]["total"] == 3
    assert 1 <= stats[0]["month"] <= 12


def test_update_email_race_on_save_conflicts(client, employee):
    ana_id, ana_headers = employee
    with patch.object(User, "save", new=AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key"))):
        response = client.put(f"/api/users/{ana_id}", json={"email": "late@example.com"}, headers=ana_headers)

    assert response.status_code == 409
    assert response.json()["message"] == "Email late@example.com already exists"


def test_user_can_view_self_but_not_others(client, employee, other_employee):
    ana_id, ana_headers = employee
    bob_id, _ = other_employee

    own = client.get(f"/api/users/{ana_id}", headers=ana_headers)
    other = client.get(f"/api/users/{bob_id}", headers=ana_headers)

    assert own.status_code == 200
    assert own.json()["data"]["first_name"] == "Ana"
    assert other.status_code == 403


def test_get_unknown_user(client, admin_headers):
    response = client.get("/api/users/65a1f0c2e4b0a1b2c3d4e5f6", headers=admin_headers)
    assert response.status_code == 404


def test_invalid_object_id_is_rejected(client, admin_headers):
    assert client.get("/api/users/not-an-id", headers=admin_headers).status_code == 422


def test_update_profile(client, employee):
    ana_id, ana_headers = employee

    response = client.put(f"/api/users/{ana_id}", json={"last_name": "Perez"}, headers=ana_headers)

    assert response.status_code == 200
    assert response.json()["data"]["last_name"] == "Perez"
    assert response.json()["data"]["first_name"] == "Ana"


def test_user_cannot_promote_self(client, employee):
    ana_id, ana_headers = employee
    response = client.put(f"/api/users/{ana_id}", json={"role": "ADMIN"}, headers=ana_headers)
    assert response.status_code == 403


def test_update_email_clash_conflicts(client, employee, other_employee):
    ana_id, ana_headers = employee
    response = client.put(f"/api/users/{ana_id}", json={"email": "bob@example.com"}, headers=ana_headers)
    assert response.status_code == 409


def test_update_password_is_hashed(client, employee):
    ana_id, ana_headers = employee

    client.put(f"/api/users/{ana_id}", json={"password": "brand-new"}, headers=ana_headers)

    login(client, "ana@example.com", "brand-new")


def test_update_rejects_unknown_fields(client, employee):
    ana_id, ana_headers = employee
    response = client.put(f"/api/users/{ana_id}", json={"_id": "x", "createdAt": "y"}, headers=ana_headers)
    assert response.status_code == 422


def test_delete_own_account_removes_records(client, admin_headers, employee):
    ana_id, ana_headers = employee
    client.post("/api/attendance/mark-attendance", json={"date": "2024-01-01", "attendance": "present"}, headers=ana_headers)

    response = client.delete(f"/api/users/{ana_id}", headers=ana_headers)

    assert response.status_code == 200
    assert client.get(f"/api/users/{ana_id}", headers=admin_headers).status_code == 404
    assert client.get(f"/api/attendance/{ana_id}", headers=admin_headers).status_code == 404


def test_user_cannot_delete_others(client, employee, other_employee):
    _, ana_headers = employee
    bob_id, _ = other_employee
    assert client.delete(f"/api/users/{bob_id}", headers=ana_headers).status_code == 403


def test_change_password(client, employee):
    _, ana_headers = employee

    wrong = client.post(
        "/api/users/change-password",
        json={"old_password": "nope", "new_password": "changed1"},
        headers=ana_headers,
    )
    right = client.post(
        "/api/users/change-password",
        json={"old_password": USER_PASSWORD, "new_password": "changed1"},
        headers=ana_headers,
    )

    assert wrong.status_code == 401
    assert right.status_code == 200
    login(client, "ana@example.com", "changed1")


class TestPasswordReset:
    def test_forgot_password_mails_reset_token(self, client, app, employee):
        ana_id, _ = employee
        with patch.object(app.state.mailer, "send_password_reset", new=AsyncMock()) as send:
            response = client.post("/api/users/forgot-password", json={"email": "ana@example.com"})

        assert response.status_code == 200
        send.assert_awaited_once()
        to, token = send.await_args.args
        assert to == "ana@example.com"
        assert app.state.tokens.decode_purpose(token, "reset") == ana_id

    def test_forgot_password_unknown_email(self, client):
        response = client.post("/api/users/forgot-password", json={"email": "ghost@example.com"})
        assert response.status_code == 404

    def test_mail_failure_is_internal_error(self, client, employee):
        with patch("hrdesk.services.mailer.smtplib.SMTP", side_effect=OSError("connection refused")):
            response = client.post("/api/users/forgot-password", json={"email": "ana@example.com"})

        assert response.status_code == 500
        assert response.json() == {"status": False, "message": "Failed to send email"}

    def test_reset_password_with_purpose_token(self, client, app, employee):
        ana_id, _ = employee
        token = app.state.tokens.issue_purpose_token(ana_id, "reset")

        response = client.post(
            "/api/users/reset-password",
            json={"new_password": "from-reset"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        login(client, "ana@example.com", "from-reset")

    def test_session_token_cannot_reset_password(self, client, employee):
        _, ana_headers = employee
        response = client.post("/api/users/reset-password", json={"new_password": "hijacked"}, headers=ana_headers)
        assert response.status_code == 403

    def test_reset_without_token(self, client):
        response = client.post("/api/users/reset-password", json={"new_password": "whatever"})
        assert response.status_code == 401
