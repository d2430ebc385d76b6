import pytest

from issuedesk.core.security import verify_password
from issuedesk.models.user import User, UserRole, UserStatus

API = "/api/v1"

NEW_USER = {
    "email": "new@example.com",
    "password": "secret123",
    "user_name": "New Person",
    "job_position": "Tester",
}


# ======================
# Auth
# ======================

def login(client, email, password):
    return client.post(f"{API}/auth/login", data={"username": email, "password": password})


def test_login_issues_a_working_token(client, staff_user):
    response = login(client, staff_user.email, "secret123")
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == staff_user.email


def test_login_with_wrong_password(client, staff_user):
    assert login(client, staff_user.email, "wrong-password").status_code == 401


def test_inactive_account_cannot_log_in_or_use_old_tokens(client, make_user, headers_for):
    user = make_user("gone@example.com", "Gone", status=UserStatus.INACTIVE)
    assert login(client, user.email, "secret123").status_code == 403
    assert client.get(f"{API}/users/me", headers=headers_for(user)).status_code == 403


def test_garbage_token_is_rejected(client):
    response = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403


# ======================
# Privileged handlers
# ======================

@pytest.mark.parametrize(
    "method, path, body",
    [
        ("post", "/user-admin/users", NEW_USER),
        ("patch", "/user-admin/users/{uid}/profile", {"job_position": "Developer"}),
        ("patch", "/user-admin/users/{uid}/email", {"email": "other@example.com"}),
        ("patch", "/user-admin/users/{uid}/password", {"new_password": "another1"}),
        ("patch", "/user-admin/users/{uid}/display-name", {"user_name": "Someone"}),
        ("patch", "/user-admin/users/{uid}/status", {"status": "Inactive"}),
        ("delete", "/user-admin/users/{uid}", None),
    ],
)
def test_staff_cannot_use_admin_handlers(client, admin_user, staff_headers, method, path, body):
    url = API + path.format(uid=admin_user.id)
    kwargs = {"headers": staff_headers}
    if body is not None:
        kwargs["json"] = body
    response = getattr(client, method)(url, **kwargs)
    assert response.status_code == 403


def test_admin_creates_user_with_defaults(client, db, admin_headers):
    response = client.post(f"{API}/user-admin/users", json=NEW_USER, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True

    user = db.get(User, body["uid"])
    assert user.role == UserRole.STAFF
    assert user.status == UserStatus.ACTIVE
    assert verify_password("secret123", user.password)


def test_user_codes_are_allocated_in_sequence(client, db, make_user, admin_headers):
    first = client.post(f"{API}/user-admin/users", json=NEW_USER, headers=admin_headers).json()
    second = client.post(
        f"{API}/user-admin/users", json=dict(NEW_USER, email="second@example.com"), headers=admin_headers,
    ).json()

    assert db.get(User, first["uid"]).user_code == "LC-000001"
    assert db.get(User, second["uid"]).user_code == "LC-000002"

    # Gaps are not refilled and hand-edited codes count
    make_user("legacy@example.com", "Legacy", user_code="LC-000041")
    third = client.post(
        f"{API}/user-admin/users", json=dict(NEW_USER, email="third@example.com"), headers=admin_headers,
    ).json()
    assert db.get(User, third["uid"]).user_code == "LC-000042"


def test_user_code_in_create_body_is_ignored(client, db, admin_headers):
    payload = dict(NEW_USER, user_code="LC-999999")
    body = client.post(f"{API}/user-admin/users", json=payload, headers=admin_headers).json()
    assert db.get(User, body["uid"]).user_code == "LC-000001"


def test_duplicate_email_is_409(
client, admin_headers, staff_user):
    payload = dict(NEW_USER, email=staff_user.email)
    response = client.post(f"{API}/user-admin/users", json=payload, headers=admin_headers)
    assert response.status_code == 409


def test_create_requires_user_name(client, admin_headers):
    payload = {k: v for k, v in NEW_USER.items() if k != "user_name"}
    response = client.post(f"{API}/user-admin/users", json=payload, headers=admin_headers)
    assert response.status_code == 422


def test_short_password_is_rejected(client, admin_headers):
    payload = dict(NEW_USER, password="123")
    assert client.post(f"{API}/user-admin/users", json=payload, headers=admin_headers).status_code == 422


def test_change_email_to_taken_address_is_409(client, admin_user, admin_headers, staff_user):
    response = client.patch(
        f"{API}/user-admin/users/{staff_user.id}/email",
        json={"email": admin_user.email},
        headers=admin_headers,
    )
    assert response.status_code == 409


def test_password_reset(client, db, admin_headers, staff_user):
    response = client.patch(
        f"{API}/user-admin/users/{staff_user.id}/password",
        json={"new_password": "brand-new-pass"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert "password" not in response.json()
    assert login(client, staff_user.email, "brand-new-pass").status_code == 200


def test_profile_and_display_name_updates(client, admin_headers, staff_user):
    response = client.patch(
        f"{API}/user-admin/users/{staff_user.id}/profile",
        json={"user_code": "LC-000007", "job_position": "Tester"},
        headers=admin_headers,
    )
    assert response.json()["user_code"] == "LC-000007"
    assert response.json()["user_name"] == "Dana Dev"

    response = client.patch(
        f"{API}/user-admin/users/{staff_user.id}/display-name",
        json={"user_name": "Dana D."},
        headers=admin_headers,
    )
    assert response.json()["user_name"] == "Dana D."


def test_profile_update_rejects_null_user_name(client, admin_headers, staff_user):
    response = client.patch(
        f"{API}/user-admin/users/{staff_user.id}/profile",
        json={"user_name": None},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_deactivate_user(
client, admin_headers, staff_user):
    response = client.patch(
        f"{API}/user-admin/users/{staff_user.id}/status",
        json={"status": "Inactive"},
        headers=admin_headers,
    )
    assert response.json()["status"] == "Inactive"
    assert login(client, staff_user.email, "secret123").status_code == 403


def test_admin_cannot_delete_self(client, admin_user, admin_headers):
    response = client.delete(f"{API}/user-admin/users/{admin_user.id}", headers=admin_headers)
    assert response.status_code == 400


def test_admin_deletes_user(client, db, admin_headers, staff_user):
    user_id = staff_user.id
    response = client.delete(f"{API}/user-admin/users/{user_id}", headers=admin_headers)

    assert response.json() == {"success": True}
    assert db.get(User, user_id) is None


def test_unknown_user_is_404(client, admin_headers):
    response = client.patch(
        f"{API}/user-admin/users/does-not-exist/status", json={"status": "Active"}, headers=admin_headers,
    )
    assert response.status_code == 404


# ======================
# Read endpoints
# ======================

def test_user_list_is_admin_only(client, admin_headers, staff_headers):
    assert client.get(f"{API}/users", headers=staff_headers).status_code == 403
    assert len(client.get(f"{API}/users", headers=admin_headers).json()) == 2


def test_options_by_job_position(client, make_user, staff_headers):
    make_user("ba@example.com", "Bea Analyst", job_position="Business Analyst")
    make_user("qa@example.com", "Quinn Tester", job_position="Tester")
    make_user("old@example.com", "Old Tester", job_position="Tester", status=UserStatus.INACTIVE)

    developers = client.get(f"{API}/users/options/developer", headers=staff_headers).json()
    assert developers == [{"value": "Dana Dev", "label": "Dana Dev"}]

    testers = client.get(f"{API}/users/options/ba-test", headers=staff_headers).json()
    assert [o["value"] for o in testers] == ["Bea Analyst", "Quinn Tester"]


def test_unknown_option_kind_is_422(client, staff_headers):
    assert client.get(f"{API}/users/options/manager", headers=staff_headers).status_code == 422
