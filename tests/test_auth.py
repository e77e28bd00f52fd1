import pytest

BASE_URL = "/api/v1/auth"
EMAIL = "newstudent@cgu-odisha.ac.in"
PASSWORD = "secret123"


def test_signup(client, fake_supabase):
    resp = client.post(f"{BASE_URL}/signup", json={
        "email": EMAIL, "password": PASSWORD, "confirm_password": PASSWORD
    })
    assert resp.status_code == 201
    assert resp.json()["message"] == "Account created! Please check your email to verify your account."
    assert fake_supabase.auth.passwords[EMAIL] == PASSWORD


@pytest.mark.parametrize("payload,detail", [
    ({"email": "student@gmail.com", "password": PASSWORD, "confirm_password": PASSWORD},
     "Only CGU Odisha email addresses are allowed"),
    ({"email": EMAIL, "password": PASSWORD, "confirm_password": "different"},
     "Passwords do not match"),
    ({"email": EMAIL, "password": "12345", "confirm_password": "12345"},
     "Password must be at least 6 characters"),
])
def test_signup_rejected_locally(client, fake_supabase, payload, detail):
    resp = client.post(f"{BASE_URL}/signup", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"] == detail
    assert fake_supabase.calls == []


def test_signup_already_registered(client):
    resp = client.post(f"{BASE_URL}/signup", json={
        "email": "student@cgu-odisha.ac.in", "password": PASSWORD, "confirm_password": PASSWORD
    })
    assert resp.status_code == 400
    assert resp.json()["detail"] == "This email is already registered. Please try logging in instead."


def test_signup_network_error(client, fake_supabase):
    fake_supabase.failures[("auth", "sign_up")] = "network request failed"
    resp = client.post(f"{BASE_URL}/signup", json={
        "email": EMAIL, "password": PASSWORD, "confirm_password": PASSWORD
    })
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Network error. Please check your connection and try again."


def test_signup_other_errors_pass_through(client, fake_supabase):
    fake_supabase.failures[("auth", "sign_up")] = "Signups not allowed for this instance"
    resp = client.post(f"{BASE_URL}/signup", json={
        "email": EMAIL, "password": PASSWORD, "confirm_password": PASSWORD
    })
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Signups not allowed for this instance"


def test_login(client):
    resp = client.post(f"{BASE_URL}/login", json={
        "email": "student@cgu-odisha.ac.in", "password": "secret123"
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["access_token"] == "token-student"
    assert body["token_type"] == "bearer"


def test_login_wrong_password(client):
    resp = client.post(f"{BASE_URL}/login", json={
        "email": "student@cgu-odisha.ac.in", "password": "nope-nope"
    })
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid login credentials"


def test_me_requires_token(client):
    resp = client.get(f"{BASE_URL}/me")
    assert resp.status_code in (401, 403)


def test_me_with_invalid_token(client):
    resp = client.get(f"{BASE_URL}/me", headers={"Authorization": "Bearer not-a-session"})
    assert resp.status_code == 401


def test_me(client, auth_headers):
    resp = client.get(f"{BASE_URL}/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "student@cgu-odisha.ac.in"


def test_logout_forgets_session(client, auth_headers):
    assert client.get(f"{BASE_URL}/me", headers=auth_headers).status_code == 200
    resp = client.post(f"{BASE_URL}/logout", headers=auth_headers)
    assert resp.status_code == 200
    assert client.get(f"{BASE_URL}/me", headers=auth_headers).status_code == 401


def test_forgot_password(client, fake_supabase):
    resp = client.post(f"{BASE_URL}/forgot-password", json={"email": "student@cgu-odisha.ac.in"})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Password reset link sent to your email"
    assert fake_supabase.auth.reset_requests[0][0] == "student@cgu-odisha.ac.in"


def test_forgot_password_rejects_other_domains(client, fake_supabase):
    resp = client.post(f"{BASE_URL}/forgot-password", json={"email": "student@gmail.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only CGU Odisha email addresses are allowed"
    assert fake_supabase.calls == []
