from fastapi.testclient import TestClient

from threadline.core.settings import settings
from threadline.services.session_store import PasswordResetTokens

AUTH_URL = "/api/v1/auth"
PASSWORD = "hunter22"


def _register(client: TestClient, username: str = "carol", email: str = "carol@example.com"):
    return client.post(
        f"{AUTH_URL}/register",
        json={"username": username, "email": email, "password": PASSWORD},
    )


def test_register_signs_in(client: TestClient) -> None:
    response = _register(client)
    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    assert body["user"]["username"] == "carol"
    assert body["user"]["email"] == "carol@example.com"
    assert settings.session_cookie_name in response.cookies

    me = client.get(f"{AUTH_URL}/me").json()
    assert me["id"] == body["user"]["id"]


def test_register_field_errors(client: TestClient) -> None:
    response = client.post(
        f"{AUTH_URL}/register",
        json={"username": "ab", "email": "bad", "password": "x"},
    )
    assert response.status_code == 200
    body = response.json()
    assert "user" not in body
    assert {error["field"] for error in body["errors"]} == {"username", "email", "password"}


def test_register_duplicate(client: TestClient, test_user) -> None:
    body = _register(client, username=test_user.username, email="new@example.com").json()
    assert body["errors"] == [{"field": "username", "message": "username or email already exists"}]


def test_login_by_username_and_email(client: TestClient, test_user) -> None:
    for identifier in (test_user.username, test_user.email):
        response = client.post(
            f"{AUTH_URL}/login",
            json={"usernameOrEmail": identifier, "password": PASSWORD},
        )
        assert response.json()["user"]["id"] == test_user.id


def test_login_errors(client: TestClient, test_user) -> None:
    unknown = client.post(
        f"{AUTH_URL}/login", json={"usernameOrEmail": "ghost", "password": PASSWORD}
    ).json()
    assert unknown["errors"][0]["field"] == "usernameOrEmail"

    wrong = client.post(
        f"{AUTH_URL}/login", json={"usernameOrEmail": test_user.username, "password": "nope!!"}
    ).json()
    assert wrong["errors"][0]["field"] == "password"
    assert client.get(f"{AUTH_URL}/me").json() is None


def test_me_anonymous(client: TestClient) -> None:
    response = client.get(f"{AUTH_URL}/me")
    assert response.status_code == 200
    assert response.json() is None


def test_logout(client: TestClient, test_user, login_as) -> None:
    login_as(test_user)
    assert client.get(f"{AUTH_URL}/me").json()["id"] == test_user.id

    response = client.post(f"{AUTH_URL}/logout")
    assert response.json() is True
    assert client.get(f"{AUTH_URL}/me").json() is None


def test_forgot_and_change_password(client: TestClient, test_user, mailer) -> None:
    assert client.post(f"{AUTH_URL}/forgot-password", json={"email": "nobody@example.com"}).json() is False
    assert client.post(f"{AUTH_URL}/forgot-password", json={"email": test_user.email}).json() is True

    _, html, _ = mailer.sent[-1]
    token = html.split("/change-password/")[1].split('"')[0]

    short = client.post(
        f"{AUTH_URL}/change-password", json={"token": token, "newPassword": "ab"}
    ).json()
    assert short["errors"][0]["field"] == "newPassword"

    changed = client.post(
        f"{AUTH_URL}/change-password", json={"token": token, "newPassword": "brandnew"}
    ).json()
    assert changed["user"]["id"] == test_user.id
    assert client.get(f"{AUTH_URL}/me").json()["id"] == test_user.id

    reused = client.post(
        f"{AUTH_URL}/change-password", json={"token": token, "newPassword": "another"}
    ).json()
    assert reused["errors"] == [{"field": "token", "message": "token expired"}]

    login = client.post(
        f"{AUTH_URL}/login", json={"usernameOrEmail": test_user.username, "password": "brandnew"}
    ).json()
    assert login["user"]["id"] == test_user.id


def test_register_overlong_password_is_field_error(client: TestClient) -> None:
    response = client.post(
        f"{AUTH_URL}/register",
        json={"username": "longpw", "email": "l@x.io", "password": "p" * 80},
    )
    assert response.status_code == 200
    body = response.json()
    assert "user" not in body
    assert body["errors"][0]["field"] == "password"


def test_change_password_overlong_is_field_error(client: TestClient, test_user, kv_store) -> None:
    token = PasswordResetTokens(kv_store).issue(test_user.id)
    response = client.post(
        f"{AUTH_URL}/change-password", json={"token": token, "newPassword": "p" * 80}
    )
    assert response.status_code == 200
    assert response.json()["errors"][0]["field"] == "newPassword"
