from sqlalchemy.future import select

from storefront.core.security import verify_password
from storefront.db.models import Token, User

from .conftest import auth_headers, create_test_user


def reload_user(db_session, user_id):
    return db_session.execute(
        select(User).filter_by(id=user_id).execution_options(populate_existing=True)
    ).scalar_one()


def test_read_profile(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.get(
        "/api/users/profile", headers=auth_headers(db_session, user)
    )
    assert response.status_code == 200
    profile = response.json()["data"]["user"]
    assert profile["id"] == user.id
    assert profile["lastName"] == "User"
    assert "hashedPassword" not in profile


def test_update_profile(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.put(
        "/api/users/profile",
        json={"firstName": " Ada ", "city": "London", "phone": "+44 20 7946 0958"},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Profile updated successfully"
    profile = body["data"]["user"]
    assert profile["firstName"] == "Ada"
    assert profile["lastName"] == "User"
    assert profile["city"] == "London"
    assert profile["phone"] == "+44 20 7946 0958"


def test_update_profile_invalid_phone(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.put(
        "/api/users/profile",
        json={"phone": "call me"},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 400
    assert response.json()["details"][0] == {
        "field": "phone",
        "message": "Please provide a valid phone number",
        "value": "call me",
    }


def test_update_profile_email_in_use(test_client, db_session):
    user, _ = create_test_user(db_session)
    create_test_user(db_session, email="taken@example.com")
    response = test_client.put(
        "/api/users/profile",
        json={"email": "Taken@example.com"},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Email already in use"}


def test_update_profile_keeps_own_email(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.put(
        "/api/users/profile",
        json={"email": user.email},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 200


def test_change_password(test_client, db_session):
    user, password = create_test_user(db_session)
    headers = auth_headers(db_session, user)

    response = test_client.put(
        "/api/users/password",
        json={"currentPassword": password, "newPassword": "brand-new"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Password updated successfully"
    assert verify_password("brand-new", reload_user(db_session, user.id).hashed_password)

    response = test_client.post(
        "/api/auth/login", json={"email": user.email, "password": "brand-new"}
    )
    assert response.status_code == 200


def test_change_password_wrong_current(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.put(
        "/api/users/password",
        json={"currentPassword": "not-it", "newPassword": "brand-new"},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Current password is incorrect"


def test_change_password_too_short(test_client, db_session):
    user, password = create_test_user(db_session)
    response = test_client.put(
        "/api/users/password",
        json={"currentPassword": password, "newPassword": "abc"},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "newPassword"


def test_delete_account(test_client, db_session):
    user, password = create_test_user(db_session)
    headers = auth_headers(db_session, user)
    auth_headers(db_session, user)

    response = test_client.request(
        "DELETE", "/api/users/account", json={"password": password}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Account deactivated successfully"

    assert reload_user(db_session, user.id).is_active is False
    tokens = db_session.execute(
        select(Token).filter_by(user_id=user.id).execution_options(populate_existing=True)
    ).scalars().all()
    assert len(tokens) == 2
    assert not any(token.is_active for token in tokens)

    response = test_client.get("/api/users/profile", headers=headers)
    assert response.status_code == 401
    response = test_client.post(
        "/api/auth/login", json={"email": user.email, "password": password}
    )
    assert response.status_code == 401


def test_delete_account_wrong_password(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.request(
        "DELETE",
        "/api/users/account",
        json={"password": "not-it"},
        headers=auth_headers(db_session, user),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Incorrect password"
    assert reload_user(db_session, user.id).is_active is True


def test_delete_account_requires_password(test_client, db_session):
    user, _ = create_test_user(db_session)
    headers = auth_headers(db_session, user)

    for body in ({}, {"password": ""}):
        response = test_client.request(
            "DELETE", "/api/users/account", json=body, headers=headers
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Password confirmation is required to delete account",
        }

    response = test_client.delete("/api/users/account", headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == (
        "Password confirmation is required to delete account"
    )
    assert reload_user(db_session, user.id).is_active is True
