from sqlalchemy.future import select

from storefront.core.security import verify_password
from storefront.crud import token as token_crud
from storefront.db.models import Cart, Token, User

from .conftest import auth_headers, create_test_user


REGISTRATION = {
    "email": "New.User@Example.com",
    "password": "secret1",
    "firstName": "New",
    "lastName": "User",
    "city": "Lagos",
}


def test_register(test_client, db_session):
    response = test_client.post("/api/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert user["email"] == "new.user@example.com"
    assert user["firstName"] == "New"
    assert user["role"] == "USER"
    assert user["isActive"] is True
    assert "password" not in user
    assert "hashedPassword" not in user
    assert body["data"]["token"]

    db_user = db_session.execute(
        select(User).filter_by(email="new.user@example.com")
    ).scalar_one()
    assert verify_password("secret1", db_user.hashed_password)
    cart = db_session.execute(select(Cart).filter_by(user_id=db_user.id)).scalar_one()
    assert cart.items == []


def test_register_ignores_role(test_client):
    response = test_client.post(
        "/api/auth/register", json={**REGISTRATION, "role": "ADMIN"}
    )
    assert response.status_code == 201
    assert response.json()["data"]["user"]["role"] == "USER"


def test_register_duplicate_email(test_client, db_session):
    create_test_user(db_session, email="new.user@example.com")
    response = test_client.post("/api/auth/register", json=REGISTRATION)
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "User already exists with this email",
    }


def test_register_validation(test_client):
    response = test_client.post(
        "/api/auth/register",
        json={**REGISTRATION, "password": "123", "firstName": "  "},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    messages = {detail["field"]: detail["message"] for detail in body["details"]}
    assert messages["password"] == "Password must be at least 6 characters long"
    assert messages["firstName"] == "First name is required"


def test_login(test_client, db_session):
    user, password = create_test_user(db_session)
    response = test_client.post(
        "/api/auth/login", json={"email": user.email, "password": password}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["id"] == user.id

    headers = {"Authorization": f"Bearer {body['data']['token']}"}
    response = test_client.get("/api/auth/me", headers=headers)
    assert response.status_code == 200


def test_login_is_case_insensitive_on_email(test_client, db_session):
    user, password = create_test_user(db_session)
    response = test_client.post(
        "/api/auth/login", json={"email": user.email.upper(), "password": password}
    )
    assert response.status_code == 200


def test_login_invalid_credentials(test_client, db_session):
    user, _ = create_test_user(db_session)
    for credentials in (
        {"email": user.email, "password": "wrongpassword"},
        {"email": "nobody@example.com", "password": "testpassword"},
    ):
        response = test_client.post("/api/auth/login", json=credentials)
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}


def test_login_inactive_user(test_client, db_session):
    user, password = create_test_user(db_session, is_active=False)
    response = test_client.post(
        "/api/auth/login", json={"email": user.email, "password": password}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_read_me(test_client, db_session):
    user, _ = create_test_user(db_session)
    response = test_client.get("/api/auth/me", headers=auth_headers(db_session, user))
    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == user.email


def test_read_me_unauthenticated(test_client):
    response = test_client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_read_me_inactive_user(test_client, db_session):
    user, _ = create_test_user(db_session, is_active=False)
    response = test_client.get("/api/auth/me", headers=auth_headers(db_session, user))
    assert response.status_code == 401
    assert response.json()["error"] == "This user is currently inactive"


def test_logout_revokes_token(test_client, db_session):
    user, _ = create_test_user(db_session)
    headers = auth_headers(db_session, user)

    response = test_client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"

    tokens = db_session.execute(
        select(Token).filter_by(user_id=user.id).execution_options(populate_existing=True)
    ).scalars().all()
    assert [token.is_active for token in tokens] == [False]

    response = test_client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"] == "Not authorized to access this route"


def test_token_of_other_user_is_rejected(test_client, db_session):
    user, _ = create_test_user(db_session)
    other, _ = create_test_user(db_session, email="other@example.com")
    headers = auth_headers(db_session, user)
    # Rebind the stored jti to another account
    token = db_session.execute(select(Token).filter_by(user_id=user.id)).scalar_one()
    token.user_id = other.id
    db_session.commit()

    response = test_client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert token_crud.get_token(db_session, token.jti) is not None
