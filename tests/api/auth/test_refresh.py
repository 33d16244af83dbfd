from datetime import timedelta
from models.refresh_tokens import RefreshToken
from services.token_service import TokenService
from utils.dates import utcnow
from tests.conftest import TEST_PASSWORD


async def login(client, user):
    response = await client.post("/auth/login", json={
        "email": user.email,
        "password": TEST_PASSWORD
    })
    assert response.status_code == 200
    return response.json()


async def test_refresh_token_success(client, verified_user):
    """Test successful token refresh with valid refresh token."""
    old_tokens = await login(client, verified_user)

    response = await client.post("/auth/refresh", json={
        "refresh_token": old_tokens["refresh_token"]
    })

    assert response.status_code == 200
    new_tokens = response.json()
    assert new_tokens["refresh_token"] != old_tokens["refresh_token"]

    payload = TokenService.decode_access_token(new_tokens["access_token"])
    assert payload["id"] == verified_user.id
    assert any(c.startswith("refresh_token=") for c in response.headers.get_list("set-cookie"))


async def test_refresh_token_rotation(client, verified_user, session):
    """Old refresh token is soft-deleted after a successful refresh."""
    old_refresh_token = (await login(client, verified_user))["refresh_token"]

    response = await client.post("/auth/refresh", json={"refresh_token": old_refresh_token})
    assert response.status_code == 200

    response = await client.post("/auth/refresh", json={"refresh_token": old_refresh_token})
    assert response.status_code == 401

    old_row = session.query(RefreshToken).filter(RefreshToken.token == old_refresh_token).one()
    assert old_row.deleted_at is not None


async def test_refresh_from_cookie(client, verified_user):
    tokens = await login(client, verified_user)
    client.cookies.set("refresh_token", tokens["refresh_token"])

    response = await client.post("/auth/refresh")

    assert response.status_code == 200


async def test_refresh_expired_token(client, verified_user, session):
    tokens = await login(client, verified_user)
    row = session.query(RefreshToken).filter(RefreshToken.token == tokens["refresh_token"]).one()
    row.expired_at = utcnow() - timedelta(seconds=1)
    session.commit()

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 401
    assert "expired" in response.json()["detail"].lower()


async def test_refresh_unknown_token(client):
    response = await client.post("/auth/refresh", json={"refresh_token": "invalid_token_format"})

    assert response.status_code == 401


async def test_refresh_missing_token(client):
    response = await client.post("/auth/refresh")

    assert response.status_code == 401
    assert "missing" in response.json()["detail"].lower()


async def test_refresh_empty_token(client):
    response = await client.post("/auth/refresh", json={"refresh_token": ""})

    # Pydantic validation error
    assert response.status_code == 422
