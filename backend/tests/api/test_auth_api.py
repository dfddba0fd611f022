"""POST /jwt and bearer-token resolution.

Invariants:
    - Federated mode: a verified identity token for a known user yields a session token
    - Email-only mode is refused unless explicitly enabled
    - Missing, malformed or tampered bearer tokens yield 401
"""

from app.utils.security import decode_token


async def test_identity_token_is_exchanged_for_session_token(client, make_user, verifier, settings):
    await make_user("alice@example.com", role="volunteer")
    verifier.tokens["firebase-token"] = "alice@example.com"

    res = await client.post("/jwt", json={"idToken": "firebase-token"})

    assert res.status_code == 200
    claims = decode_token(res.json()["token"], settings=settings)
    assert claims["email"] == "alice@example.com"
    assert claims["role"] == "volunteer"


async def test_invalid_identity_token_is_rejected(client, make_user):
    await make_user("alice@example.com")
    res = await client.post("/jwt", json={"idToken": "forged"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"


async def test_identity_token_for_unknown_user_is_rejected(client, verifier):
    verifier.tokens["firebase-token"] = "stranger@example.com"
    res = await client.post("/jwt", json={"idToken": "firebase-token"})
    assert res.status_code == 401


async def test_email_only_login_refused_by_default(client, make_user):
    await make_user("alice@example.com")
    res = await client.post("/jwt", json={"email": "alice@example.com"})
    assert res.status_code == 401


async def test_email_only_login_reports_missing_identity_provider(client, make_user, verifier):
    await make_user("alice@example.com")
    verifier.available = False
    res = await client.post("/jwt", json={"email": "alice@example.com"})
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "UPSTREAM_ERROR"


async def test_email_only_login_when_insecure_mode_enabled(client, make_user, settings):
    await make_user("alice@example.com")
    settings.allow_insecure_email_login = True
    res = await client.post("/jwt", json={"email": "alice@example.com"})
    assert res.status_code == 200
    assert decode_token(res.json()["token"], settings=settings)["email"] == "alice@example.com"


async def test_jwt_requires_a_credential(client):
    res = await client.post("/jwt", json={})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_missing_bearer_token_is_401(client):
    res = await client.get("/users/profile")
    assert res.status_code == 401


async def test_tampered_token_is_401(client, make_user, auth_headers):
    user = await make_user("alice@example.com")
    headers = auth_headers(user)
    headers["Authorization"] = headers["Authorization"][:-3] + "xyz"
    res = await client.get("/users/profile", headers=headers)
    assert res.status_code == 401


async def test_token_for_deleted_user_is_401(client, db, make_user, auth_headers):
    user = await make_user("alice@example.com")
    await db["users"].delete_one({"_id": user["_id"]})
    res = await client.get("/users/profile", headers=auth_headers(user))
    assert res.status_code == 401
