import uuid
from datetime import timedelta

from jose import jwt
from sqlmodel import Session

from nilhub.core.config import get_settings
from nilhub.core.security import issue_token
from nilhub.models.account import Account

ME = "/api/auth/me"


def test_missing_header_is_401(client):
    r = client.get(ME)
    assert r.status_code == 401
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Not authorized: no token provided"


def test_wrong_scheme_is_treated_as_no_token(client, vendor):
    account, _, _ = vendor
    r = client.get(ME, headers={"Authorization": f"Token {issue_token(account.id)}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Not authorized: no token provided"


def test_token_without_three_segments_is_malformed(client):
    r = client.get(ME, headers={"Authorization": "Bearer abc.def"})
    assert r.status_code == 401
    assert r.json()["error"] == "Malformed token"


def test_three_garbage_segments_are_invalid(client):
    r = client.get(ME, headers={"Authorization": "Bearer a.b.c"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid authentication token"


def test_expired_token_gets_expired_message(client, vendor):
    account, _, _ = vendor
    token = issue_token(account.id, expires_delta=timedelta(seconds=-5))
    r = client.get(ME, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert "expired" in r.json()["error"]


def test_tampered_token_is_invalid(client, vendor):
    account, _, _ = vendor
    forged = jwt.encode({"sub": str(account.id)}, "other-secret", algorithm=get_settings().JWT_ALG)
    r = client.get(ME, headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid authentication token"


def test_repeated_bad_tokens_classify_identically(client):
    responses = [client.get(ME, headers={"Authorization": "Bearer a.b.c"}) for _ in range(3)]
    assert {r.status_code for r in responses} == {401}
    assert len({r.json()["error"] for r in responses}) == 1


def test_token_for_unknown_account_is_401(client):
    r = client.get(ME, headers={"Authorization": f"Bearer {issue_token(uuid.uuid4())}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Account not found"


def test_deactivated_account_is_rejected_on_next_request(client, engine, vendor):
    account, _, headers = vendor
    assert client.get(ME, headers=headers).status_code == 200

    with Session(engine) as session:
        row = session.get(Account, account.id)
        row.is_active = False
        session.add(row)
        session.commit()

    r = client.get(ME, headers=headers)
    assert r.status_code == 401
    assert r.json()["error"] == "Account inactive. Contact the administrator."


def test_valid_token_reaches_the_handler(client, vendor):
    account, store, headers = vendor
    r = client.get(ME, headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["account"]["id"] == str(account.id)
    assert data["store"]["slug"] == store.slug
    assert "password_hash" not in data["account"]


def test_401_carries_bearer_challenge(client):
    r = client.get(ME)
    assert r.headers.get("www-authenticate") == "Bearer"
