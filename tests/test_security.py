from datetime import timedelta

from animez.core.security import (
    create_access_token, get_password_hash, verify_password, verify_token
)


def test_password_hash_round_trip():
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_user_id():
    token = create_access_token({"user_id": "abc", "email": "a@example.com"})

    payload = verify_token(token)

    assert payload["user_id"] == "abc"


def test_expired_and_garbage_tokens_are_rejected():
    expired = create_access_token({"user_id": "abc"}, expires_delta=timedelta(minutes=-1))

    assert verify_token(expired) is None
    assert verify_token("not-a-token") is None
