"""
Tests for bcrypt hashing and access tokens
"""
from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token, decode_token, get_password_hash, verify_password


class TestPasswordHashing:

    @pytest.mark.parametrize("password", [
        "testpassword123",
        "密码pässwörd🔐",
        "a" * 100,
    ])
    def test_hash_verifies(self, password):
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")
        assert verify_password(password, hashed) is True

    def test_hashes_are_salted(self):
        assert get_password_hash("same-password") != get_password_hash("same-password")

    def test_wrong_password_fails(self):
        assert verify_password("wrongpassword", get_password_hash("testpassword123")) is False

    def test_only_first_72_bytes_count(self):
        hashed = get_password_hash("b" * 72 + "tail")

        assert verify_password("b" * 72 + "different tail", hashed) is True


class TestAccessToken:
    """create_access_token / decode_token"""

    def test_token_carries_subject_and_type(self):
        token = create_access_token({"sub": "user-123", "email": "a@b.com"})
        payload = decode_token(token)

        assert payload["sub"] == "user-123"
        assert payload["email"] == "a@b.com"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_custom_expiry(self):
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(minutes=5))
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        remaining = datetime.utcfromtimestamp(payload["exp"]) - datetime.utcnow()
        assert timedelta(minutes=4) < remaining <= timedelta(minutes=5)

    def test_does_not_mutate_input(self):
        data = {"sub": "user-123"}
        create_access_token(data)

        assert data == {"sub": "user-123"}

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_tampered_token_rejected(self):
        token = create_access_token({"sub": "user-123"})

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token + "x")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Could not validate credentials"

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode({"sub": "user-123"}, "another-key", algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401
