"""
Notes Backend: Security Primitive Tests
==========================================

What:  Password hashing and session token tests.

What we test:
    ✅ bcrypt hashes are salted and verify only the right password
    ✅ Garbage hashes fail verification instead of raising
    ✅ Tokens carry sub/email/iat/exp with the configured lifetime
    ✅ Expired, tampered and foreign-key tokens are rejected
    ✅ The development fallback key warns exactly once
"""

import logging
from datetime import timedelta
from unittest.mock import patch

from jose import jwt

from notes_backend import security, utils
from notes_backend.config import settings
from notes_backend.security import (
    DEV_FALLBACK_SECRET,
    create_access_token,
    decode_access_token,
    get_signing_key,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_salted_bcrypt(self):
        first = hash_password("secret123")
        second = hash_password("secret123")

        assert first != second
        assert first.startswith("$2")
        assert "secret123" not in first

    def test_verify(self):
        hashed = hash_password("secret123")
        assert verify_password("secret123", hashed) is True
        assert verify_password("secret124", hashed) is False

    def test_unparseable_hash_is_rejected(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestAccessTokens:

    def test_payload_claims(self):
        token = create_access_token("user-1", "alice@example.com")
        payload = decode_access_token(token)

        assert payload["sub"] == "user-1"
        assert payload["email"] == "alice@example.com"
        lifetime = payload["exp"] - payload["iat"]
        assert lifetime == int(timedelta(days=settings.token_expiry_days).total_seconds())

    def test_expired_token(self):
        issued = utils.utcnow() - timedelta(days=settings.token_expiry_days + 1)
        with patch("notes_backend.utils.utcnow", return_value=issued):
            token = create_access_token("user-1", "alice@example.com")

        assert decode_access_token(token) is None

    def test_tampered_token(self):
        token = create_access_token("user-1", "alice@example.com")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        assert decode_access_token(tampered) is None

    def test_token_signed_with_other_key(self):
        token = jwt.encode({"sub": "user-1"}, "some-other-key", algorithm="HS256")
        assert decode_access_token(token) is None

    def test_garbage(self):
        assert decode_access_token("not.a.token") is None


class TestSigningKeyFallback:

    def test_configured_secret_is_used(self):
        assert get_signing_key() == settings.jwt_secret

    def test_fallback_warns_once(self, monkeypatch, caplog):
        monkeypatch.setattr(settings, "jwt_secret", "")
        monkeypatch.setattr(security, "_fallback_warned", False)

        with caplog.at_level(logging.WARNING, logger="notes_backend.security"):
            assert get_signing_key() == DEV_FALLBACK_SECRET
            assert get_signing_key() == DEV_FALLBACK_SECRET
            token = create_access_token("user-1", "alice@example.com")

        warnings = [r for r in caplog.records if "JWT_SECRET not set" in r.getMessage()]
        assert len(warnings) == 1
        assert decode_access_token(token)["sub"] == "user-1"
