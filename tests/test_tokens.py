"""Unit tests for auth/tokens.py -- password hashing, tokens, and login.

Covers:
- hash_password() salts per call and round-trips through verify_password()
- verify_password() treats malformed digests as a non-match, never raising
- generate_token() yields 64-char hex tokens with no repeats
- authenticate_user() success, wrong password, unknown email
"""

from __future__ import annotations

import string

from auth.tokens import authenticate_user, generate_token, hash_password, verify_password


class TestPasswordHashing:
    def test_hash_verifies(self) -> None:
        digest = hash_password("correct horse")
        assert verify_password("correct horse", digest)

    def test_wrong_password_rejected(self) -> None:
        digest = hash_password("correct horse")
        assert not verify_password("battery staple", digest)

    def test_salt_differs_per_call(self) -> None:
        """Same plaintext, different digests -- the salt is embedded in each."""
        assert hash_password("pw1") != hash_password("pw1")

    def test_digest_is_not_plaintext(self) -> None:
        digest = hash_password("pw1")
        assert "pw1" not in digest
        assert digest.startswith("$2")

    def test_explicit_rounds_embedded_in_digest(self) -> None:
        digest = hash_password("pw1", rounds=5)
        assert digest.split("$")[2] == "05"

    def test_malformed_digest_is_non_match(self) -> None:
        assert verify_password("pw1", "not-a-bcrypt-digest") is False
        assert verify_password("pw1", "") is False


class TestGenerateToken:
    def test_token_is_64_hex_chars(self) -> None:
        token = generate_token()
        assert len(token) == 64
        assert set(token) <= set(string.hexdigits.lower())

    def test_tokens_do_not_repeat(self) -> None:
        tokens = {generate_token() for _ in range(200)}
        assert len(tokens) == 200


class TestAuthenticateUser:
    def test_valid_credentials_return_user(self, user_store) -> None:
        created = user_store.create_user("a@x.com", hash_password("pw1"))
        user = authenticate_user(user_store, "a@x.com", "pw1")
        assert user is not None
        assert user.id == created.id

    def test_wrong_password_returns_none(self, user_store) -> None:
        user_store.create_user("a@x.com", hash_password("pw1"))
        assert authenticate_user(user_store, "a@x.com", "pw2") is None

    def test_unknown_email_returns_none(self, user_store) -> None:
        assert authenticate_user(user_store, "nobody@x.com", "pw1") is None

    def test_email_match_is_case_sensitive(self, user_store) -> None:
        user_store.create_user("a@x.com", hash_password("pw1"))
        assert authenticate_user(user_store, "A@X.com", "pw1") is None
