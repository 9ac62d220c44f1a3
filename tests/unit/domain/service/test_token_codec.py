"""Unit tests for InviteTokenCodec."""

import hashlib
import hmac

import pytest

from access.domain.error import MalformedTokenError
from access.domain.service import InviteTokenCodec
from access.domain.value import InviteId, UserId

INVITE_ID = InviteId("acc_0123456789abcdef0123456789abcdef")
USER_ID = UserId("4f6c2d1e-8a7b-4c3d-9e2f-1a2b3c4d5e6f")


@pytest.fixture
def codec() -> InviteTokenCodec:
    return InviteTokenCodec()


class TestGenerate:
    """Tests for token generation."""

    def test_token_embeds_ids_and_secret(self, codec):
        """Token should be invite id, user id and secret joined by dots."""
        # Act
        generated = codec.generate(INVITE_ID, USER_ID)

        # Assert
        invite_id, user_id, secret = generated.token.split(".")
        assert invite_id == INVITE_ID
        assert user_id == USER_ID
        assert len(secret) >= 43  # 32 bytes, base64url without padding
        assert generated.secret_hash == hashlib.sha256(secret.encode()).hexdigest()

    def test_secrets_are_unique(self, codec):
        """Two tokens for the same invite should never share a secret."""
        # Act
        first = codec.generate(INVITE_ID, USER_ID)
        second = codec.generate(INVITE_ID, USER_ID)

        # Assert
        assert first.token != second.token
        assert first.secret_hash != second.secret_hash

    def test_rejects_ids_containing_separator(self, codec):
        """Ids with a dot would make the token ambiguous."""
        with pytest.raises(ValueError):
            codec.generate(InviteId("acc_1.2"), USER_ID)


class TestParse:
    """Tests for token parsing."""

    def test_parse_generated_token(self, codec):
        """Parsing should recover the parts a token was built from."""
        # Arrange
        generated = codec.generate(INVITE_ID, USER_ID)

        # Act
        parsed = codec.parse(generated.token)

        # Assert
        assert parsed.invite_id == INVITE_ID
        assert parsed.user_id == USER_ID
        assert codec.hash_secret(parsed.secret) == generated.secret_hash

    @pytest.mark.parametrize(
        "token",
        ["", "acc_1", "acc_1.user", "acc_1.user.secret.extra", "acc_1..secret", ".user.secret"],
    )
    def test_malformed_tokens(self, codec, token):
        """Anything other than three non-empty segments is malformed."""
        with pytest.raises(MalformedTokenError):
            codec.parse(token)

    @pytest.mark.parametrize(
        "secret",
        ["s\N{LATIN SMALL LETTER E WITH ACUTE}cret", "\ud800"],
        ids=["accented", "lone-surrogate"],
    )
    def test_non_ascii_tokens_are_malformed(self, codec, secret):
        """Characters a minted token never contains are rejected before hashing."""
        with pytest.raises(MalformedTokenError):
            codec.parse(f"{INVITE_ID}.{USER_ID}.{secret}")


class TestVerify:
    """Tests for secret verification."""

    def test_verify_accepts_original_secret(self, codec):
        """The secret a token was minted with should verify."""
        # Arrange
        generated = codec.generate(INVITE_ID, USER_ID)
        parsed = codec.parse(generated.token)

        # Act & Assert
        assert codec.verify(parsed.secret, generated.secret_hash) is True

    def test_verify_rejects_every_single_character_mutation(self, codec):
        """Changing any one character of the secret should fail verification."""
        # Arrange
        generated = codec.generate(INVITE_ID, USER_ID)
        secret = codec.parse(generated.token).secret

        # Act & Assert
        for position, char in enumerate(secret):
            replacement = "A" if char != "A" else "B"
            mutated = secret[:position] + replacement + secret[position + 1 :]
            assert codec.verify(mutated, generated.secret_hash) is False

    def test_verify_rejects_malformed_stored_hash(self, codec):
        """A stored hash of the wrong length never verifies."""
        assert codec.verify("secret", "deadbeef") is False

    def test_verify_does_the_same_comparison_work_for_every_outcome(
        self, codec, monkeypatch
    ):
        """Verification should do one equal-length constant-time comparison
        whether the secret matches, mismatches or the stored hash is malformed."""
        # Arrange
        calls: list[tuple[int, int]] = []
        real_compare_digest = hmac.compare_digest

        def recording_compare_digest(a, b):
            calls.append((len(a), len(b)))
            return real_compare_digest(a, b)

        monkeypatch.setattr(hmac, "compare_digest", recording_compare_digest)

        generated = codec.generate(INVITE_ID, USER_ID)
        secret = codec.parse(generated.token).secret

        # Act
        codec.verify(secret, generated.secret_hash)
        codec.verify(secret[:-1] + ("A" if secret[-1] != "A" else "B"), generated.secret_hash)
        codec.verify(secret, "short")

        # Assert
        assert calls == [(64, 64), (64, 64), (64, 64)]
