"""Invitation token codec.

A token is ``<invite_id>.<user_id>.<secret>``. Only a SHA-256 hash of the
secret is stored; the token itself is handed out once and never persisted.
"""

import hashlib
import hmac
import secrets

from access.domain.error import MalformedTokenError
from access.domain.value import InviteId, UserId
from access.domain.value.common import ValueObject

from .base import Service

TOKEN_SEPARATOR = "."

# 32 random bytes, base64url encoded without padding (no '.' in the alphabet)
SECRET_BYTES = 32


class GeneratedToken(ValueObject):
    """A freshly minted token and the hash to store for it."""

    token: str
    secret_hash: str


class ParsedToken(ValueObject):
    """The three segments of a presented token."""

    invite_id: InviteId
    user_id: UserId
    secret: str


class InviteTokenCodec(Service):
    """Mint, parse and verify invitation tokens."""

    def generate(self, invite_id: InviteId, user_id: UserId) -> GeneratedToken:
        """Mint a bearer token for an invitation.

        Args:
            invite_id: Invitation the token redeems
            user_id: Directory user the invitation is stored on

        Returns:
            The raw token and the hash of its secret
        """
        if TOKEN_SEPARATOR in invite_id or TOKEN_SEPARATOR in user_id:
            raise ValueError("Identifiers must not contain the token separator")

        secret = secrets.token_urlsafe(SECRET_BYTES)
        token = TOKEN_SEPARATOR.join((invite_id, user_id, secret))
        return GeneratedToken(token=token, secret_hash=self.hash_secret(secret))

    def parse(self, token: str) -> ParsedToken:
        """Split a token into its segments.

        Raises:
            MalformedTokenError: Unless the token is ASCII with exactly three
                non-empty segments
        """
        # Minted tokens are ASCII only
        if not token.isascii():
            raise MalformedTokenError()

        parts = token.strip().split(TOKEN_SEPARATOR)
        if len(parts) != 3 or not all(parts):
            raise MalformedTokenError()

        invite_id, user_id, secret = parts
        return ParsedToken(
            invite_id=InviteId(invite_id), user_id=UserId(user_id), secret=secret
        )

    def verify(self, secret: str, stored_hash: str) -> bool:
        """Check a presented secret against a stored hash in constant time.

        Args:
            secret: Secret segment of the presented token
            stored_hash: Hash recorded when the token was minted

        Returns:
            True iff the secret is the one the hash was made from
        """
        actual = self.hash_secret(secret).encode("ascii")
        expected = stored_hash.encode("utf-8")

        if len(actual) != len(expected):
            # Same amount of work as a real comparison, then reject
            hmac.compare_digest(actual, actual)
            return False

        return hmac.compare_digest(actual, expected)

    @staticmethod
    def hash_secret(secret: str) -> str:
        """SHA-256 hex digest of a secret."""
        return hashlib.sha256(secret.encode("utf-8")).hexdigest()
