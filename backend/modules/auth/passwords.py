"""
Password hashing with bcrypt.

The cost factor comes from settings (BCRYPT_ROUNDS, default 12).
"""

from typing import Optional

import bcrypt

# bcrypt only reads the first 72 bytes of a password.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """Hashes and verifies passwords with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: Optional[bytes] = None

    def hash(self, password: str) -> str:
        """Hash a plaintext password with a fresh salt."""
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a plaintext against a stored hash."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
        except ValueError:
            # Malformed stored hash
            return False

    def dummy_verify(self, password: str) -> None:
        """
        Spend the same time as verify() against a throwaway hash.

        Used when the account does not exist, so login latency does not
        reveal whether an email is registered.
        """
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=self.rounds))
        bcrypt.checkpw(_encode(password), self._dummy_hash)
