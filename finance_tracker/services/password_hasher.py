"""
Password hashing with bcrypt.

The stored hash embeds its own salt and cost factor, so
verification needs nothing but the hash string. Raising the
cost later only affects newly created hashes.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Throwaway hash for equalizing work when no account matched
        self._dummy_hash = self.hash("not-a-real-password")

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Returns False instead of raising when the hash is malformed
        or the password is outside what bcrypt accepts. Passwords
        longer than MAX_PASSWORD_BYTES never match, since bcrypt would
        compare only their first 72 bytes.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, password: str) -> None:
        """Spend the same effort as a real verification, then discard it."""
        self.verify(password, self._dummy_hash)
