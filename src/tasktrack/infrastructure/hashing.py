"""bcrypt implementation of the password hashing contract."""

from __future__ import annotations

import bcrypt

# bcrypt's accepted cost range
MIN_ROUNDS = 4
MAX_ROUNDS = 31


class BcryptHasher:
    """Salted bcrypt hashes; the salt and cost are embedded in the hash."""

    def __init__(self, rounds: int = 12) -> None:
        if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            msg = f"bcrypt rounds must be in [{MIN_ROUNDS}, {MAX_ROUNDS}], got {rounds}"
            raise ValueError(msg)
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """Check *plaintext* against *password_hash*; malformed hashes never match."""
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False
