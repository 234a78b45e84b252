"""Password hashing contract.

The registries treat hashes as opaque strings: they only ever hand them
back to the same hasher's :meth:`PasswordHasher.verify`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PasswordHasher(Protocol):
    """One-way, salted password hashing."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, password_hash: str, plaintext: str) -> bool: ...
