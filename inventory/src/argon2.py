from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

passwordHasher = PasswordHasher(encoding="utf-8")


def makePassword(password: str) -> str:
    """Hash a plain-text executive password with Argon2id."""
    return passwordHasher.hash(password)


def checkPassword(password: str, passwordHash: str) -> bool:
    """
    Verify a plain-text password against the stored Argon2 hash.

    A malformed stored hash is treated as a mismatch so that login
    fails with invalid credentials instead of a server error.
    """
    try:
        return passwordHasher.verify(passwordHash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def needsRehash(passwordHash: str) -> bool:
    """Whether the stored hash was made with outdated Argon2 parameters."""
    return passwordHasher.check_needs_rehash(passwordHash)
