"""
Password hashing utilities using bcrypt.
"""

import bcrypt

# Number of rounds for bcrypt hashing (12 is secure default)
BCRYPT_ROUNDS = 12


class PasswordHasher:
    """Password hashing service."""

    rounds = BCRYPT_ROUNDS

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """bcrypt only uses the first 72 bytes of a password."""
        return password.encode('utf-8')[:72]

    @classmethod
    def hash(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=cls.rounds)
        return bcrypt.hashpw(cls._truncate_password(password), salt).decode('utf-8')

    @classmethod
    def verify(cls, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(
                cls._truncate_password(plain_password),
                hashed_password.encode('utf-8'),
            )
        except ValueError:
            return False


def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher.verify(plain_password, hashed_password)
