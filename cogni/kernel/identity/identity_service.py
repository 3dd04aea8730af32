"""
Credential directory - registration and authentication against the user store.
"""

from typing import Dict, Iterable, Optional, Union

from pydantic import BaseModel

from cogni.domain.errors import AuthFailure, DuplicateEmailError
from cogni.domain.user import PRIVILEGED_DEFAULT_LEVEL, User, UserRole
from cogni.kernel.identity.password import hash_password, verify_password


def normalize_email(email: str) -> str:
    return email.lower().strip()


class CredentialRecord(BaseModel):
    """A user profile plus its password hash, as kept in the users document."""

    user: User
    password_hash: str


class IdentityService:
    """
    Registration and authentication over a set of credential records.

    The service never writes anything itself; `register` returns the new record
    and the caller commits it.
    """

    def __init__(self, records: Iterable[CredentialRecord]):
        self._by_email: Dict[str, CredentialRecord] = {
            normalize_email(r.user.email): r for r in records
        }

    def get_by_email(self, email: str) -> Optional[CredentialRecord]:
        return self._by_email.get(normalize_email(email))

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.CITIZEN,
    ) -> CredentialRecord:
        """
        Build a credential record for a new account.

        Citizens start unassessed (level 0); teachers and admins start at
        PRIVILEGED_DEFAULT_LEVEL.

        Raises:
            DuplicateEmailError: If email already exists
        """
        if self.get_by_email(email) is not None:
            raise DuplicateEmailError("Email already registered")

        user = User(
            name=name.strip(),
            email=normalize_email(email),
            role=role,
            level=0 if role == UserRole.CITIZEN else PRIVILEGED_DEFAULT_LEVEL,
            xp=0,
        )
        return CredentialRecord(user=user, password_hash=hash_password(password))

    def authenticate(self, email: str, password: str) -> Union[User, AuthFailure]:
        """Return the user on matching credentials, an AuthFailure otherwise."""
        record = self.get_by_email(email)
        if record is None or not verify_password(password, record.password_hash):
            return AuthFailure(email=normalize_email(email))
        return record.user
