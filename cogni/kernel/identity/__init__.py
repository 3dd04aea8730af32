"""
Identity Core - credentials and access tokens.
"""

from cogni.kernel.identity.password import PasswordHasher, verify_password, hash_password
from cogni.kernel.identity.jwt import JWTManager, AccessTokenPayload, get_jwt_manager
from cogni.kernel.identity.identity_service import CredentialRecord, IdentityService, normalize_email

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "AccessTokenPayload",
    "get_jwt_manager",
    "CredentialRecord",
    "IdentityService",
    "normalize_email",
]
