"""Authentication infrastructure: password hashing, JWT and auth providers."""

from collabportal.infrastructure.auth.auth_provider import (
    AuthProvider,
    AuthProviderError,
    AuthUserExistsError,
)
from collabportal.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTError,
    JWTService,
    TokenExpiredError,
    jwt_service,
)
from collabportal.infrastructure.auth.local_auth_provider import LocalAuthProvider
from collabportal.infrastructure.auth.password_hasher import hash_password, verify_password

__all__ = [
    "AuthProvider",
    "AuthProviderError",
    "AuthUserExistsError",
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "LocalAuthProvider",
    "TokenExpiredError",
    "hash_password",
    "jwt_service",
    "verify_password",
]
