"""JWT token generation and validation

Tokens are issued by the identity service; this backend only needs to
validate them. create_access_token exists for operators (seed script) and
for tests.

JWT Token Claims Structure:
====================================

Standard JWT Claims:
- sub (Subject): User ID as UUID string
- iat (Issued At): Unix timestamp when token was created
- exp (Expiration): Unix timestamp when token expires

Custom Claims:
- is_admin: Whether the user reviews/generates declarations
- email: User's email address

Security Properties:
- Algorithm: HS256 (HMAC-SHA256 symmetric signing)
- Secret: JWT_SECRET environment variable
- Stateless validation; the user row is still loaded per request

Example Token Payload:
{
  "sub": "550e8400-e29b-41d4-a716-446655440000",
  "is_admin": false,
  "email": "aluno@escola.org.br",
  "iat": 1704368400,
  "exp": 1704372000
}
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from uuid import UUID
import jwt

from config import get_settings

ALGORITHM = 'HS256'


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from environment, falling back to settings.

    Raises:
        ValueError: If no secret is configured
    """
    secret = os.getenv('JWT_SECRET') or get_settings().JWT_SECRET
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def _get_jwt_expiry_minutes() -> int:
    """Get JWT_EXPIRY_MINUTES from environment (default: settings value)."""
    expiry = os.getenv('JWT_EXPIRY_MINUTES')
    if expiry is None:
        return get_settings().JWT_EXPIRY_MINUTES
    try:
        return int(expiry)
    except ValueError:
        return 60


def create_access_token(
    user_id: UUID,
    is_admin: bool,
    email: str
) -> str:
    """Create a JWT access token for a user.

    Args:
        user_id: User's UUID
        is_admin: Admin flag of the user
        email: User's email address

    Returns:
        str: Signed JWT token
    """
    secret = _get_jwt_secret()
    expiry_minutes = _get_jwt_expiry_minutes()

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=expiry_minutes)

    payload = {
        'sub': str(user_id),
        'is_admin': bool(is_admin),
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload with claims

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    secret = _get_jwt_secret()
    return jwt.decode(token, secret, algorithms=[ALGORITHM])
