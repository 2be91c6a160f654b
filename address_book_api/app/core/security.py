"""
Security helpers for password hashing and JWT authentication.

Passwords are hashed with bcrypt through passlib's ``CryptContext``.
Access tokens are HS256 JSON Web Tokens issued and verified with
python-jose.  Tokens embed the user's email (as both ``sub`` and
``email``), the issuer, the audience and an expiration timestamp.  The
signing secret comes from ``Settings.secret_key``.

``get_current_user`` is a FastAPI dependency for routes that require a
bearer token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password with a per-password random salt (bcrypt)."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored bcrypt hash.

    Returns ``False`` for a missing or unrecognised hash instead of
    raising, so callers can treat every mismatch the same way.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


class TokenService:
    """Issue and verify signed access tokens."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.secret_key
        self.algorithm = settings.algorithm
        self.issuer = settings.jwt_issuer
        self.audience = settings.jwt_audience
        self.expire_minutes = settings.access_token_expire_minutes

    def create_access_token(
        self,
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a signed JWT with the given claims.

        Parameters
        ----------
        data : dict
            Claims to embed in the token (e.g. ``{"sub": "user@example.com"}``).
        expires_delta : Optional[timedelta]
            Lifetime of the token.  Defaults to
            ``access_token_expire_minutes`` from the settings.

        Returns
        -------
        str
            The encoded token.  Clients send it back as
            ``Authorization: Bearer <token>``.
        """
        now = datetime.now(timezone.utc)
        to_encode = data.copy()
        to_encode.update(
            {
                "iat": now,
                "exp": now + (expires_delta or timedelta(minutes=self.expire_minutes)),
                "iss": self.issuer,
                "aud": self.audience,
            }
        )
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify a token and return its claims, or ``None`` if invalid.

        Signature, expiry, issuer and audience are all checked.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as exc:
            logger.debug("Rejected access token: %s", exc)
            return None


security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Dependency that returns the claims of the presented bearer token.

    If the request has no ``Authorization`` header or the token is
    invalid or expired, an HTTP 401 error is raised.  Tokens are
    stateless, so no database lookup happens here.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = token_service.decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload
