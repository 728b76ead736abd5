"""JWT utilities: RS256 keypair management, token signing and verification"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import status
from jose import JWTError, jwt

from zenovia.config import Settings
from zenovia.errors import APIError
from zenovia.utils.logger import logger


class TokenIssuer:
    """Signs and verifies admin access tokens with one RSA keypair"""

    def __init__(self, settings: Settings) -> None:
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_seconds = settings.JWT_EXPIRE_SECONDS
        self.key_id = settings.JWT_KEY_ID
        self._configured_pem = settings.JWT_PRIVATE_KEY
        self._private_key: Any = None
        self._public_key: Any = None

    def _load_keypair(self) -> None:
        """Load the RSA keypair from JWT_PRIVATE_KEY, or generate one.

        A generated key only lives as long as the process, so every token is
        invalidated on restart.
        """
        if self._configured_pem:
            self._private_key = serialization.load_pem_private_key(
                self._configured_pem.encode(), password=None
            )
            logger.info("JWT keypair loaded from JWT_PRIVATE_KEY setting")
        else:
            self._private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
            logger.warning(
                "JWT_PRIVATE_KEY not set, auto-generated RSA-2048 keypair for this process. "
                "All admin tokens will be invalidated on restart."
            )
        self._public_key = self._private_key.public_key()

    @property
    def private_key(self) -> Any:
        if self._private_key is None:
            self._load_keypair()
        return self._private_key

    @property
    def public_key(self) -> Any:
        if self._public_key is None:
            self._load_keypair()
        return self._public_key

    def create_access_token(self, subject: str, extra_claims: Optional[Dict[str, Any]] = None) -> str:
        """Sign and return an admin JWT for ``subject`` (the admin id)"""
        now = int(datetime.now(timezone.utc).timestamp())
        payload: Dict[str, Any] = {
            "sub": subject,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + self.expire_seconds,
            "type": "admin",
            **(extra_claims or {}),
        }
        headers = {"kid": self.key_id} if self.key_id else None
        return jwt.encode(payload, self.private_key, algorithm=self.algorithm, headers=headers)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Verify signature, expiry and token type; return the payload.

        Raises:
            APIError 401: on any verification failure.
        """
        unauthorized = APIError(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(token, self.public_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.debug(f"JWT decode failed: {exc}")
            raise unauthorized

        if payload.get("type") != "admin" or not payload.get("sub"):
            raise unauthorized
        return payload
