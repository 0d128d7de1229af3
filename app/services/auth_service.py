"""
Authentication helpers: bearer token verification, password hashing and
API key secrets.

Tokens are issued by the authentication provider. issue_token signs with the
same key and claims and is only used by seeding scripts and tests.
"""
import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings


class AuthService:
    """Verifies bearer tokens and manages password hashes and API key secrets"""

    def __init__(self):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
        self.algorithm = settings.ALGORITHM
        self.secret_key = settings.SECRET_KEY
        self.token_lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # ==================== PASSWORDS ====================

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return self.pwd_context.verify(plain_password, hashed_password)

    # ==================== BEARER TOKENS ====================

    def issue_token(self, user_id: int, lifetime: Optional[timedelta] = None) -> str:
        """Sign a token for user_id (sub claim)"""
        claims = {
            "sub": str(user_id),
            "exp": datetime.utcnow() + (lifetime or self.token_lifetime),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Claims of a valid token; None when the signature or expiry check fails"""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def resolve_user_id(self, token: Optional[str]) -> Optional[int]:
        """Return the user id carried by a bearer token, or None if it is missing/invalid"""
        if not token:
            return None
        claims = self.decode_token(token)
        if not claims:
            return None
        try:
            return int(claims.get("sub"))
        except (TypeError, ValueError):
            return None

    # ==================== API KEYS ====================

    def generate_api_key(self) -> str:
        """Fixed prefix + random hex"""
        return f"{settings.API_KEY_PREFIX}{secrets.token_hex(settings.API_KEY_RANDOM_BYTES)}"

    def hash_api_key(self, api_key: str) -> str:
        """SHA-256 hex digest; the only form of the secret that is stored"""
        return hashlib.sha256(api_key.encode("utf-8")).hexdigest()

    def api_key_prefix(self, api_key: str) -> str:
        return api_key[:settings.API_KEY_VISIBLE_CHARS]

    def mask_api_key(self, key_prefix: Optional[str]) -> str:
        """Displayable form of an API key, built from its stored prefix"""
        if not key_prefix:
            return ""
        return f"{key_prefix}..."


# Global auth service instance
auth_service = AuthService()
