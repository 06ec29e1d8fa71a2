from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
import secrets
import structlog

from .config import settings
from .exceptions import TokenExpired, TokenMalformed

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


class SecurityService:
    """Password hashing and JWT primitives"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unknown or corrupt hash format counts as a mismatch
            logger.warning("Stored password hash could not be verified")
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Generate password hash"""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(
        data: dict,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create JWT access token carrying a unique jti for revocation"""
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        if expires_delta is not None:
            expire = now + expires_delta
        else:
            expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": ACCESS_TOKEN_TYPE,
            "jti": secrets.token_urlsafe(32)
        })

        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT.

        Raises TokenExpired when the signature is good but exp has passed,
        TokenMalformed for anything else jose rejects.
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise TokenMalformed()
