"""
Token service focused solely on bearer token operations.

A token is Valid until it is either revoked (logout) or its exp passes;
both are terminal. Revocation is a Redis key per jti that outlives the
token, so a revoked token can never verify again.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import structlog

from ..interfaces.cache_interface import ICacheService
from ..core.exceptions import TokenMalformed, TokenMissing, TokenRevoked
from ..core.security import ACCESS_TOKEN_TYPE, SecurityService
from ..core.config import settings
from ..models.base import MAX_ID

logger = structlog.get_logger()

REVOCATION_KEY_PREFIX = "blacklist:token:"


class TokenService:
    """Service responsible for issuing, verifying and revoking tokens."""

    def __init__(self, cache_service: ICacheService):
        self.cache_service = cache_service

    @staticmethod
    def revocation_key(token_id: str) -> str:
        return f"{REVOCATION_KEY_PREFIX}{token_id}"

    def issue(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a bearer token bound to ``user_id``.

        Args:
            user_id: User ID
            expires_delta: Custom lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES

        Returns:
            Encoded JWT
        """
        token = SecurityService.create_access_token(
            data={"sub": str(user_id)},
            expires_delta=expires_delta
        )
        logger.debug("Access token issued", user_id=user_id)
        return token

    async def decode(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Decode ``token`` and run every validity check.

        Raises:
            TokenMissing: No token supplied
            TokenMalformed: Bad signature, wrong type, or missing claims
            TokenExpired: exp has passed
            TokenRevoked: jti is in the revocation set
        """
        if not token or not token.strip():
            raise TokenMissing()

        payload = SecurityService.decode_token(token.strip())

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise TokenMalformed()

        token_id = payload.get("jti")
        subject = payload.get("sub")
        # A token without exp would never expire
        if not token_id or subject is None or payload.get("exp") is None:
            raise TokenMalformed()
        try:
            payload["user_id"] = int(subject)
        except (TypeError, ValueError):
            raise TokenMalformed()
        if not 1 <= payload["user_id"] <= MAX_ID:
            raise TokenMalformed()

        if await self.cache_service.exists(self.revocation_key(token_id)):
            logger.info("Rejected revoked token", user_id=payload["user_id"])
            raise TokenRevoked()

        return payload

    async def verify(self, token: Optional[str]) -> int:
        """Return the user id bound to a valid token."""
        payload = await self.decode(token)
        return payload["user_id"]

    async def revoke(self, token: Optional[str]) -> None:
        """
        Revoke a currently valid token.

        The marker lives for the token's remaining lifetime plus a grace
        period, so it cannot lapse while the token would still verify.
        """
        payload = await self.decode(token)

        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        remaining = int((expires_at - datetime.now(timezone.utc)).total_seconds())
        ttl = max(remaining, 0) + settings.TOKEN_REVOCATION_GRACE_SECONDS
        # setex rejects a zero ttl
        ttl = max(ttl, 1)

        await self.cache_service.set(
            self.revocation_key(payload["jti"]),
            payload["user_id"],
            ttl=ttl
        )
        logger.info("Token revoked", user_id=payload["user_id"], ttl=ttl)
