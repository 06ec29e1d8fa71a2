"""
Authentication service: registration, login, logout and the caller's profile.

Protected operations take the bearer token explicitly and resolve the
caller through TokenService; there is no ambient "current user".
"""
from typing import Any, Dict, List, Mapping, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.exceptions import AuthenticationError, ConflictError, InvalidCredentials, ValidationError
from ..core.security import SecurityService
from ..interfaces.repository_interface import IUserRepository
from ..models.user import User
from ..repositories.user_repository import UserRepository
from ..schemas.auth_schemas import LoginRequest
from ..schemas.user_schemas import ProfileUpdateRequest, RegistrationRequest
from ..schemas.validation import merge_errors, validate_payload
from .token_service import TokenService

logger = structlog.get_logger()

EMAIL_TAKEN = "The email has already been taken."


class AuthService:
    """Orchestrates the credential store, password hasher and token service."""

    def __init__(
        self,
        token_service: TokenService,
        user_repository: Optional[IUserRepository] = None
    ):
        self.token_service = token_service
        self.user_repository = user_repository or UserRepository()

    async def register(self, db: AsyncSession, payload: Any) -> Tuple[User, str]:
        """
        Register a new user and issue their first token.

        Args:
            db: Database session
            payload: name, email, password, password_confirmation, address,
                gender, marital_status

        Returns:
            Tuple of (user, token)

        Raises:
            ValidationError: Any field invalid, or the email already taken
        """
        data, errors = self._validate(RegistrationRequest, payload)

        email = data.email if data else self._valid_email(payload, errors)
        if email and await self.user_repository.email_taken(db, email):
            errors = merge_errors(errors, {"email": [EMAIL_TAKEN]})

        if errors:
            logger.info("Registration rejected", fields=sorted(errors))
            raise ValidationError(errors)

        user_data = {
            "name": data.name,
            "email": data.email,
            "password_hash": SecurityService.get_password_hash(data.password),
            "address": data.address,
            "gender": data.gender,
            "marital_status": data.marital_status,
        }
        try:
            user = await self.user_repository.create(db, user_data)
        except ConflictError as e:
            # Lost a race with a concurrent registration for the same email
            raise ValidationError.for_field(e.field, EMAIL_TAKEN)

        token = self.token_service.issue(user.id)
        logger.info("User registered", user_id=user.id)
        return user, token

    async def login(self, db: AsyncSession, payload: Any) -> Tuple[User, str]:
        """
        Authenticate with email and password.

        Raises:
            ValidationError: Malformed input
            InvalidCredentials: Unknown email or wrong password
        """
        credentials = validate_payload(LoginRequest, payload)

        user = await self.user_repository.get_by_email(db, credentials.email)
        if not user:
            logger.warning("Login failed", reason="user_not_found")
            raise InvalidCredentials()

        if not SecurityService.verify_password(credentials.password, user.password_hash):
            logger.warning("Login failed", reason="invalid_password", user_id=user.id)
            raise InvalidCredentials()

        token = self.token_service.issue(user.id)
        logger.info("User logged in", user_id=user.id)
        return user, token

    async def logout(self, token: Optional[str]) -> None:
        """Revoke ``token``. Fails like verify if it is not currently valid."""
        await self.token_service.revoke(token)

    async def get_profile(self, db: AsyncSession, token: Optional[str]) -> User:
        """Resolve the caller's user record from their token."""
        user_id = await self.token_service.verify(token)
        user = await self.user_repository.get_by_id(db, user_id)
        if not user:
            logger.warning("Token refers to a missing user", user_id=user_id)
            raise AuthenticationError("User not found")
        return user

    async def update_profile(self, db: AsyncSession, token: Optional[str], payload: Any) -> User:
        """
        Update any subset of the caller's profile fields.

        Only fields present in ``payload`` are validated and persisted; a new
        password is re-hashed. Email uniqueness ignores the caller's own row.
        """
        user = await self.get_profile(db, token)

        data, errors = self._validate(ProfileUpdateRequest, payload)

        email = data.changes().get("email") if data else self._valid_email(payload, errors)
        if email and email != user.email and await self.user_repository.email_taken(
            db, email, exclude_user_id=user.id
        ):
            errors = merge_errors(errors, {"email": [EMAIL_TAKEN]})

        if errors:
            logger.info("Profile update rejected", user_id=user.id, fields=sorted(errors))
            raise ValidationError(errors)

        changes = data.changes()
        if "password" in changes:
            changes["password_hash"] = SecurityService.get_password_hash(changes.pop("password"))

        try:
            return await self.user_repository.update(db, user, changes)
        except ConflictError as e:
            raise ValidationError.for_field(e.field, EMAIL_TAKEN)

    @staticmethod
    def _validate(model, payload: Any) -> Tuple[Optional[Any], Dict[str, List[str]]]:
        """Validate without raising so store-backed checks can add to the errors."""
        try:
            return validate_payload(model, payload), {}
        except ValidationError as e:
            return None, e.errors

    @staticmethod
    def _valid_email(payload: Any, errors: Dict[str, List[str]]) -> Optional[str]:
        """The normalized email from a payload that failed on other fields only."""
        if "email" in errors or "body" in errors or not isinstance(payload, Mapping):
            return None
        email = payload.get("email")
        if isinstance(email, str) and email.strip():
            return email.strip().lower()
        return None
