"""
Unit tests for AuthService.
Tests registration, login, logout and profile operations.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from messaging_service.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidCredentials,
    TokenRevoked,
    ValidationError,
)
from messaging_service.core.security import SecurityService
from messaging_service.models.user import MaritalStatus
from messaging_service.repositories.user_repository import UserRepository
from messaging_service.services.auth_service import EMAIL_TAKEN, AuthService

from tests.factories import DEFAULT_PASSWORD, RegistrationPayloadFactory


@pytest.mark.unit
@pytest.mark.auth
class TestRegistration:
    """Test user registration."""

    async def test_register_success(self, auth_service, token_service, db_session, registration_data):
        # Act
        user, token = await auth_service.register(db_session, registration_data)

        # Assert
        assert user.id is not None
        assert user.email == registration_data["email"]
        assert user.password_hash != registration_data["password"]
        assert SecurityService.verify_password(registration_data["password"], user.password_hash)
        assert user.marital_status == MaritalStatus(registration_data["marital_status"])
        assert await token_service.verify(token) == user.id

    async def test_register_lowercases_email(self, auth_service, db_session):
        payload = RegistrationPayloadFactory(email="Mixed.Case@Example.COM")

        user, _ = await auth_service.register(db_session, payload)

        assert user.email == "mixed.case@example.com"

    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("0", False), ("yes", True), ("off", False), (1, True), (False, False),
    ])
    async def test_register_coerces_gender(self, auth_service, db_session, raw, expected):
        user, _ = await auth_service.register(db_session, RegistrationPayloadFactory(gender=raw))

        assert user.gender is expected

    async def test_register_reports_all_failing_fields(self, auth_service, db_session):
        payload = {
            "name": "",
            "email": "not-an-email",
            "password": "abc",
            "password_confirmation": "abc",
            "address": "   ",
            "gender": "maybe",
            "marital_status": "complicated",
        }

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, payload)

        errors = exc_info.value.errors
        assert set(errors) == {"name", "email", "password", "address", "gender", "marital_status"}
        assert errors["name"] == ["The name field is required."]
        assert errors["email"] == ["The email field must be a valid email address."]
        assert errors["password"] == ["The password field must be at least 6 characters."]
        assert errors["gender"] == ["The gender field must be true or false."]
        assert errors["marital_status"] == ["The selected marital status is invalid."]

    async def test_register_missing_fields(self, auth_service, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, {})

        errors = exc_info.value.errors
        for field in ("name", "email", "password", "address", "gender", "marital_status"):
            assert errors[field] == [f"The {field.replace('_', ' ')} field is required."]

    async def test_register_password_confirmation_mismatch(self, auth_service, db_session):
        payload = RegistrationPayloadFactory(password_confirmation="different123")

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, payload)

        assert exc_info.value.errors == {"password": ["The password field confirmation does not match."]}

    async def test_register_name_too_long(self, auth_service, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, RegistrationPayloadFactory(name="x" * 256))

        assert exc_info.value.errors["name"] == ["The name field must not be greater than 255 characters."]

    async def test_register_duplicate_email(self, auth_service, db_session, test_user):
        payload = RegistrationPayloadFactory(email="ALICE@example.com")

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, payload)

        assert exc_info.value.errors == {"email": [EMAIL_TAKEN]}

    async def test_register_duplicate_email_reported_with_other_errors(self, auth_service, db_session, test_user):
        payload = RegistrationPayloadFactory(email=test_user.email, address="")

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, payload)

        assert exc_info.value.errors["email"] == [EMAIL_TAKEN]
        assert "address" in exc_info.value.errors

    async def test_register_conflict_from_store_maps_to_validation(self, token_service):
        # Arrange: the uniqueness pre-check passes but the insert loses a race
        repository = AsyncMock(spec=UserRepository)
        repository.email_taken.return_value = False
        repository.create.side_effect = ConflictError("email", EMAIL_TAKEN)
        service = AuthService(token_service, user_repository=repository)

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            await service.register(MagicMock(), RegistrationPayloadFactory())

        assert exc_info.value.errors == {"email": [EMAIL_TAKEN]}

    async def test_register_rejects_non_object_payload(self, auth_service, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register(db_session, ["not", "an", "object"])

        assert "body" in exc_info.value.errors


@pytest.mark.unit
@pytest.mark.auth
class TestLogin:
    """Test login with email and password."""

    async def test_login_success(self, auth_service, token_service, db_session, test_user, valid_login_data):
        user, token = await auth_service.login(db_session, valid_login_data)

        assert user.id == test_user.id
        assert await token_service.verify(token) == test_user.id

    async def test_login_email_is_case_insensitive(self, auth_service, db_session, test_user):
        user, _ = await auth_service.login(
            db_session, {"email": "Alice@Example.com", "password": DEFAULT_PASSWORD}
        )

        assert user.id == test_user.id

    async def test_login_wrong_password(self, auth_service, db_session, test_user):
        with pytest.raises(InvalidCredentials) as exc_info:
            await auth_service.login(db_session, {"email": test_user.email, "password": "wrong-password"})

        assert exc_info.value.to_response() == {"error": "Invalid credentials"}

    async def test_login_unknown_email(self, auth_service, db_session):
        with pytest.raises(InvalidCredentials):
            await auth_service.login(db_session, {"email": "nobody@example.com", "password": DEFAULT_PASSWORD})

    async def test_login_does_not_issue_token_on_failure(self, db_session, test_user):
        token_service = MagicMock()
        service = AuthService(token_service)

        with pytest.raises(InvalidCredentials):
            await service.login(db_session, {"email": test_user.email, "password": "wrong-password"})

        token_service.issue.assert_not_called()

    async def test_login_validation(self, auth_service, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.login(db_session, {"email": "bad", "password": "123"})

        assert exc_info.value.errors == {
            "email": ["The email field must be a valid email address."],
            "password": ["The password field must be at least 6 characters."],
        }


@pytest.mark.unit
@pytest.mark.auth
class TestLogoutAndProfile:
    """Test logout, profile lookup and profile update."""

    async def test_logout_revokes_token(self, auth_service, token_service, test_user):
        token = token_service.issue(test_user.id)

        await auth_service.logout(token)

        with pytest.raises(TokenRevoked):
            await token_service.verify(token)

    async def test_get_profile(self, auth_service, token_service, db_session, test_user):
        user = await auth_service.get_profile(db_session, token_service.issue(test_user.id))

        assert user.id == test_user.id

    async def test_get_profile_for_deleted_user(self, auth_service, token_service, db_session):
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.get_profile(db_session, token_service.issue(999))

        assert exc_info.value.message == "User not found"

    async def test_update_profile_partial(self, auth_service, token_service, db_session, test_user):
        original_email = test_user.email
        token = token_service.issue(test_user.id)

        user = await auth_service.update_profile(db_session, token, {"name": "Alice Renamed", "gender": "false"})

        assert user.name == "Alice Renamed"
        assert user.gender is False
        assert user.email == original_email

    async def test_update_profile_empty_payload_is_noop(self, auth_service, token_service, db_session, test_user):
        token = token_service.issue(test_user.id)

        user = await auth_service.update_profile(db_session, token, {})

        assert user.id == test_user.id
        assert user.name == "Alice Sender"

    async def test_update_profile_password_is_rehashed(self, auth_service, token_service, db_session, test_user):
        token = token_service.issue(test_user.id)

        await auth_service.update_profile(
            db_session, token, {"password": "brand-new-pass", "password_confirmation": "brand-new-pass"}
        )

        user, _ = await auth_service.login(db_session, {"email": test_user.email, "password": "brand-new-pass"})
        assert user.id == test_user.id
        with pytest.raises(InvalidCredentials):
            await auth_service.login(db_session, {"email": test_user.email, "password": DEFAULT_PASSWORD})

    async def test_update_profile_keeps_own_email(self, auth_service, token_service, db_session, test_user):
        token = token_service.issue(test_user.id)

        user = await auth_service.update_profile(db_session, token, {"email": test_user.email})

        assert user.email == test_user.email

    async def test_update_profile_email_taken(self, auth_service, token_service, db_session, test_user, other_user):
        token = token_service.issue(test_user.id)

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.update_profile(db_session, token, {"email": other_user.email})

        assert exc_info.value.errors == {"email": [EMAIL_TAKEN]}

    async def test_update_profile_invalid_fields(self, auth_service, token_service, db_session, test_user):
        token = token_service.issue(test_user.id)

        with pytest.raises(ValidationError) as exc_info:
            await auth_service.update_profile(db_session, token, {"name": "", "marital_status": "unknown"})

        assert set(exc_info.value.errors) == {"name", "marital_status"}

    async def test_update_profile_requires_valid_token(self, auth_service, token_service, db_session, test_user):
        token = token_service.issue(test_user.id)
        await auth_service.logout(token)

        with pytest.raises(TokenRevoked):
            await auth_service.update_profile(db_session, token, {"name": "Nope"})
