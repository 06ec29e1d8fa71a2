"""
Unit tests for payload validation helpers and schemas.
"""
import pytest

from messaging_service.core.exceptions import ValidationError
from messaging_service.schemas.message_schemas import MessageCreate
from messaging_service.schemas.user_schemas import ProfileUpdateRequest, RegistrationRequest
from messaging_service.schemas.validation import coerce_boolean, merge_errors, normalize_email, validate_payload

from tests.factories import RegistrationPayloadFactory


@pytest.mark.unit
class TestFieldHelpers:

    @pytest.mark.parametrize("raw", [True, 1, "1", "true", "TRUE", "yes", "on", " On "])
    def test_truthy_values(self, raw):
        assert coerce_boolean("gender", raw) is True

    @pytest.mark.parametrize("raw", [False, 0, "0", "false", "No", "off"])
    def test_falsy_values(self, raw):
        assert coerce_boolean("gender", raw) is False

    @pytest.mark.parametrize("raw", [2, "maybe", 1.5, [], {}])
    def test_rejects_other_values(self, raw):
        with pytest.raises(ValueError, match="must be true or false"):
            coerce_boolean("gender", raw)

    def test_email_is_normalized(self):
        assert normalize_email("  Someone@Example.ORG ", 255) == "someone@example.org"

    def test_email_too_long(self):
        email = "a" * 250 + "@example.com"

        with pytest.raises(ValueError, match="greater than 255"):
            normalize_email(email, 255)

    def test_merge_errors_deduplicates(self):
        merged = merge_errors({"email": ["taken"]}, {"email": ["taken", "invalid"], "name": ["required"]})

        assert merged == {"email": ["taken", "invalid"], "name": ["required"]}


@pytest.mark.unit
class TestValidatePayload:

    def test_valid_registration(self):
        data = validate_payload(RegistrationRequest, RegistrationPayloadFactory(name="  Padded Name  "))

        assert data.name == "Padded Name"

    def test_password_is_not_stripped(self):
        payload = RegistrationPayloadFactory(password=" spaced ", password_confirmation=" spaced ")

        data = validate_payload(RegistrationRequest, payload)

        assert data.password == " spaced "

    @pytest.mark.parametrize("payload", [None, {}])
    def test_empty_payload_reports_required_fields(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(MessageCreate, payload)

        assert exc_info.value.errors == {
            "receiver": ["The receiver field is required."],
            "body": ["The body field is required."],
        }

    @pytest.mark.parametrize("payload", [[1, 2], "text", 42])
    def test_non_object_payload(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(MessageCreate, payload)

        assert exc_info.value.errors == {"body": ["The request body must be a JSON object."]}

    def test_non_string_body(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(MessageCreate, {"receiver": 1, "body": 123})

        assert exc_info.value.errors == {"body": ["The body field must be a string."]}

    def test_profile_update_changes_only_sent_fields(self):
        data = validate_payload(
            ProfileUpdateRequest,
            {"address": "1 New Street", "password": "newpass1", "password_confirmation": "newpass1"}
        )

        assert data.changes() == {"address": "1 New Street", "password": "newpass1"}

    def test_profile_update_null_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(ProfileUpdateRequest, {"name": None})

        assert exc_info.value.errors == {"name": ["The name field is required."]}
