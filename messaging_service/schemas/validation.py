"""
Request payload validation helpers.

Every service validates its raw payload through ``validate_payload`` so the
same field -> [messages] error map is produced whether the call came over
HTTP or from code.
"""
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

ERROR_TEMPLATES = {
    "missing": "The {label} field is required.",
    "string_type": "The {label} field must be a string.",
    "int_type": "The {label} field must be an integer.",
    "int_parsing": "The {label} field must be an integer.",
    "int_from_float": "The {label} field must be an integer.",
    "bool_type": "The {label} field must be true or false.",
    "bool_parsing": "The {label} field must be true or false.",
    "enum": "The selected {label} is invalid.",
    "greater_than_equal": "The selected {label} is invalid.",
    "less_than_equal": "The selected {label} is invalid.",
    "extra_forbidden": "The {label} field is not allowed.",
    "model_type": "The request body must be a JSON object.",
    "dict_type": "The request body must be a JSON object.",
}

TRUE_VALUES = {"1", "true", "on", "yes"}
FALSE_VALUES = {"0", "false", "off", "no"}


def field_label(field: str) -> str:
    return field.replace("_", " ")


def required_string(field: str, value: Any, max_length: Optional[int] = None, strip: bool = True) -> str:
    """Reject null, blank and non-string values; optionally bound the length."""
    label = field_label(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"The {label} field is required.")
    if not isinstance(value, str):
        raise ValueError(f"The {label} field must be a string.")
    if strip:
        value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"The {label} field must not be greater than {max_length} characters.")
    return value


def normalize_email(value: Any, max_length: int) -> str:
    email = required_string("email", value, max_length=max_length)
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("The email field must be a valid email address.")
    return email.lower()


def check_password(value: Any, min_length: int) -> str:
    password = required_string("password", value, strip=False)
    if len(password) < min_length:
        raise ValueError(f"The password field must be at least {min_length} characters.")
    return password


def coerce_boolean(field: str, value: Any) -> bool:
    """Loose boolean coercion: true/false, 1/0, yes/no, on/off."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
    if value is None:
        raise ValueError(f"The {field_label(field)} field is required.")
    raise ValueError(f"The {field_label(field)} field must be true or false.")


def _message_for(error: Mapping[str, Any], field: str) -> str:
    ctx = error.get("ctx") or {}
    if error.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    template = ERROR_TEMPLATES.get(error.get("type", ""))
    if template:
        return template.format(label=field_label(field))
    return error.get("msg", "The value is invalid.")


def errors_from_pydantic(exc: PydanticValidationError) -> Dict[str, List[str]]:
    """Flatten pydantic errors into a field -> messages map."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "body"
        message = _message_for(error, field)
        messages = errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return errors


def validate_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` against ``model`` or raise ValidationError."""
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationError.for_field("body", ERROR_TEMPLATES["model_type"])
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise ValidationError(errors_from_pydantic(e))


def merge_errors(*maps: Dict[str, List[str]]) -> Dict[str, List[str]]:
    merged: Dict[str, List[str]] = {}
    for error_map in maps:
        for field, messages in error_map.items():
            bucket = merged.setdefault(field, [])
            bucket.extend(m for m in messages if m not in bucket)
    return merged
