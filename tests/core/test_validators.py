"""Unit tests for request validation utilities."""

import pytest
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from core.utils.validators import (
    sanitize_validation_errors,
    validate_request,
)


class OwnerModel(BaseModel):
    """Sample model for validation tests."""

    user_id: str = Field(..., min_length=1)
    attempts: int = 1


class TestSanitizeValidationErrors:
    """Tests for sanitize_validation_errors."""

    def test_sanitizes_required_field(self) -> None:
        errors = [{"loc": ("user_id",), "msg": "Field required", "input": {}}]

        assert sanitize_validation_errors(errors) == [
            {"field": "user_id", "message": "This field is required"}
        ]

    def test_defaults_field_to_body(self) -> None:
        assert sanitize_validation_errors([{"msg": "Invalid value"}]) == [
            {"field": "body", "message": "Invalid value"}
        ]

    def test_removes_value_error_prefix(self) -> None:
        errors = [{"loc": ("file",), "msg": "Value error, Decoded file is empty"}]

        assert sanitize_validation_errors(errors)[0]["message"] == "Decoded file is empty"

    def test_hides_base64_details(self) -> None:
        errors = [{"loc": ("file",), "msg": "Value error, Invalid base64 encoded file"}]

        assert sanitize_validation_errors(errors)[0]["message"] == (
            "File must be a valid Base64-encoded string"
        )

    def test_drops_input_and_context(self) -> None:
        errors = [
            {
                "loc": ("file",),
                "msg": "bad",
                "input": "aGVsbG8=",
                "ctx": {"error": "x"},
                "url": "https://errors.pydantic.dev",
            }
        ]

        assert sanitize_validation_errors(errors) == [{"field": "file", "message": "bad"}]

    def test_nested_location_is_dotted(self) -> None:
        errors = [{"loc": ("body", "user_id"), "msg": "bad"}]

        assert sanitize_validation_errors(errors)[0]["field"] == "body.user_id"


class TestValidateRequest:
    """Tests for validate_request."""

    def test_returns_model(self) -> None:
        result = validate_request(OwnerModel, {"user_id": "user_1", "attempts": 3})

        assert result == OwnerModel(user_id="user_1", attempts=3)

    def test_raises_on_invalid_data(self) -> None:
        with pytest.raises(PydanticValidationError):
            validate_request(OwnerModel, {"user_id": ""})

    def test_non_dict_payload_is_treated_as_empty(self) -> None:
        with pytest.raises(PydanticValidationError) as exc:
            validate_request(OwnerModel, ["not", "a", "dict"])  # type: ignore[arg-type]

        assert exc.value.errors()[0]["loc"] == ("user_id",)
