import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.models.errors import (
    DecodeError,
    EncodingError,
    NotFoundError,
    ProfileMediaError,
    RecordFetchError,
    RecordUpdateError,
    StorageDeleteError,
    StorageTimeoutError,
    StorageWriteError,
    ValidationError,
)
from core.utils.response import ResponseBuilder, status_for


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert resp["headers"]["Content-Type"] == "application/json"


def test_created_response() -> None:
    resp = ResponseBuilder.created({"profile_image_key": "pp/alice-1.jpg"})
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.CREATED
    assert parsed["profile_image_key"] == "pp/alice-1.jpg"
    assert "request_id" not in parsed


def test_preflight_response() -> None:
    resp = ResponseBuilder.preflight(cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"
    assert "POST" in resp["headers"]["Access-Control-Allow-Methods"]


def test_bad_request_and_internal_error() -> None:
    bad = ResponseBuilder.bad_request("bad", request_id="req-x")
    internal = ResponseBuilder.internal_error()

    assert bad["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parse_body(bad)["error"] == "BAD_REQUEST"
    assert parse_body(bad)["message"] == "bad"
    assert "timestamp" in parse_body(bad)

    assert internal["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert parse_body(internal)["message"] == "Internal server error"


def test_validation_error_response() -> None:
    resp = ResponseBuilder.validation_error(
        message="Invalid request params",
        details={"errors": [{"field": "file", "message": "required"}]},
    )
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
    assert parsed["error"] == "VALIDATION_FAILED"
    assert parsed["details"]["errors"][0]["field"] == "file"


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (ValidationError(message="x"), HTTPStatus.UNPROCESSABLE_ENTITY),
        (EncodingError(message="x", achieved_size=1), HTTPStatus.UNPROCESSABLE_ENTITY),
        (DecodeError(message="x"), HTTPStatus.BAD_REQUEST),
        (NotFoundError(message="x"), HTTPStatus.NOT_FOUND),
        (StorageTimeoutError(message="x"), HTTPStatus.GATEWAY_TIMEOUT),
        (StorageWriteError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (StorageDeleteError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (RecordFetchError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (RecordUpdateError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (ProfileMediaError(message="x", error_code="OTHER"), HTTPStatus.INTERNAL_SERVER_ERROR),
    ],
)
def test_status_for(exc, status) -> None:
    assert status_for(exc) == status


def test_from_error_keeps_client_details() -> None:
    exc = EncodingError(message="Unable to compress", achieved_size=20000)

    resp = ResponseBuilder.from_error(exc, request_id="req-2")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
    assert parsed["error"] == "IMAGE_SIZE_CEILING_UNREACHABLE"
    assert parsed["message"] == "Unable to compress"
    assert parsed["details"] == {"achieved_size": 20000}
    assert parsed["request_id"] == "req-2"


def test_from_error_hides_server_details() -> None:
    exc = StorageWriteError(message="Unable to upload image", details={"key": "pp/a-1.jpg"})

    resp = ResponseBuilder.from_error(exc)
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert parsed["error"] == "STORAGE_WRITE_FAILED"
    assert "details" not in parsed
