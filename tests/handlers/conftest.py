import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from core.bootstrap import Dependencies, load_dependencies
from core.infrastructure.storage.local_storage import LocalFileStorage


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def local_storage(local_settings) -> LocalFileStorage:
    return LocalFileStorage(
        root=local_settings.local_storage_root,
        media_base_url=local_settings.media_base_url,
    )


@pytest.fixture
def local_dependencies(local_settings, local_storage, profile_records) -> Dependencies:
    """Local storage plus the in-memory record store, no AWS involved."""
    return Dependencies(settings=local_settings, storage=local_storage, records=profile_records)


@pytest.fixture
def fresh_dependencies():
    """Drop cached dependencies before and after a test that builds real ones."""
    load_dependencies.cache_clear()
    yield
    load_dependencies.cache_clear()


@pytest.fixture
def upload_event() -> Callable[..., dict[str, Any]]:
    """
    Factory for POST /v1/profile/image events.

    Usage:
        event = upload_event(file_data=sample_jpeg, content_type="image/jpeg")
    """

    def _event(
        *,
        file_data: bytes,
        user_id: str = "user_1",
        display_name: str = "Alice Smith",
        content_type: str = "image/jpeg",
    ) -> dict[str, Any]:
        return {
            "httpMethod": "POST",
            "path": "/v1/profile/image",
            "body": json.dumps(
                {
                    "file": base64.b64encode(file_data).decode(),
                    "user_id": user_id,
                    "display_name": display_name,
                    "content_type": content_type,
                }
            ),
            "isBase64Encoded": False,
        }

    return _event


@pytest.fixture
def get_profile_event() -> Callable[[str | None], dict[str, Any]]:
    def _event(user_id: str | None) -> dict[str, Any]:
        return {
            "httpMethod": "GET",
            "path": f"/v1/profile/{user_id}/image",
            "pathParameters": {"user_id": user_id} if user_id is not None else None,
        }

    return _event


@pytest.fixture
def parse_body() -> Callable[[dict[str, Any]], dict[str, Any]]:
    def _parse(resp: dict[str, Any]) -> dict[str, Any]:
        body = resp.get("body")
        return json.loads(body) if body else {}

    return _parse
