"""
Pytest configuration and fixtures for profile media tests.
Provides AWS mocking, S3 and DynamoDB fixtures, synthetic images and an
in-memory profile record store.
"""

from collections.abc import Callable
import io
import os
import random
import threading
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from core.config import MediaSettings
from core.models.errors import RecordUpdateError
from core.models.image import ProfileRecord
from core.repositories.profile_repository import ProfileRecordRepository

TEST_REGION = "us-east-1"
TEST_BUCKET = "profile-media-test"
TEST_TABLE = "profiles-test"
TEST_MEDIA_BASE_URL = "https://media.example.com"

os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_REGION"] = TEST_REGION
os.environ["AWS_DEFAULT_REGION"] = TEST_REGION
os.environ["AWS_BUCKET_NAME"] = TEST_BUCKET
os.environ["PROFILE_TABLE_NAME"] = TEST_TABLE
os.environ["MEDIA_BASE_URL"] = TEST_MEDIA_BASE_URL
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ["POWERTOOLS_SERVICE_NAME"] = "profile-media"
os.environ["POWERTOOLS_METRICS_NAMESPACE"] = "ProfileMedia"
os.environ["POWERTOOLS_TRACE_DISABLED"] = "true"


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture
def remote_env() -> dict[str, str]:
    return {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_REGION": TEST_REGION,
        "AWS_BUCKET_NAME": TEST_BUCKET,
        "MEDIA_BASE_URL": TEST_MEDIA_BASE_URL,
        "PROFILE_TABLE_NAME": TEST_TABLE,
    }


@pytest.fixture
def local_env(tmp_path) -> dict[str, str]:
    return {
        "LOCAL_STORAGE_ROOT": str(tmp_path / "uploads"),
        "MEDIA_BASE_URL": TEST_MEDIA_BASE_URL,
        "PROFILE_TABLE_NAME": TEST_TABLE,
    }


@pytest.fixture
def remote_settings(remote_env) -> MediaSettings:
    return MediaSettings.from_env(remote_env)


@pytest.fixture
def local_settings(local_env) -> MediaSettings:
    return MediaSettings.from_env(local_env)


# ============================================================================
# AWS (moto)
# ============================================================================


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the test bucket; moto discards it when the mock exits."""
    try:
        s3_client.create_bucket(Bucket=TEST_BUCKET)
    except ClientError as e:
        if e.response["Error"]["Code"] != "BucketAlreadyOwnedByYou":
            raise

    return s3_client


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], dict[str, Any]]:
    """
    Helper to fetch an object (body read into "Data") from S3.

    Usage:
        obj = s3_get_object("pp/alice-42.jpg")
    """

    def _get(key: str) -> dict[str, Any]:
        response: dict[str, Any] = s3_client.get_object(Bucket=TEST_BUCKET, Key=key)
        response["Data"] = response["Body"].read()
        return response

    return _get


@pytest.fixture
def s3_keys(s3_client) -> Callable[[], list[str]]:
    """Helper listing every key currently in the test bucket."""

    def _keys() -> list[str]:
        response = s3_client.list_objects_v2(Bucket=TEST_BUCKET)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _keys


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=TEST_REGION)


@pytest.fixture(scope="function")
def profiles_table(dynamodb_resource):
    """Create the user table keyed on user_id."""
    table = dynamodb_resource.create_table(
        TableName=TEST_TABLE,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "user_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "user_id", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def put_profile(profiles_table) -> Callable[..., dict[str, Any]]:
    """
    Helper to insert a user record.

    Usage:
        put_profile("user_1", name="Alice", profile_image_key="pp/alice-1.jpg")
    """

    def _put(user_id: str, **attributes: Any) -> dict[str, Any]:
        item = {"user_id": user_id, **attributes}
        profiles_table.put_item(Item=item)
        return item

    return _put


@pytest.fixture
def get_profile_item(profiles_table) -> Callable[[str], dict[str, Any] | None]:
    def _get(user_id: str) -> dict[str, Any] | None:
        response = profiles_table.get_item(Key={"user_id": user_id}, ConsistentRead=True)
        item: dict[str, Any] | None = response.get("Item")
        return item

    return _get


# ============================================================================
# Images
# ============================================================================


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory for synthetic image bytes.

    Usage:
        data = make_image(size=(640, 480), color=(200, 10, 10), fmt="PNG")
    """

    def _make(
        *,
        size: tuple[int, int] = (400, 300),
        color: tuple[int, ...] = (30, 120, 200),
        fmt: str = "JPEG",
        mode: str = "RGB",
    ) -> bytes:
        image = Image.new(mode, size, color)
        out = io.BytesIO()
        image.save(out, format=fmt)
        return out.getvalue()

    return _make


@pytest.fixture
def noise_image() -> Callable[..., bytes]:
    """Factory for deterministic high-entropy RGB images (PNG, lossless)."""

    def _make(size: tuple[int, int] = (200, 200), seed: int = 1234) -> bytes:
        width, height = size
        pixels = random.Random(seed).randbytes(width * height * 3)
        image = Image.frombytes("RGB", size, pixels)
        out = io.BytesIO()
        image.save(out, format="PNG")
        return out.getvalue()

    return _make


@pytest.fixture
def sample_jpeg(make_image) -> bytes:
    return make_image()


@pytest.fixture
def sample_png(make_image) -> bytes:
    return make_image(fmt="PNG", mode="RGBA", color=(10, 200, 10, 128))


# ============================================================================
# Record store double
# ============================================================================


class InMemoryProfileRecords(ProfileRecordRepository):
    """Thread-safe in-memory record store for service tests."""

    def __init__(self) -> None:
        self._records: dict[str, ProfileRecord] = {}
        self._lock = threading.Lock()
        self.fail_updates = False
        self.update_calls: list[tuple[str, str]] = []

    def add(self, user_id: str, *, name: str | None = None, key: str | None = None) -> None:
        with self._lock:
            self._records[user_id] = ProfileRecord(
                user_id=user_id, name=name, profile_image_key=key
            )

    def fetch_profile(self, *, owner_id: str) -> ProfileRecord | None:
        with self._lock:
            return self._records.get(owner_id)

    def set_current_key(self, *, owner_id: str, key: str) -> None:
        with self._lock:
            self.update_calls.append((owner_id, key))
            if self.fail_updates or owner_id not in self._records:
                raise RecordUpdateError(message="Unable to update user profile")
            record = self._records[owner_id]
            self._records[owner_id] = record.model_copy(update={"profile_image_key": key})


@pytest.fixture
def profile_records() -> InMemoryProfileRecords:
    records = InMemoryProfileRecords()
    records.add("user_1", name="Alice Smith")
    return records
