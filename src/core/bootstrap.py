"""Process-level wiring of settings, storage backend and record store.

Lambda handlers call `load_dependencies()` on each invocation; the first call
in a process resolves configuration and builds the clients, later calls reuse
them. Tests call `load_dependencies.cache_clear()` after changing the
environment.
"""

from dataclasses import dataclass
from functools import lru_cache

from core.config import MediaSettings
from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.aws.dynamodb_profiles import DynamoDBProfileRecords
from core.infrastructure.storage.factory import create_storage_backend
from core.repositories.profile_repository import ProfileRecordRepository
from core.repositories.storage_repository import StorageBackend


@dataclass(frozen=True)
class Dependencies:
    """Everything resolved once at startup."""

    settings: MediaSettings
    storage: StorageBackend
    records: ProfileRecordRepository


def build_dependencies(settings: MediaSettings) -> Dependencies:
    return Dependencies(
        settings=settings,
        storage=create_storage_backend(settings),
        records=DynamoDBProfileRecords(DynamoDBAdapter.from_settings(settings)),
    )


@lru_cache(maxsize=1)
def load_dependencies() -> Dependencies:
    """Resolve settings from the environment and build dependencies once."""
    return build_dependencies(MediaSettings.from_env())
