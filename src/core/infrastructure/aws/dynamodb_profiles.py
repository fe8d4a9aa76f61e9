"""DynamoDB-backed implementation of ProfileRecordRepository."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapterProtocol
from core.models.errors import RecordFetchError, RecordUpdateError
from core.models.image import ProfileRecord
from core.repositories.profile_repository import ProfileRecordRepository
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class DynamoDBProfileRecords(ProfileRecordRepository):
    """User records keyed on `user_id`, holding `profile_image_key`.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol) -> None:
        self._db = adapter

    def fetch_profile(self, *, owner_id: str) -> ProfileRecord | None:
        """Fetch the owner's record with a strongly consistent read."""
        logger.debug("Fetching profile record", extra={"user_id": owner_id})

        try:
            response = self._db.get_item(key={"user_id": owner_id}, consistent_read=True)
            item = response.get("Item")

            if item is None:
                return None

            return ProfileRecord.model_validate(item)

        except PydanticValidationError as exc:
            logger.error("Invalid profile record format", extra={"user_id": owner_id})
            raise RecordFetchError(
                message="Invalid profile record format",
                details={"user_id": owner_id},
            ) from exc

        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"user_id": owner_id})
            raise RecordFetchError(
                message="Unable to retrieve user profile",
                details={"user_id": owner_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching profile record")
            raise RecordFetchError(
                message="Unable to retrieve user profile",
                details={"user_id": owner_id},
            ) from exc

    def set_current_key(self, *, owner_id: str, key: str) -> None:
        """Point an existing record at key; never creates a record."""
        logger.debug("Updating profile image key", extra={"user_id": owner_id, "key": key})

        try:
            self._db.update_item(
                key={"user_id": owner_id},
                update_expression="SET profile_image_key = :key, updated_at = :updated_at",
                expression_values={":key": key, ":updated_at": utc_now_iso()},
                condition_expression="attribute_exists(user_id)",
            )
            logger.info("Profile image key updated", extra={"user_id": owner_id, "key": key})

        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            logger.error(
                "DynamoDB update_item failed",
                extra={"user_id": owner_id, "key": key, "error_code": code},
            )
            raise RecordUpdateError(
                message="Unable to update user profile",
                details={
                    "user_id": owner_id,
                    "reason": "missing_record" if code == "ConditionalCheckFailedException" else code,
                },
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating profile record")
            raise RecordUpdateError(
                message="Unable to update user profile",
                details={"user_id": owner_id},
            ) from exc
