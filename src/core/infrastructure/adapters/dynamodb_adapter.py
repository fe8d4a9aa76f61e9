"""Thin DynamoDB adapter wrapping boto3 table operations."""

from typing import Any, Protocol, cast

import boto3

from core.config import MediaSettings


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Minimal DynamoDB adapter protocol (repository-facing)."""

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = ...) -> dict[str, Any]: ...

    def update_item(
        self,
        *,
        key: dict[str, Any],
        update_expression: str,
        expression_values: dict[str, Any],
        condition_expression: str | None = ...,
    ) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 DynamoDB resource
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(
        self,
        *,
        table_name: str,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        """Initialize DynamoDB table handle."""
        if not table_name:
            raise RuntimeError("DynamoDB table name is required")

        dynamodb = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
        )

        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            dynamodb.Table(table_name),
        )

    @classmethod
    def from_settings(cls, settings: MediaSettings) -> "DynamoDBAdapter":
        return cls(
            table_name=settings.profile_table_name,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]:
        """Retrieve item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=consistent_read)

    def update_item(
        self,
        *,
        key: dict[str, Any],
        update_expression: str,
        expression_values: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """Update attributes of an existing item.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Key": key,
            "UpdateExpression": update_expression,
            "ExpressionAttributeValues": expression_values,
        }

        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        return self.table.update_item(**kwargs)
