"""DynamoDB service wrapper for table operations."""

import os
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

# Module-level singleton for connection reuse
_dynamodb_service_instance: "DynamoDBService | None" = None


def get_dynamodb_service(
    environment: str | None = None,
    name_prefix: str | None = None,
) -> "DynamoDBService":
    """Get or create the singleton DynamoDB service instance.

    Args:
        environment: Environment name. Only used on first call.
        name_prefix: Table name prefix. Only used on first call.

    Returns:
        Shared DynamoDBService instance
    """
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment, name_prefix)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Reset the singleton instance (for testing only).

    This allows tests to create a fresh DynamoDBService inside
    a mock_aws context.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


class DynamoDBService:
    """Service for DynamoDB operations with environment-aware table names."""

    def __init__(
        self,
        environment: str | None = None,
        name_prefix: str | None = None,
    ) -> None:
        """Initialize DynamoDB service.

        Args:
            environment: Environment name (dev/prod). Defaults to ENVIRONMENT env var.
            name_prefix: Table name prefix. Defaults to DYNAMODB_TABLE_PREFIX or
                ``safari-{environment}``.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.name_prefix = name_prefix or os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"safari-{self.environment}"
        )
        self._dynamodb = boto3.resource("dynamodb")

    def _table_name(self, table: str) -> str:
        """Get full table name with prefix."""
        return f"{self.name_prefix}-{table}"

    def _get_table(self, table: str) -> Any:
        """Get DynamoDB table resource."""
        return self._dynamodb.Table(self._table_name(table))

    def get_item(
        self,
        table: str,
        key: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Get a single item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict

        Returns:
            Item dict or None if not found
        """
        response = self._get_table(table).get_item(Key=key)
        item: dict[str, Any] | None = response.get("Item")
        return item

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: Any | None = None,
    ) -> bool:
        """Put an item into the table.

        Args:
            table: Table name without prefix
            item: Item to store
            condition_expression: Optional condition for the write, either a
                string or a boto3 Attr condition

        Returns:
            True if successful, False if condition failed
        """
        try:
            kwargs: dict[str, Any] = {"Item": item}
            if condition_expression is not None:
                kwargs["ConditionExpression"] = condition_expression

            self._get_table(table).put_item(**kwargs)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise

    def query(
        self,
        table: str,
        key_condition: Any,
        index_name: str | None = None,
        filter_expression: Any | None = None,
        scan_index_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """Query table or GSI, following pagination.

        Args:
            table: Table name without prefix
            key_condition: Boto3 Key condition
            index_name: GSI name (optional)
            filter_expression: Additional filter (optional)
            scan_index_forward: Sort order (True=ascending)

        Returns:
            List of items
        """
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ScanIndexForward": scan_index_forward,
        }
        if index_name:
            kwargs["IndexName"] = index_name
        if filter_expression:
            kwargs["FilterExpression"] = filter_expression

        return self._paginate(self._get_table(table).query, kwargs)

    def scan(
        self,
        table: str,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Scan a whole table, following pagination.

        Args:
            table: Table name without prefix
            filter_expression: Optional boto3 Attr condition

        Returns:
            List of items
        """
        kwargs: dict[str, Any] = {}
        if filter_expression:
            kwargs["FilterExpression"] = filter_expression

        return self._paginate(self._get_table(table).scan, kwargs)

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        partition_key_name: str,
        partition_key_value: str,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Query a GSI by partition key.

        Args:
            table: Table name without prefix
            index_name: GSI name
            partition_key_name: Name of partition key attribute
            partition_key_value: Value to query
            filter_expression: Optional additional filter

        Returns:
            List of items
        """
        key_condition = Key(partition_key_name).eq(partition_key_value)
        return self.query(
            table,
            key_condition,
            index_name=index_name,
            filter_expression=filter_expression,
        )

    def _paginate(self, operation: Any, kwargs: dict[str, Any]) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        while True:
            response = operation(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key
