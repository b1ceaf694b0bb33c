#!/usr/bin/env python3
"""Create (or clear) the DynamoDB tables used by the safari booking API.

Creates ``{prefix}-cancellation-requests`` with its status and requester
indexes if it does not exist yet.

Usage:
    python backend/scripts/create_tables.py --env dev
    python backend/scripts/create_tables.py --env dev --clear
    python backend/scripts/create_tables.py --prefix my-safari --region eu-west-1
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any

# Add the shared package to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "shared" / "src"))

import boto3  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402

from safari_shared.services.cancellation_store import table_definition  # noqa: E402


def ensure_table(dynamodb: Any, definition: dict[str, Any]) -> bool:
    """Create a table unless it exists.

    Returns:
        True if the table was created
    """
    name = definition["TableName"]
    try:
        dynamodb.create_table(**definition)
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            return False
        raise
    dynamodb.get_waiter("table_exists").wait(TableName=name)
    return True


def clear_table(dynamodb: Any, table_name: str, key_names: list[str]) -> int:
    """Delete every item of a table.

    Returns:
        Number of items deleted
    """
    table = boto3.resource("dynamodb", region_name=dynamodb.meta.region_name).Table(
        table_name
    )
    scan_kwargs: dict[str, Any] = {"ProjectionExpression": ", ".join(key_names)}
    deleted = 0

    while True:
        response = table.scan(**scan_kwargs)
        with table.batch_writer() as batch:
            for item in response.get("Items", []):
                batch.delete_item(Key={k: item[k] for k in key_names})
                deleted += 1
        if "LastEvaluatedKey" not in response:
            return deleted
        scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]


def main() -> int:
    parser = argparse.ArgumentParser(description="Create safari booking DynamoDB tables")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--prefix",
        default=os.environ.get("DYNAMODB_TABLE_PREFIX"),
        help="Table name prefix (default: DYNAMODB_TABLE_PREFIX or safari-{env})",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "eu-west-1"),
        help="AWS region (default: eu-west-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete all cancellation requests after ensuring the table exists",
    )
    args = parser.parse_args()

    prefix = args.prefix or f"safari-{args.env}"
    definition = table_definition(prefix)
    table_name = definition["TableName"]

    if args.clear and args.env == "prod":
        confirm = input("WARNING: this deletes PRODUCTION cancellation requests. Type 'yes': ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    dynamodb = boto3.client("dynamodb", region_name=args.region)
    try:
        created = ensure_table(dynamodb, definition)
        print(f"{'Created' if created else 'Exists '} {table_name}")

        if args.clear:
            count = clear_table(dynamodb, table_name, ["request_id"])
            print(f"Deleted {count} items from {table_name}")
    except ClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
