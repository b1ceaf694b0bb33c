"""Unit tests for the table setup script (moto)."""

import importlib.util
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

from safari_shared.services.cancellation_store import table_definition

SCRIPT = Path(__file__).parents[2] / "scripts" / "create_tables.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("create_tables", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def dynamodb(aws_credentials):
    with mock_aws():
        yield boto3.client("dynamodb", region_name="eu-west-1")


class TestEnsureTable:
    def test_creates_once(self, script, dynamodb) -> None:
        definition = table_definition("unit-safari")

        assert script.ensure_table(dynamodb, definition) is True
        assert script.ensure_table(dynamodb, definition) is False

        described = dynamodb.describe_table(TableName="unit-safari-cancellation-requests")
        indexes = {i["IndexName"] for i in described["Table"]["GlobalSecondaryIndexes"]}
        assert indexes == {"status-index", "requested_by-index"}


class TestClearTable:
    def test_deletes_all_items(self, script, dynamodb) -> None:
        script.ensure_table(dynamodb, table_definition("unit-safari"))
        table = boto3.resource("dynamodb", region_name="eu-west-1").Table(
            "unit-safari-cancellation-requests"
        )
        for i in range(3):
            table.put_item(
                Item={"request_id": f"CXL-{i}", "status": "pending", "requested_by": "a"}
            )

        deleted = script.clear_table(dynamodb, "unit-safari-cancellation-requests", ["request_id"])

        assert deleted == 3
        assert table.scan()["Items"] == []
