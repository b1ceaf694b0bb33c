"""DynamoDB-backed store for cancellation requests.

Table ``{prefix}-cancellation-requests``:
- hash key ``request_id``
- GSI ``status-index`` on ``status``
- GSI ``requested_by-index`` on ``requested_by``

Amounts are stored as DynamoDB numbers (Decimal), timestamps as ISO strings.
"""

import datetime as dt
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Attr

from safari_shared.models import CancellationRequest, CancellationRequestStatus
from safari_shared.services.dynamodb import DynamoDBService
from safari_shared.utils.logging import get_logger

logger = get_logger(__name__)


TABLE = "cancellation-requests"
STATUS_INDEX = "status-index"
REQUESTED_BY_INDEX = "requested_by-index"


def table_definition(name_prefix: str) -> dict[str, Any]:
    """create_table arguments for the cancellation requests table."""
    return {
        "TableName": f"{name_prefix}-{TABLE}",
        "KeySchema": [{"AttributeName": "request_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "request_id", "AttributeType": "S"},
            {"AttributeName": "status", "AttributeType": "S"},
            {"AttributeName": "requested_by", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": STATUS_INDEX,
                "KeySchema": [{"AttributeName": "status", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": REQUESTED_BY_INDEX,
                "KeySchema": [{"AttributeName": "requested_by", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


class DynamoDBCancellationRequestRepository:
    """CancellationRequestRepository persisted in DynamoDB."""

    def __init__(self, db: DynamoDBService) -> None:
        self.db = db

    def add(self, request: CancellationRequest) -> bool:
        """Store a new request; False if the request ID is already taken."""
        created = self.db.put_item(
            TABLE,
            self._request_to_item(request),
            condition_expression="attribute_not_exists(request_id)",
        )
        if not created:
            logger.warning("Cancellation request %s already exists", request.request_id)
        return created

    def save(
        self,
        request: CancellationRequest,
        expected_status: CancellationRequestStatus,
    ) -> bool:
        """Overwrite a request only if its stored status is still ``expected_status``."""
        saved = self.db.put_item(
            TABLE,
            self._request_to_item(request),
            condition_expression=Attr("status").eq(expected_status.value),
        )
        if saved:
            logger.debug("Saved cancellation request %s", request.request_id)
        else:
            logger.warning(
                "Cancellation request %s is no longer %s",
                request.request_id,
                expected_status.value,
            )
        return saved

    def get(self, request_id: str) -> CancellationRequest | None:
        item = self.db.get_item(TABLE, {"request_id": request_id})
        if not item:
            return None
        return self._item_to_request(item)

    def list(
        self,
        status: CancellationRequestStatus | None = None,
        requested_by: str | None = None,
    ) -> list[CancellationRequest]:
        if requested_by is not None:
            items = self.db.query_by_gsi(
                TABLE,
                index_name=REQUESTED_BY_INDEX,
                partition_key_name="requested_by",
                partition_key_value=requested_by,
                filter_expression=Attr("status").eq(status.value) if status else None,
            )
        elif status is not None:
            items = self.db.query_by_gsi(
                TABLE,
                index_name=STATUS_INDEX,
                partition_key_name="status",
                partition_key_value=status.value,
            )
        else:
            items = self.db.scan(TABLE)

        requests = [self._item_to_request(item) for item in items]
        requests.sort(key=lambda r: r.created_at)
        return requests

    def _request_to_item(self, request: CancellationRequest) -> dict[str, Any]:
        """Convert CancellationRequest to DynamoDB item."""
        return {
            "request_id": request.request_id,
            "booking_id": request.booking_id,
            "reason": request.reason,
            "requested_by": request.requested_by,
            "cancellation_date": request.cancellation_date.isoformat(),
            "refund_amount": request.refund_amount,
            "processing_fee": request.processing_fee,
            "total_refund": request.total_refund,
            "policy_id": request.policy_id,
            "status": request.status.value,
            "admin_notes": request.admin_notes,
            "created_at": request.created_at.isoformat(),
            "updated_at": request.updated_at.isoformat(),
        }

    def _item_to_request(self, item: dict[str, Any]) -> CancellationRequest:
        """Convert DynamoDB item to CancellationRequest model."""
        return CancellationRequest(
            request_id=item["request_id"],
            booking_id=item["booking_id"],
            reason=item.get("reason", ""),
            requested_by=item["requested_by"],
            cancellation_date=dt.datetime.fromisoformat(item["cancellation_date"]),
            refund_amount=Decimal(str(item["refund_amount"])),
            processing_fee=Decimal(str(item["processing_fee"])),
            total_refund=Decimal(str(item["total_refund"])),
            policy_id=item["policy_id"],
            status=CancellationRequestStatus(item["status"]),
            admin_notes=item.get("admin_notes", ""),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )
