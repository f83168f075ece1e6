# src/event_api/clients.py

"""
Storage clients for the Event API.

`EventStore` is the contract the service layer depends on. `DynamoDBEventStore`
implements it over a boto3 DynamoDB ``Table`` resource and is the only place
that knows about DynamoDB request shapes, ``Decimal`` numbers and botocore
exceptions. Every failure leaves this module as a `StorageError`.
"""

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import StorageError

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import Table

logger = logging.getLogger(__name__)

KEY_ATTRIBUTE = "id"


class EventStore(Protocol):
    """Key-value persistence for events, keyed by event id."""

    def put(self, item: dict[str, Any]) -> None: ...

    def scan(self, projection: Sequence[str]) -> list[dict[str, Any]]: ...

    def get(self, event_id: str) -> dict[str, Any] | None: ...

    def delete(self, event_id: str) -> None: ...


def _to_dynamo(value: Any) -> Any:
    """The boto3 resource layer refuses floats; store them as Decimal."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo(v) for v in value]
    return value


def _from_dynamo(value: Any) -> Any:
    """Turn DynamoDB Decimals back into the int or float that was written."""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


def _storage_error(operation: str, table_name: str, error: Exception) -> StorageError:
    if isinstance(error, ClientError):
        error_code = error.response["Error"]["Code"]
        error_message = error.response["Error"]["Message"]
        return StorageError(
            f"DynamoDB {operation} failed: {error_message}",
            operation=operation,
            context={
                "table": table_name,
                "aws_error_code": error_code,
                "aws_error_message": error_message,
            },
        )
    return StorageError(
        f"DynamoDB {operation} failed: {error}",
        operation=operation,
        context={"table": table_name, "connection_error": str(error)},
    )


class DynamoDBEventStore:
    """
    A wrapper for DynamoDB table operations on the events table.
    """

    def __init__(self, table: "Table"):
        """
        Initializes the DynamoDBEventStore.

        Args:
            table: A boto3 DynamoDB Table resource whose hash key is ``id``.
        """
        self._table = table

    @property
    def table_name(self) -> str:
        return self._table.name

    def put(self, item: dict[str, Any]) -> None:
        logger.debug(
            "Putting event",
            extra={"table": self.table_name, KEY_ATTRIBUTE: item.get(KEY_ATTRIBUTE)},
        )
        try:
            self._table.put_item(Item=_to_dynamo(item))
        except (ClientError, BotoCoreError) as e:
            raise _storage_error("PutItem", self.table_name, e) from e

    def scan(self, projection: Sequence[str]) -> list[dict[str, Any]]:
        """
        Returns every item in the table, reduced to the *projection* attributes.

        Follows ``LastEvaluatedKey`` until the table is exhausted, so callers
        always get the full contents in one list.
        """
        # Placeholders keep attribute names such as "description" clear of
        # DynamoDB's reserved words.
        names = {f"#p{i}": attr for i, attr in enumerate(projection)}
        scan_kwargs: dict[str, Any] = {
            "ProjectionExpression": ", ".join(names),
            "ExpressionAttributeNames": names,
        }

        items: list[dict[str, Any]] = []
        pages = 0
        try:
            while True:
                response = self._table.scan(**scan_kwargs)
                pages += 1
                items.extend(_from_dynamo(item) for item in response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (ClientError, BotoCoreError) as e:
            raise _storage_error("Scan", self.table_name, e) from e

        logger.debug(
            "Scan completed",
            extra={"table": self.table_name, "items": len(items), "pages": pages},
        )
        return items

    def get(self, event_id: str) -> dict[str, Any] | None:
        try:
            response = self._table.get_item(Key={KEY_ATTRIBUTE: event_id})
        except (ClientError, BotoCoreError) as e:
            raise _storage_error("GetItem", self.table_name, e) from e

        item = response.get("Item")
        if item is None:
            return None
        return _from_dynamo(item)

    def delete(self, event_id: str) -> None:
        try:
            self._table.delete_item(Key={KEY_ATTRIBUTE: event_id})
        except (ClientError, BotoCoreError) as e:
            raise _storage_error("DeleteItem", self.table_name, e) from e
