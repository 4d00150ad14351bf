"""DynamoDB-backed record store."""

import logging
import time
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import StoreError
from ..utils.logging import get_logger, log_with_context
from .base import KeyedRecord, Record, RecordStore, sort_records


logger = get_logger("DynamoDBStore")

COUNTERS = "__counters__"
HASH_KEY = "collection"
RANGE_KEY = "key"


class DynamoDBStore(RecordStore):
    """
    Single-table store.

    Items are addressed by ``collection`` (hash key) and ``key`` (range key).
    A collection is read with a paginated Query and ordered client-side, which
    is fine for catalog-sized collections. Id counters are items of the
    ``__counters__`` collection advanced with an atomic ADD.
    """

    def __init__(self, client: Any, table_name: str):
        """
        Args:
            client: boto3 low-level DynamoDB client
            table_name: Table with string hash key ``collection`` and range key ``key``
        """
        self.client = client
        self.table_name = table_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def put(self, collection: str, record: Record, key: Optional[str] = None) -> str:
        key = key or uuid.uuid4().hex
        item = {name: value for name, value in record.items() if value is not None}
        item[HASH_KEY] = collection
        item[RANGE_KEY] = key

        self._call(
            "PutItem",
            collection,
            lambda: self.client.put_item(
                TableName=self.table_name,
                Item={name: self._serializer.serialize(value) for name, value in item.items()},
            ),
        )
        return key

    def delete(self, collection: str, key: str) -> None:
        # DeleteItem on a missing key succeeds without error
        self._call(
            "DeleteItem",
            collection,
            lambda: self.client.delete_item(
                TableName=self.table_name,
                Key=self._key(collection, key),
            ),
        )

    def query(self, collection: str, order_by: str, descending: bool = False) -> List[KeyedRecord]:
        start_time = time.time()
        items: List[KeyedRecord] = []
        request: Dict[str, Any] = {
            "TableName": self.table_name,
            "KeyConditionExpression": "#c = :c",
            "ExpressionAttributeNames": {"#c": HASH_KEY},
            "ExpressionAttributeValues": {":c": {"S": collection}},
        }

        while True:
            response = self._call("Query", collection, lambda: self.client.query(**request))
            for raw in response.get("Items", []):
                record = self._deserialize(raw)
                record.pop(HASH_KEY, None)
                key = record.pop(RANGE_KEY)
                items.append((key, record))

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            request["ExclusiveStartKey"] = last_key

        log_with_context(
            logger,
            logging.DEBUG,
            "Collection queried",
            context={"collection": collection, "count": len(items)},
            execution_time_ms=(time.time() - start_time) * 1000,
        )
        return sort_records(items, order_by, descending)

    def count(self, collection: str) -> int:
        total = 0
        request: Dict[str, Any] = {
            "TableName": self.table_name,
            "KeyConditionExpression": "#c = :c",
            "ExpressionAttributeNames": {"#c": HASH_KEY},
            "ExpressionAttributeValues": {":c": {"S": collection}},
            "Select": "COUNT",
        }
        while True:
            response = self._call("Query", collection, lambda: self.client.query(**request))
            total += response.get("Count", 0)
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return total
            request["ExclusiveStartKey"] = last_key

    def allocate_ids(self, collection: str, count: int) -> int:
        if count <= 0:
            raise ValueError("count must be positive")

        response = self._call(
            "UpdateItem",
            collection,
            lambda: self.client.update_item(
                TableName=self.table_name,
                Key=self._key(COUNTERS, collection),
                UpdateExpression="ADD #n :count",
                ExpressionAttributeNames={"#n": "last_id"},
                ExpressionAttributeValues={":count": {"N": str(count)}},
                ReturnValues="UPDATED_NEW",
            ),
        )
        last_id = int(response["Attributes"]["last_id"]["N"])
        return last_id - count + 1

    def _key(self, collection: str, key: str) -> Dict[str, Dict[str, str]]:
        return {HASH_KEY: {"S": collection}, RANGE_KEY: {"S": key}}

    def _deserialize(self, raw: Dict[str, Any]) -> Record:
        record = {}
        for name, value in raw.items():
            plain = self._deserializer.deserialize(value)
            if isinstance(plain, Decimal):
                plain = int(plain) if plain == plain.to_integral_value() else float(plain)
            record[name] = plain
        return record

    def _call(self, operation: str, collection: str, fn):
        try:
            return fn()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            log_with_context(
                logger,
                logging.ERROR,
                f"DynamoDB {operation} failed",
                context={"table": self.table_name, "collection": collection, "error": str(e)},
                error_code=error_code,
            )
            raise StoreError(f"{operation} on {collection} failed: {error_code}") from e
        except BotoCoreError as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"DynamoDB {operation} failed",
                context={"table": self.table_name, "collection": collection, "error": str(e)},
            )
            raise StoreError(f"{operation} on {collection} failed: {e}") from e
