"""DynamoDB-backed keyed store for multi-instance deployments."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from riskgate.common.exceptions import StoreError
from riskgate.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class DynamoDBKeyValueStore(KeyValueStore):
    """DynamoDB table holding one item per key.

    Item shape: {"pk": <key>, "payload": <json text>, "ttl_timestamp": <epoch>}.
    The table's TTL attribute should be set to ttl_timestamp. DynamoDB deletes
    expired items lazily, so reads also check ttl_timestamp themselves.
    """

    DEFAULT_REGION = "us-east-1"
    TTL_ATTRIBUTE = "ttl_timestamp"

    def __init__(
        self,
        table_name: Optional[str] = None,
        region: Optional[str] = None,
        aws_profile: Optional[str] = None,
    ):
        self.table_name = table_name or os.environ.get("RISKGATE_DYNAMODB_TABLE")
        if not self.table_name:
            raise ValueError("RISKGATE_DYNAMODB_TABLE required")

        self.region = region or os.environ.get("AWS_REGION", self.DEFAULT_REGION)

        if aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.dynamodb = session.resource("dynamodb", region_name=self.region)
        else:
            self.dynamodb = boto3.resource("dynamodb", region_name=self.region)

        self.table = self.dynamodb.Table(self.table_name)
        logger.info(f"DynamoDB store initialized: {self.table_name} ({self.region})")

    @staticmethod
    def _now() -> int:
        return int(datetime.now(timezone.utc).timestamp())

    def _is_expired(self, item: dict) -> bool:
        ttl = item.get(self.TTL_ATTRIBUTE)
        return ttl is not None and int(ttl) <= self._now()

    def get(self, key: str) -> Optional[Any]:
        try:
            resp = self.table.get_item(Key={"pk": key})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"get failed ({key}): {e}")
            raise StoreError("Keyed store read failed", key=key) from e

        item = resp.get("Item")
        if item is None or self._is_expired(item):
            return None
        try:
            return json.loads(item["payload"])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"undecodable payload ({key}): {e}")
            raise StoreError("Keyed store payload undecodable", key=key) from e

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        item = {"pk": key, "payload": json.dumps(value)}
        if ttl_seconds is not None:
            item[self.TTL_ATTRIBUTE] = self._now() + int(ttl_seconds)
        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"put failed ({key}): {e}")
            raise StoreError("Keyed store write failed", key=key) from e

    def delete(self, key: str) -> None:
        try:
            self.table.delete_item(Key={"pk": key})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"delete failed ({key}): {e}")
            raise StoreError("Keyed store delete failed", key=key) from e

    def list(self, prefix: str = "") -> List[str]:
        keys: List[str] = []
        scan_kwargs = {"ProjectionExpression": "pk, ttl_timestamp"}
        if prefix:
            scan_kwargs["FilterExpression"] = Attr("pk").begins_with(prefix)
        try:
            while True:
                resp = self.table.scan(**scan_kwargs)
                keys.extend(
                    item["pk"] for item in resp.get("Items", [])
                    if not self._is_expired(item)
                )
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (ClientError, BotoCoreError) as e:
            logger.error(f"list failed ({prefix}): {e}")
            raise StoreError("Keyed store scan failed", details={"prefix": prefix}) from e
        return sorted(keys)

    def health_check(self) -> bool:
        try:
            self.table.table_status
            return True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False
