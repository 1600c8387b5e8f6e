"""Storage - keyed store contract, backends and record helpers."""

from riskgate.common.config import Config, StoreBackend
from riskgate.storage.base import KeyValueStore
from riskgate.storage.memory import InMemoryKeyValueStore
from riskgate.storage.records import (
    load_record,
    save_record,
    merge,
    read_modify_write,
)


def build_store(config: Config) -> KeyValueStore:
    """Create the store selected by configuration."""
    if config.store_backend == StoreBackend.DYNAMODB:
        from riskgate.storage.dynamodb import DynamoDBKeyValueStore

        return DynamoDBKeyValueStore(
            table_name=config.dynamodb_table,
            region=config.aws_region,
        )
    return InMemoryKeyValueStore()


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "build_store",
    "load_record",
    "save_record",
    "merge",
    "read_modify_write",
]
