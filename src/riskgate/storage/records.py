"""Typed read-modify-write over the keyed store.

Concurrency policy: last writer wins. A record is read, rebuilt by a pure
function and written back without locks or compare-and-set. Two requests
touching the same key at the same instant can lose one update; risk
scoring tolerates a marginally under-counted signal, so no retry is made.
"""

import logging
from typing import Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from riskgate.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def load_record(store: KeyValueStore, key: str, model: Type[M]) -> Optional[M]:
    """Read and validate a record; unreadable records are treated as absent."""
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        logger.warning(
            "Discarding malformed record",
            extra={"key": key, "model": model.__name__, "error_count": e.error_count()},
        )
        return None


def save_record(
    store: KeyValueStore, key: str, record: BaseModel, ttl_seconds: Optional[int] = None
) -> None:
    store.put(key, record.model_dump(mode="json", by_alias=True), ttl_seconds)


def merge(default: M, patch: Optional[M]) -> M:
    """Existing record if present, else the default."""
    return patch if patch is not None else default


def read_modify_write(
    store: KeyValueStore,
    key: str,
    model: Type[M],
    default_factory: Callable[[], M],
    mutate: Callable[[M], M],
    ttl_seconds: Optional[int] = None,
) -> M:
    """Load key (or a default), apply mutate, write the result back.

    Args:
        store: Backing store
        key: Record key
        model: Pydantic model the record validates against
        default_factory: Builds the record when none exists
        mutate: Pure function from old record to new record
        ttl_seconds: Expiry for the written record

    Returns:
        The record that was written
    """
    current = merge(default_factory(), load_record(store, key, model))
    updated = mutate(current)
    save_record(store, key, updated, ttl_seconds)
    return updated
