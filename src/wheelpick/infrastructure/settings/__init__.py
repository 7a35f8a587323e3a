"""キー・バリューストア抽象の公開 API。"""

from .stores import (
    BACKEND_ENV,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    QtKeyValueStore,
    create_key_value_store,
)

__all__ = [
    "BACKEND_ENV",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "QtKeyValueStore",
    "create_key_value_store",
]
