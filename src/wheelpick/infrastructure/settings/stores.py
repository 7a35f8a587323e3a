"""キー・バリューストアの実装と抽象。"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from ..paths import get_app_config_dir

LOGGER = logging.getLogger(__name__)

BACKEND_ENV = "WHEELPICK_STORE_BACKEND"
STORE_FILENAME = "store.json"


class KeyValueStore(Protocol):
    """文字列キーと文字列値を扱う最小インターフェース。"""

    def get_item(self, key: str) -> Optional[str]:
        """キーに紐づく値を返す。存在しない場合は ``None``。"""

    def set_item(self, key: str, value: str) -> None:
        """キーへ値を書き込む。"""

    def remove_item(self, key: str) -> None:
        """キーを削除する。存在しなくてもエラーにしない。"""

    def contains(self, key: str) -> bool:
        """キーが存在するかを返す。"""

    def sync(self) -> None:
        """ストアへ変更を確定する。"""


@dataclass(slots=True)
class InMemoryKeyValueStore:
    """Qt へ依存しないインメモリストア。"""

    _items: Dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._items

    def sync(self) -> None:
        # インメモリ実装では同期処理は不要。
        return None


@dataclass(slots=True)
class QtKeyValueStore:
    """Qt の :class:`QSettings` をラップしたストア。"""

    _settings: Any

    def get_item(self, key: str) -> Optional[str]:
        value = self._settings.value(key, None)
        if value is None:
            return None
        if isinstance(value, str):
            return value
        # INI バックエンドでは bool や数値として戻る場合がある。
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def set_item(self, key: str, value: str) -> None:
        self._settings.setValue(key, str(value))

    def remove_item(self, key: str) -> None:
        self._settings.remove(key)

    def contains(self, key: str) -> bool:
        return bool(self._settings.contains(key))

    def sync(self) -> None:
        self._settings.sync()


class JsonFileKeyValueStore:
    """ユーザー設定ディレクトリの JSON ファイルへ保存するストア。

    変更はメモリ上に保持し、``sync`` でファイルへ書き出す。
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_app_config_dir() / STORE_FILENAME
        self._items: Dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    # 公開 API ----------------------------------------------------------
    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._items

    def sync(self) -> None:
        self._persist()

    # 内部処理 ----------------------------------------------------------
    def _load(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("ストアファイルの読み込みに失敗しました: %s", self._path)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {
            str(key): value
            for key, value in payload.items()
            if isinstance(value, str)
        }

    def _persist(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(self._items, handle, ensure_ascii=False, indent=2)


def _load_qsettings_class() -> Optional[type[Any]]:
    """QtPy から ``QSettings`` を遅延インポートする。"""

    try:
        from qtpy import QtCore
    except Exception:  # pragma: no cover - QtPy が利用できない環境向け
        return None
    qsettings = getattr(QtCore, "QSettings", None)
    if qsettings is None:
        return None
    return qsettings


def create_key_value_store(
    organization: str = "Wheelpick",
    application: str = "Templates",
    backend: Optional[str] = None,
) -> KeyValueStore:
    """指定または利用可能なバックエンドに応じてストアを生成する。"""

    name = (backend or os.environ.get(BACKEND_ENV) or "").strip().lower()
    if name == "memory":
        return InMemoryKeyValueStore()
    if name == "json":
        return JsonFileKeyValueStore()
    if name not in ("", "qt"):
        raise ValueError(f"未知のストアバックエンドです: {name}")

    qsettings_cls = _load_qsettings_class()
    if qsettings_cls is None:
        LOGGER.info("QSettings が利用できないためインメモリストアを使用します")
        return InMemoryKeyValueStore()
    return QtKeyValueStore(qsettings_cls(organization, application))


__all__ = [
    "BACKEND_ENV",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "QtKeyValueStore",
    "STORE_FILENAME",
    "create_key_value_store",
]
