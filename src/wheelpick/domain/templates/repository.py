"""テンプレート一覧と選択状態の永続化を担当するリポジトリ。"""

from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional

from ...infrastructure.settings import KeyValueStore
from .models import SCHEMA_VERSION, Template

__all__ = [
    "CURRENT_TEMPLATE_KEY",
    "HIDE_PICKED_KEY",
    "TEMPLATES_KEY",
    "TemplateRepository",
]

LOGGER = logging.getLogger(__name__)

TEMPLATES_KEY = "wheelpick/templates"
CURRENT_TEMPLATE_KEY = "wheelpick/currentTemplateId"
HIDE_PICKED_KEY = "wheelpick/hidePickedEnabled"


class TemplateRepository:
    """キー・バリューストア上の 3 つのキーを読み書きする。

    テンプレート一覧は常に全体を 1 つの JSON として保存する。
    読み込みに失敗した場合は空の一覧として扱い、例外は送出しない。
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    # テンプレート一覧 --------------------------------------------------
    def load_templates(self) -> List[Template]:
        raw = self._store.get_item(TEMPLATES_KEY)
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError):
            LOGGER.warning("テンプレート一覧の JSON デコードに失敗しました")
            return []
        return self._parse_templates(self._unwrap(payload))

    def save_templates(self, templates: Iterable[Template]) -> None:
        payload = {
            "version": SCHEMA_VERSION,
            "templates": [template.to_payload() for template in templates],
        }
        self._store.set_item(TEMPLATES_KEY, json.dumps(payload, ensure_ascii=False))
        self._store.sync()

    # 選択状態 ----------------------------------------------------------
    def current_template_id(self) -> str:
        return self._store.get_item(CURRENT_TEMPLATE_KEY) or ""

    def set_current_template_id(self, template_id: Optional[str]) -> None:
        self._store.set_item(CURRENT_TEMPLATE_KEY, template_id or "")
        self._store.sync()

    def hide_picked_enabled(self) -> bool:
        return self._store.get_item(HIDE_PICKED_KEY) == "true"

    def set_hide_picked_enabled(self, enabled: bool) -> None:
        self._store.set_item(HIDE_PICKED_KEY, "true" if enabled else "false")
        self._store.sync()

    # 内部処理 ----------------------------------------------------------
    @staticmethod
    def _unwrap(payload: object) -> object:
        """バージョン付きエンベロープから一覧部分を取り出す。"""

        # バージョン導入前は配列をそのまま保存していた。
        if isinstance(payload, list):
            return payload
        if not isinstance(payload, dict):
            return None
        version = payload.get("version")
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            LOGGER.warning("未対応のテンプレートスキーマです: version=%r", version)
            return None
        return payload.get("templates")

    @staticmethod
    def _parse_templates(templates_payload: object) -> List[Template]:
        if not isinstance(templates_payload, list):
            return []
        templates: List[Template] = []
        for item in templates_payload:
            if not isinstance(item, dict):
                continue
            template = Template.from_payload(item)
            if template is not None:
                templates.append(template)
        return templates
