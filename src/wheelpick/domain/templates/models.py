"""テンプレートと選択肢のデータモデル。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

__all__ = [
    "DEFAULT_TEMPLATE_NAME",
    "NEW_TEMPLATE_NAME",
    "Option",
    "OptionType",
    "SCHEMA_VERSION",
    "Template",
]

SCHEMA_VERSION = 1

DEFAULT_TEMPLATE_NAME = "Default"
NEW_TEMPLATE_NAME = "New Template"


class OptionType(str, Enum):
    """選択肢の種別。"""

    TEXT = "text"
    SUBTEMPLATE = "subtemplate"

    @classmethod
    def parse(cls, value: object) -> "OptionType":
        """文字列から種別を復元する。未知の値は ``TEXT`` とみなす。"""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.TEXT


def _unique(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    result: List[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


@dataclass(slots=True)
class Option:
    """ルーレットに並ぶ 1 項目。"""

    id: str
    label: str
    type: OptionType = OptionType.TEXT
    sub_template_id: Optional[str] = None
    enabled: bool = True

    def __post_init__(self) -> None:
        # 文字列で渡された種別も列挙型へ揃える。
        self.type = OptionType.parse(self.type)

    @property
    def is_sub_template(self) -> bool:
        return self.type is OptionType.SUBTEMPLATE

    def references(self, template_id: str) -> bool:
        """指定テンプレートをサブテンプレートとして参照しているか。"""

        return self.is_sub_template and self.sub_template_id == template_id

    def to_payload(self) -> Dict[str, Any]:
        """JSON 永続化用の辞書へ変換する。"""

        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "subTemplateId": self.sub_template_id or "",
            "enabled": self.enabled,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Optional["Option"]:
        """辞書から選択肢を復元する。ID を持たないレコードは ``None``。"""

        option_id = payload.get("id")
        if not isinstance(option_id, str) or not option_id:
            return None
        option_type = OptionType.parse(payload.get("type"))
        sub_template_id = None
        if option_type is OptionType.SUBTEMPLATE:
            raw_sub = payload.get("subTemplateId")
            sub_template_id = raw_sub if isinstance(raw_sub, str) and raw_sub else None
        label = payload.get("label")
        return cls(
            id=option_id,
            label=label if isinstance(label, str) else "",
            type=option_type,
            sub_template_id=sub_template_id,
            # 旧データでは enabled が欠落している場合がある。
            enabled=payload.get("enabled") is not False,
        )


@dataclass(slots=True)
class Template:
    """名前付きの選択肢リストと、抽選済みとして隠す ID 集合。"""

    id: str
    name: str
    options: List[Option] = field(default_factory=list)
    hidden_option_ids: List[str] = field(default_factory=list)

    def option(self, option_id: str) -> Optional[Option]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def references(self, template_id: str) -> bool:
        """いずれかの選択肢が指定テンプレートを参照しているか。"""

        return any(option.references(template_id) for option in self.options)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "options": [option.to_payload() for option in self.options],
            "hiddenOptionIds": list(self.hidden_option_ids),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Optional["Template"]:
        """辞書からテンプレートを復元し、欠落フィールドを既定値で補う。"""

        template_id = payload.get("id")
        if not isinstance(template_id, str) or not template_id:
            return None
        name = payload.get("name")
        options: List[Option] = []
        raw_options = payload.get("options")
        if isinstance(raw_options, list):
            for item in raw_options:
                if not isinstance(item, Mapping):
                    continue
                option = Option.from_payload(item)
                if option is not None:
                    options.append(option)
        hidden: List[str] = []
        raw_hidden = payload.get("hiddenOptionIds")
        if isinstance(raw_hidden, list):
            hidden = _unique(entry for entry in raw_hidden if isinstance(entry, str))
        return cls(
            id=template_id,
            name=name if isinstance(name, str) else NEW_TEMPLATE_NAME,
            options=options,
            hidden_option_ids=hidden,
        )
