"""テンプレートストアの例外。"""

from __future__ import annotations

__all__ = [
    "MSG_ENTER_OPTION_LABEL",
    "MSG_SELECT_SUB_TEMPLATE",
    "MSG_SUB_TEMPLATE_NOT_FOUND",
    "MSG_UNKNOWN_OPTION_TYPE",
    "TemplateStoreError",
    "ValidationError",
]

MSG_ENTER_OPTION_LABEL = "Please enter option label"
MSG_SELECT_SUB_TEMPLATE = "Please select a sub-template"
MSG_SUB_TEMPLATE_NOT_FOUND = "Sub-template not found"
MSG_UNKNOWN_OPTION_TYPE = "Unknown option type"


class TemplateStoreError(RuntimeError):
    """本パッケージの基底例外。"""


class ValidationError(TemplateStoreError):
    """ユーザー入力が不足または不正。

    ``message_key`` は UI 側で翻訳キーとしてそのまま利用できる。
    """

    def __init__(self, message_key: str, detail: str | None = None) -> None:
        super().__init__(detail or message_key)
        self.message_key = message_key
