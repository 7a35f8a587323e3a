"""テンプレートストア関連のエクスポート。"""

from .errors import TemplateStoreError, ValidationError
from .identifiers import generate_id
from .models import (
    DEFAULT_TEMPLATE_NAME,
    NEW_TEMPLATE_NAME,
    SCHEMA_VERSION,
    Option,
    OptionType,
    Template,
)
from .repository import TemplateRepository
from .service import TemplateStore

__all__ = [
    "DEFAULT_TEMPLATE_NAME",
    "NEW_TEMPLATE_NAME",
    "Option",
    "OptionType",
    "SCHEMA_VERSION",
    "Template",
    "TemplateRepository",
    "TemplateStore",
    "TemplateStoreError",
    "ValidationError",
    "generate_id",
]
