"""ルーレット画面から利用される抽選フロー。"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from ..templates.errors import MSG_SUB_TEMPLATE_NOT_FOUND, ValidationError
from ..templates.models import Option, Template
from ..templates.service import TemplateStore
from .selection import draw, eligible_options

__all__ = ["SpinOutcome", "WheelService"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpinOutcome:
    """1 回の抽選結果。"""

    template_id: str
    option: Option
    sub_template: Optional[Template] = None

    @property
    def offers_switch(self) -> bool:
        """サブテンプレートへ切り替えを提案すべきか。"""

        return self.sub_template is not None


class WheelService:
    """現在のテンプレートを対象に抽選と抽選済み管理を行う。"""

    def __init__(
        self, store: TemplateStore, rng: Optional[random.Random] = None
    ) -> None:
        self._store = store
        self._rng = rng or random.Random()

    def visible_options(self) -> List[Option]:
        template = self._store.get_current_template()
        return eligible_options(template, self._store.get_hide_picked_enabled())

    def spin(self) -> Optional[SpinOutcome]:
        """抽選して結果を返す。候補が無い場合は ``None``。"""

        template = self._store.get_current_template()
        if template is None:
            return None
        candidates = eligible_options(template, self._store.get_hide_picked_enabled())
        option = draw(candidates, self._rng)
        if option is None:
            LOGGER.debug("抽選対象の選択肢がありません: %s", template.id)
            return None
        self.record_pick(template.id, option.id)
        sub_template = None
        if option.is_sub_template and option.sub_template_id:
            sub_template = self._store.get_template(option.sub_template_id)
        return SpinOutcome(template_id=template.id, option=option, sub_template=sub_template)

    def record_pick(self, template_id: str, option_id: str) -> None:
        """抽選済みモードが有効なら選ばれた選択肢を隠す。"""

        if self._store.get_hide_picked_enabled():
            self._store.set_hidden_option(template_id, option_id, True)

    def switch_to(self, outcome: SpinOutcome) -> Template:
        """抽選結果のサブテンプレートへ現在のテンプレートを切り替える。"""

        target_id = outcome.option.sub_template_id
        template = self._store.select_template(target_id) if target_id else None
        if template is None:
            raise ValidationError(MSG_SUB_TEMPLATE_NOT_FOUND)
        LOGGER.info("サブテンプレートへ切り替えました: %s", template.id)
        return template

    def reset_hidden(self) -> None:
        template = self._store.get_current_template()
        if template is not None:
            self._store.clear_hidden_options(template.id)
