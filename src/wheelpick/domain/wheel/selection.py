"""ルーレットに載せる選択肢の抽出と抽選。"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from ..templates.models import Option, Template

__all__ = ["draw", "eligible_options"]


def eligible_options(template: Optional[Template], hide_picked: bool) -> List[Option]:
    """抽選対象となる選択肢を表示順のまま返す。

    無効な選択肢は常に除外し、``hide_picked`` が真なら抽選済みの選択肢も除く。
    存在しない ID が隠し集合に残っていても影響しない。
    """

    if template is None:
        return []
    hidden = set(template.hidden_option_ids) if hide_picked else set()
    return [
        option
        for option in template.options
        if option.enabled and option.id not in hidden
    ]


def draw(
    options: Sequence[Option], rng: Optional[random.Random] = None
) -> Optional[Option]:
    """一様乱数で 1 件選ぶ。候補が無ければ ``None``。"""

    if not options:
        return None
    return (rng or random).choice(list(options))
