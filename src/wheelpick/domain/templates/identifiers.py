"""テンプレートと選択肢の ID 採番。"""

from __future__ import annotations

import secrets
import threading
import time

__all__ = ["OPTION_PREFIX", "TEMPLATE_PREFIX", "generate_id", "to_base36"]

TEMPLATE_PREFIX = "tpl"
OPTION_PREFIX = "opt"

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_RANDOM_LENGTH = 8

_lock = threading.Lock()
_last_millis = 0


def to_base36(value: int) -> str:
    """非負整数を小文字の 36 進表記へ変換する。"""

    if value < 0:
        raise ValueError("value must be non-negative.")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def _next_millis() -> int:
    # 同一ミリ秒内の連続採番でも時刻成分は単調増加させる。
    global _last_millis
    with _lock:
        now = int(time.time() * 1000)
        if now <= _last_millis:
            now = _last_millis + 1
        _last_millis = now
        return now


def generate_id(prefix: str) -> str:
    """``{prefix}_{乱数}_{時刻}`` 形式の ID を生成する。"""

    entropy = "".join(secrets.choice(_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{prefix}_{entropy}_{to_base36(_next_millis())}"
