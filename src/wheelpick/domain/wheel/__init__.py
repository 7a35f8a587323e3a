"""ルーレット抽選関連のエクスポート。"""

from .selection import draw, eligible_options
from .service import SpinOutcome, WheelService

__all__ = ["SpinOutcome", "WheelService", "draw", "eligible_options"]
