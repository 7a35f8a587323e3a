"""インフラ層のパッケージ。"""

from __future__ import annotations

__all__ = ["paths", "settings"]

from . import paths  # noqa: F401
from . import settings  # noqa: F401
