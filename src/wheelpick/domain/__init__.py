"""ドメイン層のパッケージ。"""

from __future__ import annotations

__all__ = ["templates", "wheel"]
