"""設定ファイル配置のための共通関数。"""

from __future__ import annotations

import os
from pathlib import Path

__all__ = ["APP_DIR_NAME", "CONFIG_DIR_ENV", "get_app_config_dir"]

APP_DIR_NAME = "Wheelpick"
CONFIG_DIR_ENV = "WHEELPICK_CONFIG_DIR"


def get_app_config_dir() -> Path:
    """ユーザーごとの設定ディレクトリを返す。

    ``WHEELPICK_CONFIG_DIR`` が設定されていれば最優先で採用する。
    """

    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    if os.name == "nt":
        for variable in ("APPDATA", "LOCALAPPDATA"):
            base = os.environ.get(variable)
            if base:
                return Path(base) / APP_DIR_NAME
    # POSIX 系
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_DIR_NAME.lower()
    return Path.home() / ".config" / APP_DIR_NAME.lower()
