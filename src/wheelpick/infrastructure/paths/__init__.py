"""パス解決ユーティリティの公開 API。"""

from .storage import APP_DIR_NAME, CONFIG_DIR_ENV, get_app_config_dir

__all__ = ["APP_DIR_NAME", "CONFIG_DIR_ENV", "get_app_config_dir"]
