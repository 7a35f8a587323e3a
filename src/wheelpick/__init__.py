"""決定ルーレット用テンプレートストアのパッケージ。"""

__version__ = "0.1.0"
