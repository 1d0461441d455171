# backend/app/utils/logging.py

"""ログ出力の初期化。"""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    ルートロガーを設定する。

    discord.py は独自にハンドラを付けないため、ここでの設定がそのまま適用される。
    """
    logging.basicConfig(level=level, format=_LOG_FORMAT)
