# backend/app/utils/config.py

"""
環境変数読み取り用のユーティリティ。
アプリ設定 (app.settings) と Discord 設定 (app.discord_client.config) の両方から使う。
"""

import os
from typing import Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class EnvVarMissingError(RuntimeError):
    """必須環境変数が設定されていない場合に投げる例外。"""

    def __init__(self, name: str) -> None:
        super().__init__(f"Required environment variable '{name}' is not set.")
        self.name = name


class EnvVarInvalidError(RuntimeError):
    """環境変数の値が期待する形式でない場合に投げる例外。"""

    def __init__(self, name: str, value: str, expected: str) -> None:
        super().__init__(
            f"Environment variable '{name}' has invalid value {value!r} (expected {expected})."
        )
        self.name = name
        self.value = value


def get_env(
    name: str,
    default: Optional[str] = None,
    *,
    required: bool = True,
) -> str:
    """
    環境変数を取得するヘルパー。

    :param name: 環境変数名
    :param default: デフォルト値（required=False の場合のみ使用）
    :param required: True の場合、未設定なら例外を投げる
    :return: 文字列値
    """
    value = os.getenv(name)

    if value is None or value == "":
        if required:
            raise EnvVarMissingError(name)
        return default

    return value


def get_env_int(name: str, default: Optional[int] = None, *, required: bool = True) -> int:
    """
    整数の環境変数を取得する。

    - 未設定の場合は get_env と同じ扱い（required なら例外、そうでなければ default）
    - パース不能な値は EnvVarInvalidError
    """
    raw = get_env(name, required=required)
    if raw is None:
        return default

    try:
        return int(raw.strip())
    except ValueError as exc:
        raise EnvVarInvalidError(name, raw, "an integer") from exc


def get_env_bool(name: str, default: bool = False) -> bool:
    """真偽値の環境変数を取得する（常に任意扱い）。"""
    raw = get_env(name, required=False)
    if raw is None:
        return default

    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise EnvVarInvalidError(name, raw, "a boolean")
