# backend/app/settings.py

"""
プロセス全体の設定値。

起動時に一度だけ読み込み、以後は変更しない。
必須の環境変数が欠けている場合は起動を中断する（EnvVarMissingError）。
"""

from dataclasses import dataclass
from functools import lru_cache

from app.discord_client.config import DiscordSettings
from app.utils.config import get_env, get_env_bool, get_env_int


@dataclass(frozen=True)
class AppSettings:
    """HTTP サーバ・API キー・Discord 接続情報をまとめた設定値コンテナ。"""

    discord_token: str
    port: int
    api_key: str
    guild_id: int
    host: str = "0.0.0.0"
    log_level: str = "INFO"
    escape_markdown: bool = False

    @property
    def discord(self) -> DiscordSettings:
        return DiscordSettings(token=self.discord_token, guild_id=self.guild_id)


@lru_cache()
def get_app_settings() -> AppSettings:
    """
    環境変数からアプリ設定を読み込む。

    必須:
      - DISCORD_TOKEN
      - PORT
      - API_KEY
      - GUILD_ID

    任意:
      - HOST                   (デフォルト: 0.0.0.0)
      - LOG_LEVEL              (デフォルト: INFO)
      - NOTIFY_ESCAPE_MARKDOWN (デフォルト: false)
    """
    return AppSettings(
        discord_token=get_env("DISCORD_TOKEN"),
        port=get_env_int("PORT"),
        api_key=get_env("API_KEY"),
        guild_id=get_env_int("GUILD_ID"),
        host=get_env("HOST", default="0.0.0.0", required=False),
        log_level=get_env("LOG_LEVEL", default="INFO", required=False).upper(),
        escape_markdown=get_env_bool("NOTIFY_ESCAPE_MARKDOWN", default=False),
    )
