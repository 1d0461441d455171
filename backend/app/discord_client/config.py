# backend/app/discord_client/config.py

"""
Discord セッションに必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass

import discord


@dataclass(frozen=True)
class DiscordSettings:
    """Discord Bot 用の設定値コンテナ。"""

    token: str
    guild_id: int

    def build_intents(self) -> discord.Intents:
        """
        購読するゲートウェイイベント。

        ギルド情報・メンバー検索・DM 送信に必要な最小限のみ有効にする。
        GUILD_MEMBERS は特権 Intent なので Developer Portal 側でも有効化が必要。
        """
        intents = discord.Intents.none()
        intents.guilds = True
        intents.members = True
        intents.dm_messages = True
        return intents

