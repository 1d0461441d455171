# backend/app/discord_client/client.py

"""
Discord ゲートウェイとのセッションを保持するモジュール。

FastAPI のイベントループ上で discord.py のクライアントを動かし、
通知レイヤには「対象ギルドの取得」だけを公開する。
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

import discord

from .config import DiscordSettings

logger = logging.getLogger(__name__)

ConnectionLostCallback = Callable[[BaseException], None]


class DiscordGatewayError(RuntimeError):
    """DiscordGateway の利用方法に関するエラー（未接続での呼び出しなど）。"""


class BridgeDiscordClient(discord.Client):
    """ready イベントをログに出すだけの discord.Client。"""

    async def on_ready(self) -> None:
        logger.info("Logged in as %s", self.user)


class DiscordGateway:
    """
    discord.py クライアントの薄いラッパー。

    - start(): ログイン（認証失敗はここで例外）してからゲートウェイ接続をバックグラウンドで開始
    - close(): 接続を閉じ、バックグラウンドタスクを回収
    - fetch_guild(): 設定済みギルドをキャッシュ優先で取得

    接続タスクが例外で終了した場合は critical でログを出し、
    add_connection_lost_callback() で登録されたコールバックを呼ぶ（HTTP サーバの停止など）。
    """

    def __init__(
        self,
        settings: DiscordSettings,
        client: discord.Client | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or BridgeDiscordClient(intents=self._settings.build_intents())
        self._connect_task: Optional[asyncio.Task] = None
        self._connection_error: Optional[BaseException] = None
        self._connection_lost_callbacks: List[ConnectionLostCallback] = []

    @property
    def client(self) -> discord.Client:
        return self._client

    @property
    def guild_id(self) -> int:
        return self._settings.guild_id

    @property
    def connection_error(self) -> Optional[BaseException]:
        """ゲートウェイ接続を終了させた例外（正常終了・未起動なら None）。"""
        return self._connection_error

    @property
    def is_running(self) -> bool:
        return self._connect_task is not None and not self._connect_task.done()

    async def start(self) -> None:
        """
        トークンでログインし、ゲートウェイ接続タスクを起動する。

        :raises discord.LoginFailure: トークンが不正な場合。
        :raises DiscordGatewayError: 既に起動済みの場合。
        """
        if self.is_running:
            raise DiscordGatewayError("Discord gateway is already running.")

        await self._client.login(self._settings.token)
        self._connect_task = asyncio.create_task(self._client.connect())
        self._connect_task.add_done_callback(self._on_connect_done)

    async def close(self) -> None:
        await self._client.close()

        task, self._connect_task = self._connect_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def fetch_guild(self) -> discord.Guild:
        """
        対象ギルドを取得する。

        ゲートウェイのキャッシュにあればそれを使い、無ければ REST で取得する。
        """
        guild = self._client.get_guild(self.guild_id)
        if guild is not None:
            return guild
        return await self._client.fetch_guild(self.guild_id)

    def add_connection_lost_callback(self, callback: ConnectionLostCallback) -> None:
        self._connection_lost_callbacks.append(callback)

    def _on_connect_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return

        self._connection_error = exc
        logger.critical("Discord gateway connection stopped: %r", exc)
        for callback in self._connection_lost_callbacks:
            callback(exc)
