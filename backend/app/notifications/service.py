# backend/app/notifications/service.py

"""
通知送信インターフェースと Discord DM 実装。

- NotificationSender: 解決済みメンバーに通知を送る最小インターフェース
- DirectMessageSender: Discord の DM チャンネルに Embed + ボタンを送る実装
- NotificationService: メンバー解決と送信をまとめたリクエスト単位の窓口
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .resolver import GuildMember, GuildProvider, MemberResolver
from .schemas import NotificationRequest
from .templates import build_order_embed, build_order_view

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    """
    通知送信の最小インターフェース。

    送信失敗は呼び出し元に伝えない（戻り値で成否だけ返す）。
    """

    async def send(
        self, member: GuildMember, notification: NotificationRequest
    ) -> bool:  # pragma: no cover - Protocol
        ...


class DirectMessageSender:
    """
    メンバーとの DM チャンネルを開き、注文通知を 1 通送る Sender。

    - DM チャンネルの作成失敗・送信失敗はログに残すだけで例外にしない
    - リトライはしない
    """

    def __init__(self, *, escape_markdown: bool = False, logger_: logging.Logger | None = None) -> None:
        self._escape_markdown = escape_markdown
        self._logger = logger_ or logger

    async def send(self, member: GuildMember, notification: NotificationRequest) -> bool:
        try:
            channel = await member.create_dm()
            embed = build_order_embed(notification, escape_markdown=self._escape_markdown)
            view = build_order_view(notification.url)
            await channel.send(embed=embed, view=view)
        except Exception:  # noqa: BLE001 - 配送失敗は呼び出し元に返さない
            self._logger.exception(
                "Error sending message to member %s (order %s)",
                member.name,
                notification.order_id,
            )
            return False

        self._logger.info("Sent order %s notification to %s", notification.order_id, member.name)
        return True


class NotificationService:
    """
    /send-message から使うサービス層。

    Discord セッション（GuildProvider）はアプリ生成時に注入され、リクエスト間で共有される。
    このクラス自体はリクエストごとの状態を持たない。
    """

    def __init__(self, resolver: MemberResolver, sender: NotificationSender) -> None:
        self._resolver = resolver
        self._sender = sender

    @classmethod
    def from_guild_provider(
        cls, guilds: GuildProvider, *, escape_markdown: bool = False
    ) -> "NotificationService":
        return cls(
            resolver=MemberResolver(guilds),
            sender=DirectMessageSender(escape_markdown=escape_markdown),
        )

    async def resolve_member(self, member: str) -> Optional[GuildMember]:
        return await self._resolver.resolve(member)

    async def send_notification(self, member: GuildMember, notification: NotificationRequest) -> bool:
        return await self._sender.send(member, notification)
