# backend/app/notifications/templates.py

"""
注文通知 DM の見た目（Embed + リンクボタン）を組み立てる。
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import discord

from .schemas import NotificationRequest

TITLE_TEMPLATE = "You got a new message in your order {order_id}"
BUTTON_LABEL = "View Order"


def build_order_embed(
    notification: NotificationRequest,
    *,
    escape_markdown: bool = False,
    timestamp: Optional[datetime] = None,
) -> discord.Embed:
    """
    通知用の Embed を作る。

    注文 ID と本文は既定ではそのまま埋め込む。escape_markdown=True の場合のみ
    Discord の Markdown 記法をエスケープする（URL は対象外）。
    """
    order_id = notification.order_id
    message = notification.message
    if escape_markdown:
        order_id = discord.utils.escape_markdown(order_id)
        message = discord.utils.escape_markdown(message)

    return discord.Embed(
        title=TITLE_TEMPLATE.format(order_id=order_id),
        description=message,
        url=notification.url,
        timestamp=timestamp or discord.utils.utcnow(),
    )


def build_order_view(url: str) -> discord.ui.View:
    """
    「View Order」リンクボタンを 1 つだけ持つ View を作る。

    discord.ui.View は生成時に実行中のイベントループを必要とするため、
    コルーチン内から呼ぶこと。
    """
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(
            style=discord.ButtonStyle.link,
            label=BUTTON_LABEL,
            url=url,
        )
    )
    return view
