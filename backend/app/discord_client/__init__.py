"""
Discord 連携モジュール。

- config: Bot トークン・対象ギルド ID などの設定値
- client: discord.py のセッションを保持する DiscordGateway
"""

from .client import DiscordGateway, DiscordGatewayError  # noqa: F401
from .config import DiscordSettings  # noqa: F401
