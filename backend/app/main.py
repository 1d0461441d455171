# backend/app/main.py

"""
Discord 注文通知ブリッジのエントリーポイント。

- GET /              : 認証不要のヘルスチェック
- POST /send-message : x-api-key 必須。ギルドメンバーに注文通知の DM を送る

Discord ゲートウェイ接続は FastAPI の lifespan で開始・終了する。
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from app.discord_client.client import DiscordGateway
from app.notifications.router import router as notifications_router
from app.notifications.schemas import MessageResponse
from app.notifications.service import NotificationService
from app.settings import AppSettings, get_app_settings
from app.utils.auth import build_api_key_middleware
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Never gonna give you up"


def create_app(
    settings: AppSettings | None = None,
    gateway: DiscordGateway | None = None,
) -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    settings / gateway を渡さない場合は環境変数から組み立てる。
    テストではフェイクの gateway を渡して Discord への接続を避ける。
    """
    settings = settings or get_app_settings()
    gateway = gateway or DiscordGateway(settings.discord)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await gateway.start()
        logger.info("Server is running on port %s", settings.port)
        try:
            yield
        finally:
            await gateway.close()

    app = FastAPI(title="Order Notify Bridge", lifespan=lifespan)

    app.state.notification_service = NotificationService.from_guild_provider(
        gateway,
        escape_markdown=settings.escape_markdown,
    )

    app.middleware("http")(build_api_key_middleware(settings.api_key))

    app.include_router(notifications_router)

    @app.get("/", response_model=MessageResponse, tags=["health"])
    async def health_check() -> MessageResponse:
        """簡易ヘルスチェックエンドポイント（認証不要）。"""
        return MessageResponse(message=HEALTH_MESSAGE)

    return app


def build_server(settings: AppSettings, gateway: DiscordGateway) -> uvicorn.Server:
    """
    uvicorn サーバを組み立てる。

    Discord ゲートウェイ接続が例外で終了したら、HTTP サーバも停止させる
    （メンバー解決が全件 404 になったまま動き続けるのを防ぐ）。
    """
    config = uvicorn.Config(
        create_app(settings, gateway),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    def _stop_server(exc: BaseException) -> None:
        logger.critical("Stopping HTTP server because the Discord gateway connection was lost.")
        server.should_exit = True

    gateway.add_connection_lost_callback(_stop_server)
    return server


def run() -> None:
    """uvicorn でサーバを起動する。Discord 接続が失われて停止した場合は終了コード 1。"""
    settings = get_app_settings()
    configure_logging(settings.log_level)

    gateway = DiscordGateway(settings.discord)
    build_server(settings, gateway).run()

    if gateway.connection_error is not None:
        raise SystemExit(1)
