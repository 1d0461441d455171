# backend/app/notifications/router.py

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from .schemas import MessageResponse, NotificationRequestError, parse_notification_request
from .service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

MESSAGE_SENT = "Message sent successfully"
MEMBER_NOT_FOUND = "Member not found"
INTERNAL_SERVER_ERROR = "Internal server error"

JSON_MEDIA_TYPE = "application/json"


def get_notification_service(request: Request) -> NotificationService:
    """
    create_app() で app.state に載せた NotificationService を返す。

    テストでは app.dependency_overrides で差し替えられる。
    """
    return request.app.state.notification_service


def _message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _is_json_request(request: Request) -> bool:
    media_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE


async def _read_json_body(request: Request) -> Any:
    # Content-Type が JSON でない、または JSON として読めないボディは
    # 空オブジェクト扱い（→ 必須項目欠落の 400）
    if not _is_json_request(request):
        return {}
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


@router.post(
    "/send-message",
    response_model=MessageResponse,
    summary="注文通知を Discord の DM で送信",
    responses={
        400: {"model": MessageResponse},
        401: {"model": MessageResponse},
        404: {"model": MessageResponse},
        500: {"model": MessageResponse},
    },
)
async def send_message(
    request: Request,
    service: NotificationService = Depends(get_notification_service),
) -> JSONResponse:
    """
    ギルドメンバーを ID またはユーザー名で特定し、注文通知を DM で送るエンドポイント。

    - 必須項目の欠落・長すぎる項目 → 400
    - メンバーが見つからない → 404
    - 想定外の例外 → 500
    - DM の送信自体に失敗しても 200（ログのみ）
    """
    try:
        notification = parse_notification_request(await _read_json_body(request))

        member = await service.resolve_member(notification.member)
        if member is None:
            return _message_response(status.HTTP_404_NOT_FOUND, MEMBER_NOT_FOUND)

        await service.send_notification(member, notification)
    except NotificationRequestError as exc:
        return _message_response(status.HTTP_400_BAD_REQUEST, exc.message)
    except Exception:  # noqa: BLE001
        logger.exception("Error in /send-message endpoint")
        return _message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)

    return _message_response(status.HTTP_200_OK, MESSAGE_SENT)
