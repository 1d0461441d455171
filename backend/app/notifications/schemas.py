# backend/app/notifications/schemas.py

"""
/send-message のリクエスト・レスポンススキーマ。

リクエストボディは境界では型付けせず（任意の JSON として受ける）、
parse_notification_request() で以下の順にチェックする:

1. 4 項目すべてが存在し、空でないこと        → NG なら "Missing required parameters"
2. 各項目の長さが MAX_FIELD_LENGTH 以下であること → NG なら "Parameters are too long"

1 が 2 より優先される（長すぎる項目があっても、欠けている項目があれば 1 のエラー）。
長さは UTF-16 のコード単位で数える（絵文字など BMP 外の文字は 2 と数える）。
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

MAX_FIELD_LENGTH = 2000

REQUIRED_FIELDS = ("member", "orderID", "message", "url")

MISSING_PARAMETERS = "Missing required parameters"
PARAMETERS_TOO_LONG = "Parameters are too long"


def _js_length(value: str) -> int:
    """UTF-16 コード単位での長さ（JavaScript の String.length と同じ数え方）。"""
    return len(value.encode("utf-16-le")) // 2


class NotificationRequestError(ValueError):
    """リクエストボディの検証エラー。message はそのままクライアントに返す。"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotificationRequest(BaseModel):
    """
    通知 1件分の入力。リクエスト処理が終われば破棄される。

    member は Discord のユーザー ID（17〜20 桁の数字）またはユーザー名。
    """

    member: str = Field(
        ...,
        min_length=1,
        description="通知先メンバーの ID またはユーザー名",
    )
    order_id: str = Field(
        ...,
        alias="orderID",
        min_length=1,
        description="注文 ID。通知タイトルにそのまま埋め込む",
    )
    message: str = Field(
        ...,
        min_length=1,
        description="通知本文",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="注文ページの URL（埋め込みリンクとボタンの遷移先）",
    )

    @field_validator("member", "order_id", "message", "url")
    @classmethod
    def check_length(cls, value: str) -> str:
        if _js_length(value) > MAX_FIELD_LENGTH:
            raise ValueError(PARAMETERS_TOO_LONG)
        return value


class MessageResponse(BaseModel):
    """すべてのレスポンスで共通の {"message": ...} 形式。"""

    message: str


def _coerce(value: Any) -> Optional[str]:
    """
    空でない文字列・数値だけを「存在する」とみなし、文字列に揃える。

    ユーザー ID を JSON の数値で送ってくるクライアントもあるため数値は許容する。
    bool / null / 配列 / オブジェクトは欠落扱い。
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value) if value else None
    if isinstance(value, str) and value:
        return value
    return None


def parse_notification_request(payload: Any) -> NotificationRequest:
    """
    任意の JSON 値から NotificationRequest を組み立てる。

    :raises NotificationRequestError: 欠落または長すぎる項目がある場合。
    """
    body: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}

    values: Dict[str, Optional[str]] = {
        name: _coerce(body.get(name)) for name in REQUIRED_FIELDS
    }

    if any(value is None for value in values.values()):
        raise NotificationRequestError(MISSING_PARAMETERS)

    if any(_js_length(value) > MAX_FIELD_LENGTH for value in values.values()):
        raise NotificationRequestError(PARAMETERS_TOO_LONG)

    return NotificationRequest(**values)
