"""
注文通知レイヤ。

構成:
- schemas: /send-message の入力検証とレスポンス形式
- resolver: ID / ユーザー名からギルドメンバーを解決
- templates: DM に載せる Embed とリンクボタン
- service: DM 送信と、解決＋送信をまとめた NotificationService
- router: POST /send-message
"""

from .resolver import MemberResolver, find_exact_username_match, is_snowflake  # noqa: F401
from .schemas import (  # noqa: F401
    MessageResponse,
    NotificationRequest,
    NotificationRequestError,
    parse_notification_request,
)
from .service import DirectMessageSender, NotificationSender, NotificationService  # noqa: F401
