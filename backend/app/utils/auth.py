# backend/app/utils/auth.py

"""
共有シークレット（x-api-key ヘッダ）による簡易認可ミドルウェア。
"""

from typing import Awaitable, Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

API_KEY_HEADER = "x-api-key"

CallNext = Callable[[Request], Awaitable[Response]]


def _is_public(request: Request) -> bool:
    # ヘルスチェック用のルートだけは認証不要
    return request.method == "GET" and request.url.path == "/"


def build_api_key_middleware(api_key: str) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """
    x-api-key が設定値と一致しないリクエストを 401 で打ち切るミドルウェアを返す。

    - 比較は単純な等値比較
    - 送られてきたキーはログに残さない
    """

    async def require_api_key(request: Request, call_next: CallNext) -> Response:
        if _is_public(request):
            return await call_next(request)

        if request.headers.get(API_KEY_HEADER) != api_key:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"message": "Unauthorized"},
            )

        return await call_next(request)

    return require_api_key
