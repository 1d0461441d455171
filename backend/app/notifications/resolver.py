# backend/app/notifications/resolver.py

"""
通知先メンバーの解決。

- ID 指定: 17〜20 桁の数字なら Discord の snowflake とみなし、直接取得する
- ユーザー名指定: ギルド内を最大 5 件検索し、ユーザー名が完全一致するものを選ぶ

どちらの経路でも、取得中の例外はログに残して「見つからなかった」（None）として扱う。
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

SNOWFLAKE_PATTERN = re.compile(r"^[0-9]{17,20}$")

SEARCH_LIMIT = 5


class GuildMember(Protocol):
    """通知レイヤが必要とするメンバーの最小インターフェース（discord.Member 互換）。"""

    name: str

    async def create_dm(self) -> Any:  # pragma: no cover - Protocol
        ...


class Guild(Protocol):
    """メンバー取得に使うギルドの最小インターフェース（discord.Guild 互換）。"""

    async def fetch_member(self, member_id: int, /) -> GuildMember:  # pragma: no cover - Protocol
        ...

    async def query_members(
        self, query: Optional[str] = None, *, limit: int = 5
    ) -> Sequence[GuildMember]:  # pragma: no cover - Protocol
        ...


class GuildProvider(Protocol):
    """対象ギルドを返すもの。本番では DiscordGateway。"""

    async def fetch_guild(self) -> Guild:  # pragma: no cover - Protocol
        ...


def is_snowflake(value: str) -> bool:
    """Discord のユーザー ID 形式（17〜20 桁の数字）かどうか。"""
    # re の $ は末尾の改行にもマッチするため fullmatch で判定する
    return SNOWFLAKE_PATTERN.fullmatch(value) is not None


def find_exact_username_match(
    candidates: Iterable[GuildMember],
    username: str,
) -> Optional[GuildMember]:
    """
    検索結果の候補からユーザー名が完全一致（大文字小文字を区別）する最初のメンバーを返す。

    ギルド検索は前方一致・表示名一致も含むため、ここで厳密に絞り込む。
    """
    for candidate in candidates:
        if candidate.name == username:
            return candidate
    return None


class MemberResolver:
    """ID またはユーザー名から対象ギルドのメンバーを解決する。"""

    def __init__(self, guilds: GuildProvider, *, search_limit: int = SEARCH_LIMIT) -> None:
        self._guilds = guilds
        self._search_limit = search_limit

    async def resolve(self, member: str) -> Optional[GuildMember]:
        """
        member の形式に応じて ID 取得か名前検索を選ぶ。

        数字だけの入力を ID として扱うことで、不要な検索の往復を避ける。
        """
        if is_snowflake(member):
            return await self.by_id(member)
        return await self.by_username(member)

    async def by_id(self, member_id: str) -> Optional[GuildMember]:
        try:
            guild = await self._guilds.fetch_guild()
            return await guild.fetch_member(int(member_id))
        except Exception:  # noqa: BLE001 - 見つからない場合も含めて None に畳み込む
            logger.exception("Error fetching member by ID: %s", member_id)
            return None

    async def by_username(self, username: str) -> Optional[GuildMember]:
        try:
            guild = await self._guilds.fetch_guild()
            candidates = await guild.query_members(query=username, limit=self._search_limit)
        except Exception:  # noqa: BLE001 - 検索失敗は「見つからない」扱い
            logger.exception("Error fetching member by username: %s", username)
            return None

        return find_exact_username_match(candidates, username)
