# backend/tests/conftest.py
"""
Pytest configuration for Order Notify Bridge backend tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import app.*` works correctly in tests.
- Ensures required environment variables for tests are set
  with safe dummy values (e.g., DISCORD_TOKEN, API_KEY).
- Provides in-memory fakes for the Discord client / guild / member / DM channel
  so no test talks to the real Discord API.
"""

import asyncio
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    In real environments, proper values should be provided via the process env.
    """
    os.environ.setdefault("DISCORD_TOKEN", "dummy-discord-token-for-tests")
    os.environ.setdefault("PORT", "8080")
    os.environ.setdefault("API_KEY", "dummy-api-key-for-tests")
    os.environ.setdefault("GUILD_ID", "100000000000000001")


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()

from app.settings import AppSettings  # noqa: E402

TEST_API_KEY = "test-api-key"
TEST_GUILD_ID = 100000000000000001


class FakeDMChannel:
    """DMChannel の代わり。send() の引数を記録する。"""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.sent: List[dict] = []
        self._error = error

    async def send(self, **kwargs) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append(kwargs)


class FakeMember:
    """discord.Member の代わり。name と create_dm() だけを持つ。"""

    def __init__(
        self,
        name: str,
        member_id: int = 0,
        *,
        channel: Optional[FakeDMChannel] = None,
        dm_error: Optional[Exception] = None,
    ) -> None:
        self.name = name
        self.id = member_id
        self.channel = channel or FakeDMChannel()
        self._dm_error = dm_error

    async def create_dm(self) -> FakeDMChannel:
        if self._dm_error is not None:
            raise self._dm_error
        return self.channel


class FakeGuild:
    """
    discord.Guild の代わり。

    query_members は search_results が指定されていればそれを、
    無ければ name の前方一致（大文字小文字無視）で候補を返す。
    """

    def __init__(
        self,
        members: Iterable[FakeMember] = (),
        *,
        search_results: Optional[List[FakeMember]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.members: Dict[int, FakeMember] = {m.id: m for m in members}
        self.search_results = search_results
        self.error = error
        self.fetch_calls: List[int] = []
        self.query_calls: List[Tuple[Optional[str], int]] = []

    async def fetch_member(self, member_id: int) -> FakeMember:
        self.fetch_calls.append(member_id)
        if self.error is not None:
            raise self.error
        if member_id not in self.members:
            raise LookupError("Unknown Member")
        return self.members[member_id]

    async def query_members(self, query: Optional[str] = None, *, limit: int = 5) -> List[FakeMember]:
        self.query_calls.append((query, limit))
        if self.error is not None:
            raise self.error
        if self.search_results is not None:
            return list(self.search_results)[:limit]
        prefix = (query or "").lower()
        return [m for m in self.members.values() if m.name.lower().startswith(prefix)][:limit]


class FakeGateway:
    """DiscordGateway の代わり。start/close の呼び出しと fetch_guild の回数を記録する。"""

    def __init__(self, guild: FakeGuild, *, error: Optional[Exception] = None) -> None:
        self.guild = guild
        self.error = error
        self.started = False
        self.closed = False
        self.fetch_guild_calls = 0

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def fetch_guild(self) -> FakeGuild:
        self.fetch_guild_calls += 1
        if self.error is not None:
            raise self.error
        return self.guild


class DummyDiscordClient:
    """discord.Client のうち DiscordGateway が使う部分だけを持つダミー。"""

    def __init__(self, cached_guild=None, connect_error=None) -> None:
        self.cached_guild = cached_guild
        self.connect_error = connect_error
        self.fetched_guild = object()
        self.fetch_calls = []
        self.login_token = None
        self.closed = False
        self._disconnect = None

    def get_guild(self, guild_id):
        return self.cached_guild

    async def fetch_guild(self, guild_id):
        self.fetch_calls.append(guild_id)
        return self.fetched_guild

    async def login(self, token) -> None:
        self.login_token = token

    async def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self._disconnect = asyncio.Event()
        await self._disconnect.wait()

    async def close(self) -> None:
        self.closed = True
        if self._disconnect is not None:
            self._disconnect.set()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        discord_token="dummy-discord-token",
        port=8080,
        api_key=TEST_API_KEY,
        guild_id=TEST_GUILD_ID,
    )
