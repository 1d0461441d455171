# backend/tests/test_notification_service.py

import asyncio
import logging
from typing import List, Tuple

from app.notifications.resolver import MemberResolver
from app.notifications.schemas import NotificationRequest
from app.notifications.service import DirectMessageSender, NotificationService
from conftest import FakeDMChannel, FakeGateway, FakeGuild, FakeMember


def _notification() -> NotificationRequest:
    return NotificationRequest(member="alice", orderID="A1", message="hi", url="https://x.test")


def test_direct_message_sender_sends_embed_and_button() -> None:
    member = FakeMember("alice", 1)
    sender = DirectMessageSender()

    ok = asyncio.run(sender.send(member, _notification()))

    assert ok is True
    assert len(member.channel.sent) == 1
    sent = member.channel.sent[0]
    assert sent["embed"].title == "You got a new message in your order A1"
    assert [item.label for item in sent["view"].children] == ["View Order"]


def test_direct_message_sender_swallows_dm_open_failure(caplog) -> None:
    member = FakeMember("alice", 1, dm_error=RuntimeError("cannot open DM"))
    sender = DirectMessageSender(logger_=logging.getLogger("test_logger_dm"))

    with caplog.at_level(logging.ERROR, logger="test_logger_dm"):
        ok = asyncio.run(sender.send(member, _notification()))

    assert ok is False
    assert any("Error sending message to member" in r.getMessage() for r in caplog.records)


def test_direct_message_sender_swallows_send_failure() -> None:
    member = FakeMember("alice", 1, channel=FakeDMChannel(error=RuntimeError("blocked")))

    ok = asyncio.run(DirectMessageSender().send(member, _notification()))

    assert ok is False


class DummySender:
    def __init__(self) -> None:
        self.calls: List[Tuple[FakeMember, NotificationRequest]] = []

    async def send(self, member, notification) -> bool:
        self.calls.append((member, notification))
        return True


def test_notification_service_resolves_then_sends() -> None:
    member = FakeMember("alice", 1)
    sender = DummySender()
    service = NotificationService(
        resolver=MemberResolver(FakeGateway(FakeGuild([member]))),
        sender=sender,
    )

    async def _flow():
        resolved = await service.resolve_member("alice")
        await service.send_notification(resolved, _notification())
        return resolved

    resolved = asyncio.run(_flow())

    assert resolved is member
    assert sender.calls == [(member, _notification())]
