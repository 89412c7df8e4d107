"""Unit tests for the chat service layer."""
import threading

import pytest

from chat_backend.core.exceptions import ChatNotFoundError, CompletionError
from chat_backend.models.chat import Sender
from chat_backend.services.chat_service import ChatService
from chat_backend.services.chat_store import InMemoryChatStore
from chat_backend.services.completion import CompletionBridge
from tests.conftest import FailingCompletionBridge, StubCompletionBridge


@pytest.fixture
def bridge():
    return StubCompletionBridge(reply="generated reply")


@pytest.fixture
def service(bridge):
    return ChatService(store=InMemoryChatStore(), completion=bridge)


class TestChatLookup:
    def test_get_chat_for_owner(self, service):
        chat = service.create_chat("alice")
        assert service.get_chat(chat.id, "alice") is chat

    def test_get_chat_for_other_user_is_not_found(self, service):
        chat = service.create_chat("alice")
        with pytest.raises(ChatNotFoundError) as exc_info:
            service.get_chat(chat.id, "bob")
        assert exc_info.value.chat_id == chat.id

    def test_list_chats_only_returns_own(self, service):
        service.create_chat("alice")
        service.create_chat("bob")
        service.create_chat("alice")

        chats = service.list_chats("alice")
        assert len(chats) == 2
        assert {c.user_id for c in chats} == {"alice"}


class TestUserAppend:
    def test_append_user_message(self, service):
        chat = service.create_chat("alice")

        message = service.append_user_message(chat.id, "alice", "hi")

        assert chat.messages == [message]
        assert message.sender == Sender.USER
        assert message.user_id == "alice"
        assert message.text == "hi"

    def test_empty_text_is_accepted(self, service):
        chat = service.create_chat("alice")
        message = service.append_user_message(chat.id, "alice", "")
        assert message.text == ""
        assert len(chat.messages) == 1

    def test_append_to_foreign_chat_fails_without_mutation(self, service):
        chat = service.create_chat("alice")
        with pytest.raises(ChatNotFoundError):
            service.append_user_message(chat.id, "bob", "hi")
        assert chat.messages == []


class TestBotReply:
    def test_reply_is_appended_as_bot_message(self, service, bridge):
        chat = service.create_chat("alice")
        service.append_user_message(chat.id, "alice", "hi")

        reply = service.append_bot_reply(chat.id, "alice")

        assert len(chat.messages) == 2
        assert chat.messages[-1] is reply
        assert reply.sender == Sender.BOT
        assert reply.text == "generated reply"
        # Bot replies are attributed to the requesting user
        assert reply.user_id == "alice"

    def test_full_history_is_sent_with_roles(self, service, bridge):
        chat = service.create_chat("alice")
        service.append_user_message(chat.id, "alice", "first")
        service.append_bot_reply(chat.id, "alice")
        service.append_user_message(chat.id, "alice", "second")

        service.append_bot_reply(chat.id, "alice")

        assert bridge.calls[-1] == [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "generated reply"},
            {"role": "user", "content": "second"},
        ]

    def test_reply_on_empty_chat_sends_empty_history(self, service, bridge):
        chat = service.create_chat("alice")
        service.append_bot_reply(chat.id, "alice")
        assert bridge.calls == [[]]

    def test_reply_for_foreign_chat_does_not_call_bridge(self, service, bridge):
        chat = service.create_chat("alice")
        with pytest.raises(ChatNotFoundError):
            service.append_bot_reply(chat.id, "bob")
        assert bridge.calls == []

    def test_bridge_failure_appends_nothing(self):
        service = ChatService(store=InMemoryChatStore(), completion=FailingCompletionBridge())
        chat = service.create_chat("alice")
        service.append_user_message(chat.id, "alice", "hi")

        with pytest.raises(ConnectionError):
            service.append_bot_reply(chat.id, "alice")
        assert len(chat.messages) == 1

    def test_completion_error_propagates(self):
        class EmptyBridge(CompletionBridge):
            def complete(self, messages):
                raise CompletionError("no choices")

        service = ChatService(store=InMemoryChatStore(), completion=EmptyBridge())
        chat = service.create_chat("alice")
        with pytest.raises(CompletionError):
            service.append_bot_reply(chat.id, "alice")
        assert chat.messages == []


class TestPerChatSerialization:
    def test_concurrent_replies_see_serialized_history(self):
        """Two reply requests on one chat never read the same history."""
        entered = threading.Event()
        release = threading.Event()

        class BlockingBridge(CompletionBridge):
            def __init__(self):
                self.history_lengths = []

            def complete(self, messages):
                self.history_lengths.append(len(messages))
                if len(self.history_lengths) == 1:
                    entered.set()
                    release.wait(timeout=5)
                return "reply"

        bridge = BlockingBridge()
        service = ChatService(store=InMemoryChatStore(), completion=bridge)
        chat = service.create_chat("alice")
        service.append_user_message(chat.id, "alice", "hi")

        first = threading.Thread(target=service.append_bot_reply, args=(chat.id, "alice"))
        first.start()
        assert entered.wait(timeout=5)

        second = threading.Thread(target=service.append_bot_reply, args=(chat.id, "alice"))
        second.start()
        release.set()
        first.join(timeout=5)
        second.join(timeout=5)

        assert bridge.history_lengths == [1, 2]
        assert len(chat.messages) == 3
