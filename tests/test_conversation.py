"""Tests for agentsh/conversation.py"""

import pytest

from agentsh.actions import ActionRequest, ActionResult
from agentsh.conversation import Conversation, ModelTurn, ResultBatch, UserMessage


class TestModelTurn:
    def test_pending_when_actions_present(self):
        assert ModelTurn(actions=(ActionRequest("read_file"),)).is_pending is True

    def test_final_without_actions(self):
        assert ModelTurn(text="").is_pending is False

    def test_raw_ignored_for_equality(self):
        assert ModelTurn(text="a", raw=object()) == ModelTurn(text="a", raw=object())


class TestConversation:
    def test_starts_empty(self):
        conversation = Conversation()

        assert len(conversation) == 0
        assert conversation.entries == ()

    def test_append_keeps_order(self):
        conversation = Conversation()
        entries = [
            UserMessage("hi"),
            ModelTurn(actions=(ActionRequest("read_file"),)),
            ResultBatch((ActionResult.fail(ActionRequest("read_file"), "x"),)),
            ModelTurn(text="done"),
        ]

        for entry in entries:
            conversation.append(entry)

        assert list(conversation) == entries

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            Conversation().append({"role": "user"})

    def test_entries_snapshot_is_immutable(self):
        conversation = Conversation()
        conversation.append(UserMessage("hi"))

        snapshot = conversation.entries
        conversation.append(ModelTurn(text="yo"))

        assert len(snapshot) == 1
