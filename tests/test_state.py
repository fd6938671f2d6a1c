"""
Unit tests for StateFlow and PreferenceStore.
"""

import pytest
from unittest.mock import Mock

from core import PreferenceStore, StateFlow, UserPreference


class TestStateFlow:

    def test_subscribe_delivers_current_value(self):
        flow = StateFlow(1)
        received = []

        flow.subscribe(received.append)

        assert received == [1]

    def test_set_notifies_all_subscribers(self):
        flow = StateFlow("a")
        first, second = [], []
        flow.subscribe(first.append)
        flow.subscribe(second.append)

        flow.set("b")

        assert first == ["a", "b"]
        assert second == ["a", "b"]

    def test_equal_value_is_not_redelivered(self):
        flow = StateFlow(UserPreference(access_token="abc"))
        callback = Mock()
        flow.subscribe(callback)

        flow.set(UserPreference(access_token="abc"))

        assert callback.call_count == 1

    def test_update_applies_function(self):
        flow = StateFlow(2)

        flow.update(lambda v: v * 3)

        assert flow.value == 6

    def test_cancel_stops_delivery(self):
        flow = StateFlow(0)
        received = []
        subscription = flow.subscribe(received.append)

        subscription.cancel()
        flow.set(1)

        assert received == [0]
        assert flow.subscriber_count == 0
        assert subscription.active is False

    def test_failing_subscriber_does_not_block_others(self):
        flow = StateFlow(0)
        received = []
        flow.subscribe(Mock(side_effect=RuntimeError("boom")))
        flow.subscribe(received.append)

        flow.set(1)

        assert received == [0, 1]

    def test_subscriber_may_cancel_itself_during_delivery(self):
        flow = StateFlow(0)
        received = []
        holder = {}

        def once(value):
            received.append(value)
            if value == 1:
                holder["sub"].cancel()

        holder["sub"] = flow.subscribe(once)
        flow.set(1)
        flow.set(2)

        assert received == [0, 1]


class TestUserPreference:

    def test_defaults_are_logged_out(self):
        preference = UserPreference()

        assert preference.access_token == ""
        assert preference.is_logged_in is False

    def test_logged_in_with_token(self):
        assert UserPreference(access_token="abc").is_logged_in is True


class TestPreferenceStore:

    def test_in_memory_save_and_clear(self):
        store = PreferenceStore()
        received = []
        store.preference.subscribe(received.append)

        store.save(UserPreference(access_token="abc", user_id="u1"))
        store.clear()

        assert [p.access_token for p in received] == ["", "abc", ""]
        assert store.current == UserPreference()

    def test_persists_to_file(self, tmp_path):
        path = tmp_path / "session.json"
        PreferenceStore(path).save(UserPreference(access_token="abc", user_id="u1", photo="p.png"))

        restored = PreferenceStore(path)

        assert restored.current.access_token == "abc"
        assert restored.current.photo == "p.png"

    def test_clear_removes_file(self, tmp_path):
        path = tmp_path / "session.json"
        store = PreferenceStore(path)
        store.save(UserPreference(access_token="abc"))

        store.clear()

        assert not path.exists()

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        store = PreferenceStore(path)

        assert store.current.is_logged_in is False

    def test_unwritable_file_keeps_session_in_memory(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = PreferenceStore(blocker / "session.json")

        store.save(UserPreference(access_token="abc", user_id="u1"))

        assert store.current.access_token == "abc"
        assert store.current.is_logged_in is True
