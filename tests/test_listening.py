"""Tests for the shared listening state."""

from unittest.mock import Mock

from src.voicenav.listening import ListeningState


class TestListeningState:
    def test_defaults_to_not_listening(self):
        assert ListeningState().is_listening is False

    def test_toggle_notifies_all_controls(self):
        state = ListeningState()
        voice_button, navbar_mic = Mock(), Mock()
        state.subscribe(voice_button)
        state.subscribe(navbar_mic)

        assert state.toggle() is True

        voice_button.assert_called_once_with(True)
        navbar_mic.assert_called_once_with(True)

    def test_no_notification_without_change(self):
        state = ListeningState(is_listening=True)
        listener = Mock()
        state.subscribe(listener)
        state.set_listening(True)
        listener.assert_not_called()

    def test_subscribe_is_idempotent(self):
        state = ListeningState()
        listener = Mock()
        state.subscribe(listener)
        state.subscribe(listener)
        state.toggle()
        assert listener.call_count == 1

    def test_unsubscribe(self):
        state = ListeningState()
        listener = Mock()
        state.subscribe(listener)
        state.unsubscribe(listener)
        state.toggle()
        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self):
        state = ListeningState()
        broken = Mock(side_effect=RuntimeError("detached"))
        healthy = Mock()
        state.subscribe(broken)
        state.subscribe(healthy)

        state.set_listening(True)

        healthy.assert_called_once_with(True)
        assert state.is_listening is True
