from unittest.mock import MagicMock

import pytest

from enhancer.client.shortcut import hotkey_backend
from enhancer.client.shortcut.hotkey_backend import PynputHotkeyBackend, to_pynput_combo


@pytest.fixture
def parse(monkeypatch):
    parse = MagicMock()
    monkeypatch.setattr(hotkey_backend.keyboard.HotKey, 'parse', parse)
    return parse


@pytest.fixture
def backend(parse):
    backend = PynputHotkeyBackend()
    backend._start_listener = MagicMock()
    backend._stop_listener = MagicMock()
    return backend


# --- Combo strings ---

class TestToPynputCombo:

    def test_character_key_with_modifiers(self, parse):
        assert to_pynput_combo('1', ('ctrl', 'alt')) == '<ctrl>+<alt>+1'
        parse.assert_called_once_with('<ctrl>+<alt>+1')

    @pytest.mark.parametrize('key, expected', [
        ('return', '<cmd>+<enter>'),
        ('escape', '<cmd>+<esc>'),
        ('pgdn', '<cmd>+<page_down>'),
    ])
    def test_aliases_map_to_pynput_names(self, parse, key, expected):
        assert to_pynput_combo(key, ('cmd',)) == expected

    def test_named_key_is_bracketed(self, parse):
        assert to_pynput_combo('f5', ('shift',)) == '<shift>+<f5>'

    def test_unknown_key_name(self, parse):
        with pytest.raises(ValueError):
            to_pynput_combo('notakey', ('ctrl',))
        parse.assert_not_called()


# --- Registration ---

class TestPynputHotkeyBackend:

    def test_duplicate_combo_is_rejected(self, backend):
        backend.register(1, '1', ('ctrl',), MagicMock())

        with pytest.raises(ValueError):
            backend.register(2, '1', ('ctrl',), MagicMock())

    def test_changes_restart_running_listener(self, backend):
        backend._running = True

        backend.register(1, '1', ('ctrl',), MagicMock())
        backend.unregister(1)

        assert backend._start_listener.call_count == 2

    def test_batch_restarts_listener_once(self, backend):
        backend._running = True

        with backend.batch():
            for hotkey_id in (1, 2, 3):
                backend.unregister(hotkey_id)
            for hotkey_id, key in ((1, '1'), (2, '2'), (3, '3')):
                backend.register(hotkey_id, key, ('ctrl', 'alt'), MagicMock())
            backend._start_listener.assert_not_called()

        backend._stop_listener.assert_called_once()
        backend._start_listener.assert_called_once()
        assert len(backend._hotkeys) == 3

    def test_batch_does_not_start_stopped_listener(self, backend):
        with backend.batch():
            backend.register(1, '1', ('ctrl',), MagicMock())

        backend._start_listener.assert_not_called()
