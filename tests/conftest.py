# tests/conftest.py
import os
import sys
from datetime import datetime, timezone

import pytest

# pynput needs a display on Linux; fall back to its dummy backend on headless runners
if sys.platform.startswith('linux') and not (os.environ.get('DISPLAY') or os.environ.get('WAYLAND_DISPLAY')):
    os.environ.setdefault('PYNPUT_BACKEND', 'dummy')

from enhancer.settings.settings_models import AppConfiguration, Binding, ProviderSettings


NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


class StaticConfig:
    """In-memory stand-in for ConfigurationStore."""

    def __init__(self, configuration):
        self.configuration = configuration
        self.listeners = []

    def current(self):
        return self.configuration

    def add_listener(self, callback):
        self.listeners.append(callback)


def make_binding(**overrides):
    values = dict(
        id='improve',
        name='Improve',
        key='1',
        modifiers=('ctrl', 'alt'),
        prompt='Improve this text.',
        provider='claude',
        model='claude-test',
    )
    values.update(overrides)
    return Binding(**values)


@pytest.fixture
def configuration():
    return AppConfiguration(
        bindings=[make_binding()],
        providers={
            'claude': ProviderSettings(api_key='test-claude-key', model='claude-test', enabled=True),
            'openai': ProviderSettings(api_key='test-openai-key', model='gpt-4o', enabled=True),
        },
    )


@pytest.fixture
def config_source(configuration):
    return StaticConfig(configuration)
