import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from enhancer.llm.llm_constants import PromptConstants
from enhancer.llm.llm_events import ProcessingEvents
from enhancer.llm.llm_exceptions import CaptureError, CredentialError, TransientProviderError
from enhancer.llm.llm_orchestrator import ProcessingOrchestrator
from enhancer.llm.llm_provider_registry import ProviderRegistry
from tests.conftest import make_binding


class EventCounter:

    def __init__(self, events):
        self.started = []
        self.finished = []
        events.add_listener(self.started.append, lambda binding, result: self.finished.append(result))


class Harness:
    """Wires an orchestrator to mocked ports and a fake provider."""

    def __init__(self, config_source, reply='```json\n{"enhancedText": "Better text"}\n```', timeout=5.0):
        self.provider = MagicMock()
        self.provider.enhance = AsyncMock(return_value=reply)
        self.registry = ProviderRegistry(config_source, factories={
            'claude': lambda *args: self.provider,
            'openai': lambda *args: self.provider,
        })

        self.selection = MagicMock()
        self.selection.read = AsyncMock(return_value='original text')
        self.selection.replace = AsyncMock()

        self.screen = MagicMock()
        self.screen.capture_active_screen = AsyncMock(return_value=b'png-bytes')
        self.screen.compress = AsyncMock(return_value=b'jpeg-bytes')

        self.alerts = MagicMock()
        self.accessibility = MagicMock()
        self.accessibility.is_trusted.return_value = True

        self.events = ProcessingEvents()
        self.counter = EventCounter(self.events)
        self.orchestrator = ProcessingOrchestrator(
            registry=self.registry,
            selection=self.selection,
            screen=self.screen,
            alerts=self.alerts,
            accessibility=self.accessibility,
            events=self.events,
            timeout=timeout,
            permission_recheck_delay=0,
        )

    def run(self, binding=None):
        result = asyncio.run(self.orchestrator.run(binding or make_binding()))
        assert len(self.counter.started) == 1
        assert self.counter.finished == [result]
        return result

    @property
    def alert(self):
        self.alerts.show.assert_called_once()
        return self.alerts.show.call_args.args[0]


# --- Happy path ---

class TestSuccess:

    def test_replaces_selection_with_extracted_text(self, config_source):
        harness = Harness(config_source)

        result = harness.run()

        assert result.success
        assert result.final_text == 'Better text'
        harness.provider.enhance.assert_awaited_once_with('original text', 'Improve this text.', 'claude-test', None)
        harness.selection.replace.assert_awaited_once_with('Better text')
        harness.screen.capture_active_screen.assert_not_called()
        harness.alerts.show.assert_not_called()

    def test_includes_compressed_screenshot(self, config_source):
        harness = Harness(config_source)

        result = harness.run(make_binding(include_screenshot=True))

        assert result.success
        harness.screen.compress.assert_awaited_once_with(b'png-bytes')
        assert harness.provider.enhance.call_args.args[3] == b'jpeg-bytes'

    def test_screenshot_only_uses_output_verbatim(self, config_source):
        harness = Harness(config_source, reply='  A terminal running tests.\n')

        result = harness.run(make_binding(screenshot_only=True, prompt='Describe the screen.'))

        assert result.final_text == 'A terminal running tests.'
        harness.selection.read.assert_not_called()
        harness.provider.enhance.assert_awaited_once_with(
            PromptConstants.SCREENSHOT_SENTINEL, 'Describe the screen.', 'claude-test', b'jpeg-bytes',
        )
        harness.selection.replace.assert_awaited_once_with('A terminal running tests.')

    def test_permission_granted_after_request(self, config_source):
        harness = Harness(config_source)
        harness.accessibility.is_trusted.side_effect = [False, True]

        result = harness.run()

        assert result.success
        harness.accessibility.request.assert_called_once()


# --- Failures ---

class TestFailures:

    def test_permission_denied(self, config_source):
        harness = Harness(config_source)
        harness.accessibility.is_trusted.return_value = False

        result = harness.run()

        assert result.error_kind == 'permission'
        harness.accessibility.request.assert_called_once()
        harness.selection.read.assert_not_called()
        harness.provider.enhance.assert_not_called()
        assert harness.alert.title == 'Accessibility Permission Required'

    @pytest.mark.parametrize('selected', ['', '   \n\t'])
    def test_no_selection_makes_no_provider_call(self, config_source, selected):
        harness = Harness(config_source)
        harness.selection.read.return_value = selected

        result = harness.run()

        assert result.error_kind == 'no_selection'
        harness.provider.enhance.assert_not_called()
        harness.selection.replace.assert_not_called()
        assert harness.alert.title == 'No Text Selected'

    def test_disabled_provider(self, config_source):
        config_source.configuration.providers['claude'].enabled = False
        harness = Harness(config_source)

        result = harness.run()

        assert result.error_kind == 'provider_unavailable'
        harness.selection.read.assert_not_called()
        assert harness.alert.needs_settings

    def test_credential_error_points_to_settings(self, config_source):
        harness = Harness(config_source)
        harness.provider.enhance.side_effect = CredentialError('claude', missing=False)

        result = harness.run()

        assert result.error_kind == 'credential'
        harness.selection.replace.assert_not_called()
        alert = harness.alert
        assert alert.title == 'Invalid API Key'
        assert alert.needs_settings
        assert 'Settings' in alert.message

    def test_transient_error_is_not_retried(self, config_source):
        harness = Harness(config_source)
        harness.provider.enhance.side_effect = TransientProviderError('openai', 429)

        result = harness.run(make_binding(provider='openai', model='gpt-4o'))

        assert result.error_kind == 'transient'
        assert harness.provider.enhance.await_count == 1
        assert harness.alert.title == 'Rate Limit Exceeded'

    def test_unparsable_reply_leaves_selection_untouched(self, config_source):
        harness = Harness(config_source, reply='Sorry, I cannot help with that.')

        result = harness.run()

        assert result.error_kind == 'extraction'
        harness.selection.replace.assert_not_called()

    def test_capture_failure_is_not_fatal_for_text_requests(self, config_source):
        harness = Harness(config_source)
        harness.screen.capture_active_screen.side_effect = CaptureError()

        result = harness.run(make_binding(include_screenshot=True))

        assert result.success
        assert harness.provider.enhance.call_args.args[3] is None
        harness.alerts.show.assert_not_called()

    def test_capture_failure_is_fatal_for_screenshot_only(self, config_source):
        harness = Harness(config_source)
        harness.screen.capture_active_screen.side_effect = OSError('no display')

        result = harness.run(make_binding(screenshot_only=True))

        assert result.error_kind == 'capture'
        harness.provider.enhance.assert_not_called()
        harness.selection.replace.assert_not_called()

    def test_timeout_discards_late_result(self, config_source):
        harness = Harness(config_source, timeout=0.05)

        async def hang(*args):
            await asyncio.sleep(10)
            return '{"enhancedText": "too late"}'

        harness.provider.enhance.side_effect = hang

        result = harness.run()

        assert result.error_kind == 'timeout'
        harness.selection.replace.assert_not_called()
        assert harness.alert.title == 'Processing Timed Out'

    def test_timed_out_work_is_unwound_before_finished(self, config_source):
        harness = Harness(config_source, timeout=0.05)
        order = []
        harness.events.add_listener(on_finished=lambda binding, result: order.append('finished'))

        async def hang(*args):
            try:
                await asyncio.sleep(10)
            finally:
                order.append('work unwound')

        harness.provider.enhance.side_effect = hang

        result = harness.run()

        assert result.error_kind == 'timeout'
        assert order == ['work unwound', 'finished']

    def test_cancellation_still_emits_finished_once(self, config_source):
        harness = Harness(config_source)

        async def scenario():
            entered = asyncio.Event()

            async def hang(*args):
                entered.set()
                await asyncio.sleep(10)

            harness.provider.enhance.side_effect = hang
            task = asyncio.ensure_future(harness.orchestrator.run(make_binding()))
            await entered.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert len(harness.counter.started) == 1
        assert len(harness.counter.finished) == 1
        assert harness.counter.finished[0].error_kind == 'cancelled'
        harness.selection.replace.assert_not_called()
        harness.alerts.show.assert_not_called()

    def test_unexpected_error_becomes_generic_alert(self, config_source):
        harness = Harness(config_source)
        harness.selection.replace.side_effect = RuntimeError('boom')

        result = harness.run()

        assert result.error_kind == 'unexpected'
        assert 'RuntimeError' in harness.alert.details

    def test_alert_failure_is_swallowed(self, config_source):
        harness = Harness(config_source)
        harness.selection.read.return_value = ''
        harness.alerts.show.side_effect = RuntimeError('no ui')

        result = harness.run()

        assert not result.success

    def test_listener_failure_does_not_break_processing(self, config_source):
        harness = Harness(config_source)
        harness.events.add_listener(on_started=MagicMock(side_effect=ValueError('bad listener')))

        result = harness.run()

        assert result.success
