"""
Tests for completion polling.
"""

import pytest

from velero_ui.errors import (
    CommandError,
    OperationFailedError,
    PollCancelledError,
    PollTimeoutError,
    TemplateError,
)
from velero_ui.models import OperationKind, Phase
from velero_ui.poller import CompletionPoller, detect_phase

from conftest import COMPLETED, FAILED, IN_PROGRESS, FakeExecutor

DESCRIBE = "velero {kind} describe {name} --details -o json"


def _poller(responses, sleeps=None, **kwargs):
    executor = FakeExecutor({"velero": responses})
    sleep = sleeps.append if sleeps is not None else (lambda seconds: None)
    return CompletionPoller(executor, DESCRIBE, sleep=sleep, **kwargs), executor


class TestDetectPhase:
    """Tests for phase extraction."""

    def test_json_status_phase(self):
        """Test the status.phase field of JSON output."""
        assert detect_phase(COMPLETED) is Phase.COMPLETED
        assert detect_phase(IN_PROGRESS) is Phase.IN_PROGRESS

    def test_json_top_level_phase(self):
        """Test a top-level Phase field."""
        assert detect_phase('{"Phase": "Failed"}') is Phase.FAILED

    def test_text_marker(self):
        """Test describe-style text output."""
        output = 'Name: nightly\n"Phase": "Completed"\nErrors: 0\n'
        assert detect_phase(output) is Phase.COMPLETED

    def test_plain_describe_output(self):
        """Test velero's human-readable describe output."""
        output = "Name:         nightly\nPhase:  PartiallyFailed\n"
        assert detect_phase(output) is Phase.PARTIALLY_FAILED

    @pytest.mark.parametrize("output", ["", "{}", "no status yet", '{"status": {}}', '"Phase": "Weird"'])
    def test_unknown_phase(self, output):
        """Test that ambiguous output has no phase."""
        assert detect_phase(output) is None


class TestCompletionPoller:
    """Tests for CompletionPoller.await_completion."""

    def test_completes_after_in_progress(self):
        """Test two in-progress answers then completion: three queries, two waits."""
        sleeps = []
        poller, executor = _poller([IN_PROGRESS, IN_PROGRESS, COMPLETED], sleeps)

        phase = poller.await_completion(OperationKind.BACKUP, "nightly")

        assert phase is Phase.COMPLETED
        assert executor.calls == ["velero backup describe nightly --details -o json"] * 3
        assert sleeps == [5.0, 5.0]

    def test_failed_phase_raises(self):
        """Test that a failed phase identifies the operation."""
        poller, _ = _poller([FAILED])

        with pytest.raises(OperationFailedError) as exc_info:
            poller.await_completion(OperationKind.RESTORE, "nightly")

        assert str(exc_info.value) == "restore nightly failed"
        assert exc_info.value.kind == "restore"
        assert exc_info.value.name == "nightly"
        assert exc_info.value.phase == "Failed"

    @pytest.mark.parametrize("phase", ["PartiallyFailed", "FailedValidation"])
    def test_other_failed_phases(self, phase):
        """Test that every failed phase ends the poll."""
        poller, _ = _poller([f'{{"status": {{"phase": "{phase}"}}}}'])

        with pytest.raises(OperationFailedError):
            poller.await_completion(OperationKind.BACKUP, "nightly")

    def test_query_error_is_fatal(self):
        """Test that a failing status query is not retried."""
        error = CommandError("velero backup describe x", "not found", 1)
        sleeps = []
        poller, executor = _poller([error, COMPLETED], sleeps)

        with pytest.raises(CommandError):
            poller.await_completion(OperationKind.BACKUP, "x")

        assert len(executor.calls) == 1
        assert sleeps == []

    def test_ambiguous_status_keeps_polling(self):
        """Test that unparsed output is treated as still running."""
        sleeps = []
        poller, executor = _poller(["", "garbage", '{"status": {"phase": "New"}}', COMPLETED], sleeps)

        poller.await_completion(OperationKind.BACKUP, "nightly")

        assert len(executor.calls) == 4
        assert len(sleeps) == 3

    def test_uses_configured_interval(self):
        """Test the wait interval."""
        sleeps = []
        poller, _ = _poller([IN_PROGRESS, COMPLETED], sleeps, interval=0.5)

        poller.await_completion(OperationKind.BACKUP, "nightly")

        assert sleeps == [0.5]

    def test_cancel_stops_polling(self):
        """Test cancellation from the wait."""
        executor = FakeExecutor({"velero": IN_PROGRESS})
        poller = CompletionPoller(executor, DESCRIBE, sleep=lambda s: poller.cancel())

        with pytest.raises(PollCancelledError):
            poller.await_completion(OperationKind.BACKUP, "nightly")

        assert len(executor.calls) == 1
        assert poller.cancelled is True

    def test_default_wait_returns_early_when_cancelled(self):
        """Test that the default wait is interrupted by cancel()."""
        executor = FakeExecutor({"velero": IN_PROGRESS})
        poller = CompletionPoller(executor, DESCRIBE, interval=60.0)
        poller.cancel()

        with pytest.raises(PollCancelledError):
            poller.await_completion(OperationKind.BACKUP, "nightly")

        assert executor.calls == []

    def test_timeout(self):
        """Test the optional ceiling."""
        ticks = iter([0.0, 4.0, 8.0, 12.0])
        poller, executor = _poller([IN_PROGRESS], timeout=10.0, clock=lambda: next(ticks))

        with pytest.raises(PollTimeoutError) as exc_info:
            poller.await_completion(OperationKind.BACKUP, "nightly")

        assert exc_info.value.timeout == 10.0
        assert len(executor.calls) == 3


class TestStatusCommand:
    """Tests for rendering the status query."""

    def test_extra_fields_reach_template(self):
        """Test that the context can be part of the status query."""
        executor = FakeExecutor({"velero": COMPLETED})
        poller = CompletionPoller(
            executor,
            "velero {kind} describe {name} -o json --kubecontext {context}",
            sleep=lambda seconds: None,
        )

        poller.await_completion(OperationKind.RESTORE, "nightly", context="prod")

        assert executor.calls == ["velero restore describe nightly -o json --kubecontext prod"]

    def test_values_are_shell_quoted(self):
        """Test that names with spaces stay one argument."""
        poller, _ = _poller([COMPLETED])
        assert poller.status_command(OperationKind.BACKUP, "my backup") == (
            "velero backup describe 'my backup' --details -o json"
        )

    def test_unknown_placeholder_raises_template_error(self):
        """Test that a bad template fails before any query runs."""
        executor = FakeExecutor({"velero": COMPLETED})
        poller = CompletionPoller(executor, "velero {kind} describe {name} --kubecontext {context}")

        with pytest.raises(TemplateError, match="context"):
            poller.await_completion(OperationKind.BACKUP, "nightly")
        assert executor.calls == []
