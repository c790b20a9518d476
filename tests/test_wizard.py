"""
Tests for the interactive wizard driver.
"""

import pytest

from velero_ui.models import Outcome, Step
from velero_ui.wizards import run_operation_wizard


@pytest.fixture
def answer(monkeypatch):
    """Script the operator's answers to typer.prompt."""
    def _answer(*answers):
        queue = list(answers)

        def fake_prompt(*args, **kwargs):
            reply = queue.pop(0)
            if isinstance(reply, BaseException):
                raise reply
            return reply

        monkeypatch.setattr("typer.prompt", fake_prompt)
        return queue
    return _answer


class TestRunOperationWizard:
    """Tests for run_operation_wizard."""

    def test_backup_session(self, make_wizard, executor, answer):
        """Test a complete backup driven by typed answers."""
        wizard = make_wizard()
        remaining = answer("1", "2", "2", "3", "", "2", "nightly")

        outcome = run_operation_wizard(wizard)

        assert outcome is Outcome.SUCCEEDED
        assert remaining == []
        assert executor.calls_starting_with("velero backup create") == [
            "velero backup create nightly --include-namespaces ns1,ns2 --kubecontext prod"
        ]

    def test_invalid_input_keeps_step(self, make_wizard, answer):
        """Test that bad numbers and text are ignored."""
        wizard = make_wizard()
        answer("9", "abc", "q")

        outcome = run_operation_wizard(wizard)

        assert outcome is Outcome.QUIT

    def test_quit_on_multi_select(self, make_wizard, answer):
        """Test 'q' while picking namespaces."""
        wizard = make_wizard()
        answer("1", "1", "1", "q")

        assert run_operation_wizard(wizard) is Outcome.QUIT
        assert wizard.step is Step.TERMINAL

    def test_ctrl_c_quits(self, make_wizard, answer):
        """Test Ctrl+C at a selection prompt."""
        wizard = make_wizard()
        answer(KeyboardInterrupt())

        assert run_operation_wizard(wizard) is Outcome.QUIT

    def test_ctrl_c_at_name_quits(self, make_wizard, answer):
        """Test Ctrl+C while typing the name."""
        wizard = make_wizard(resource_selection=False)
        answer("1", "1", "1", "", KeyboardInterrupt())

        assert run_operation_wizard(wizard) is Outcome.QUIT

    def test_q_at_name_quits(self, make_wizard, executor, answer):
        """Test that 'q' quits from the name step too."""
        wizard = make_wizard(resource_selection=False)
        answer("1", "1", "1", "", "q")

        assert run_operation_wizard(wizard) is Outcome.QUIT
        assert executor.calls_starting_with("velero backup create") == []

    def test_failed_operation(self, make_wizard, executor, answer):
        """Test that a failed phase ends the session as failed."""
        executor.responses["velero backup describe"] = ['{"status": {"phase": "Failed"}}']
        wizard = make_wizard(resource_selection=False)
        answer("1", "1", "1", "", "broken")

        assert run_operation_wizard(wizard) is Outcome.FAILED
        assert "backup broken failed" in str(wizard.error)
