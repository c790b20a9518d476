"""Shared fixtures for Velero-UI tests."""

import pytest

from velero_ui.core.config import CommandSettings
from velero_ui.errors import CommandError
from velero_ui.poller import CompletionPoller
from velero_ui.sources import ItemSource
from velero_ui.state_machine import OperationWizard


class FakeExecutor:
    """
    Scripted stand-in for CommandExecutor.

    Responses are keyed by command prefix. A response is the output text, an
    exception to raise, or a list of those consumed one per call.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def run(self, command, log_output=False):
        self.calls.append(command)
        for prefix, response in self.responses.items():
            if not command.startswith(prefix):
                continue
            if isinstance(response, list):
                response = response.pop(0) if len(response) > 1 else response[0]
            if isinstance(response, Exception):
                raise response
            return response
        raise CommandError(command, output="command not scripted", returncode=127)

    def calls_starting_with(self, prefix):
        return [c for c in self.calls if c.startswith(prefix)]


CONTEXTS = "dev\nprod\n"
NAMESPACES = "default\nns1\nns2\n"
BACKUPS_JSON = (
    '{"kind": "List", "items": ['
    '{"metadata": {"name": "weekly"}}, '
    '{"metadata": {"name": "nightly"}}]}'
)
RESOURCES = (
    "pod/web-1         1/1   Running   0     3d\n"
    "service/web       ClusterIP   10.0.0.1   <none>   80/TCP   3d\n"
    "deployment.apps/web   1/1   1   1   3d\n"
    "pod/web-1         1/1   Running   0     3d\n"
)
COMPLETED = '{"status": {"phase": "Completed"}}'
IN_PROGRESS = '{"status": {"phase": "InProgress"}}'
FAILED = '{"status": {"phase": "Failed"}}'


@pytest.fixture
def executor():
    """Executor scripted with a healthy cluster and Velero install."""
    return FakeExecutor({
        "kubectl config get-contexts": CONTEXTS,
        "kubectl get namespaces": NAMESPACES,
        "velero backup get": BACKUPS_JSON,
        "for ns in": RESOURCES,
        "velero backup create": "Backup request submitted.\n",
        "velero restore create": "Restore request submitted.\n",
        "velero backup describe": [IN_PROGRESS, COMPLETED],
        "velero restore describe": [IN_PROGRESS, COMPLETED],
    })


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_wizard(executor, sleeps):
    """Factory building a wizard on the scripted executor."""
    def _make(resource_selection=True, commands=None):
        commands = commands or CommandSettings()
        poller = CompletionPoller(
            executor,
            commands.describe,
            interval=5.0,
            sleep=sleeps.append,
        )
        return OperationWizard(
            ItemSource(executor),
            poller,
            commands=commands,
            resource_selection=resource_selection,
        )
    return _make
