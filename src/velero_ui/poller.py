"""
Completion polling for submitted backups and restores.

Velero reports an operation's progress through its phase. The poller
queries the phase on a fixed interval until it is terminal.
"""

import json
import re
import threading
import time
from typing import Any, Callable, Optional

from .core.logging import get_logger
from .errors import OperationFailedError, PollCancelledError, PollTimeoutError
from .executor import CommandExecutor, TemplateValue, render_command
from .models import OperationKind, Phase

_PHASE_MARKER = re.compile(r'"?\b[Pp]hase"?\s*:\s*"?([A-Za-z]+)')


def _phase_from_value(value: Any) -> Optional[Phase]:
    if not isinstance(value, str):
        return None
    try:
        return Phase(value)
    except ValueError:
        return None


def detect_phase(output: str) -> Optional[Phase]:
    """
    Extract the phase from status output.

    JSON output is read from `status.phase` (or a top-level phase field);
    anything else is searched for a `Phase: <value>` marker. Returns None
    when no known phase is found.
    """
    try:
        data = json.loads(output)
    except ValueError:
        data = None

    if isinstance(data, dict):
        status = data.get("status")
        if isinstance(status, dict) and "phase" in status:
            return _phase_from_value(status["phase"])
        for key in ("phase", "Phase"):
            if key in data:
                return _phase_from_value(data[key])

    match = _PHASE_MARKER.search(output)
    if match:
        return _phase_from_value(match.group(1))
    return None


class CompletionPoller:
    """
    Blocks until an operation reaches a terminal phase.

    A failing status query ends the poll immediately. The poll can be
    cancelled from another thread with cancel(), and bounded with an
    optional timeout.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        describe_template: str,
        interval: float = 5.0,
        timeout: Optional[float] = None,
        sleep: Optional[Callable[[float], Any]] = None,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[Any] = None,
    ):
        """
        Initialize the poller.

        Args:
            executor: Executor used for status queries
            describe_template: Status command template with {kind}, {name}
                and any fields passed to await_completion()
            interval: Seconds between queries
            timeout: Optional ceiling in seconds for the whole poll
            sleep: Wait function (defaults to an interruptible wait)
            clock: Monotonic clock used for the timeout
            logger: Optional structlog logger
        """
        self.executor = executor
        self.describe_template = describe_template
        self.interval = interval
        self.timeout = timeout
        self._cancelled = threading.Event()
        self._sleep = sleep or self._cancelled.wait
        self._clock = clock
        self._logger = logger or get_logger(__name__)

    def cancel(self) -> None:
        """Stop the running poll at its next wait."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def status_command(self, kind: OperationKind, name: str, **fields: TemplateValue) -> str:
        """Render the status query; extra fields such as context are available to the template."""
        return render_command(self.describe_template, kind=kind.value, name=name, **fields)

    def await_completion(self, kind: OperationKind, name: str, **fields: TemplateValue) -> Phase:
        """
        Poll until the operation completes or fails.

        Args:
            kind: Backup or restore
            name: Name the operation was created under
            **fields: Further template values, e.g. context

        Returns:
            The completed phase

        Raises:
            CommandError: If a status query fails
            TemplateError: If the status template cannot be rendered
            OperationFailedError: If the operation reports a failed phase
            PollCancelledError: If cancel() was called
            PollTimeoutError: If the timeout elapsed first
        """
        command = self.status_command(kind, name, **fields)
        started = self._clock()

        while True:
            if self.cancelled:
                self._logger.info("Poll cancelled", kind=kind.value, name=name)
                raise PollCancelledError(f"waiting for {kind.value} {name} was cancelled")

            output = self.executor.run(command)
            phase = detect_phase(output)
            self._logger.debug(
                "Polled status",
                kind=kind.value,
                name=name,
                phase=phase.value if phase else None,
            )

            if phase is not None and phase.is_completed:
                self._logger.info("Operation completed", kind=kind.value, name=name)
                return phase
            if phase is not None and phase.is_failed:
                self._logger.error("Operation failed", kind=kind.value, name=name, phase=phase.value)
                raise OperationFailedError(kind.value, name, phase.value)

            if self.timeout is not None and self._clock() - started >= self.timeout:
                raise PollTimeoutError(kind.value, name, self.timeout)

            self._sleep(self.interval)
