"""
Exceptions raised by the Velero-UI wizard.

Fatal errors (command, parse, operation failures) end a wizard session.
EmptySelectionError is the only recoverable one.
"""

from typing import Optional


class WizardError(Exception):
    """Base class for all wizard errors."""
    pass


class CommandError(WizardError):
    """Raised when an external command exits non-zero or fails to launch."""
    def __init__(self, command: str, output: str = "", returncode: Optional[int] = None):
        if returncode is None:
            message = f"failed to launch command: {command}"
        else:
            message = f"command exited with status {returncode}: {command}"
        super().__init__(message)
        self.command = command
        self.output = output
        self.returncode = returncode


class ParseError(WizardError):
    """Raised when structured command output cannot be decoded."""
    def __init__(self, command: str, reason: str):
        super().__init__(f"could not parse output of '{command}': {reason}")
        self.command = command
        self.reason = reason


class EmptySelectionError(WizardError):
    """Raised when a multi-select step is confirmed with nothing selected."""
    def __init__(self, what: str):
        super().__init__(f"no {what} selected")
        self.what = what


class OperationFailedError(WizardError):
    """Raised when the polled backup or restore reports a failed phase."""
    def __init__(self, kind: str, name: str, phase: Optional[str] = None):
        super().__init__(f"{kind} {name} failed")
        self.kind = kind
        self.name = name
        self.phase = phase


class PollCancelledError(WizardError):
    """Raised when a completion poll is cancelled."""
    pass


class PollTimeoutError(WizardError):
    """Raised when a completion poll exceeds its configured ceiling."""
    def __init__(self, kind: str, name: str, timeout: float):
        super().__init__(f"{kind} {name} did not finish within {timeout:g}s")
        self.kind = kind
        self.name = name
        self.timeout = timeout


class TemplateError(WizardError):
    """Raised when a command template cannot be rendered."""
    def __init__(self, template: str, reason: str):
        super().__init__(f"invalid command template '{template}': {reason}")
        self.template = template
        self.reason = reason
