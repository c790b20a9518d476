"""
External command execution.

The only place the wizard talks to the outside world: every listing,
dispatch and status query goes through CommandExecutor.run().
"""

import shlex
import subprocess
from typing import Any, Iterable, Optional, Sequence, Union

from .core.logging import get_logger
from .errors import CommandError, TemplateError

TemplateValue = Union[str, Sequence[str]]


def shell_join(values: Iterable[str], separator: str = ",") -> str:
    """Shell-quote each value and join them with separator."""
    return separator.join(shlex.quote(value) for value in values)


def render_command(template: str, separator: str = ",", **fields: TemplateValue) -> str:
    """
    Fill a command template with shell-quoted values.

    String values are quoted as one word. Lists and tuples are quoted per
    element and joined with separator.

    Raises:
        TemplateError: If the template is malformed or names an unknown field
    """
    values = {}
    for key, value in fields.items():
        if isinstance(value, (list, tuple)):
            values[key] = shell_join(value, separator)
        else:
            values[key] = shlex.quote(value)
    try:
        return template.format(**values)
    except KeyError as e:
        raise TemplateError(template, f"unknown placeholder {e}") from e
    except (IndexError, ValueError, TypeError, AttributeError) as e:
        raise TemplateError(template, str(e)) from e


class CommandExecutor:
    """
    Runs shell commands synchronously with stdout and stderr merged.

    Standard error is redirected into standard output so the combined text
    keeps the order the process wrote it in.
    """

    def __init__(self, shell: str = "/bin/sh", logger: Optional[Any] = None):
        """
        Initialize the executor.

        Args:
            shell: Shell used to interpret command strings
            logger: Optional structlog logger (defaults to module logger)
        """
        self.shell = shell
        self._logger = logger or get_logger(__name__)

    def run(self, command: str, log_output: bool = False) -> str:
        """
        Run a command and return its combined output.

        Args:
            command: Command line interpreted by the shell
            log_output: Also log the output at debug level

        Returns:
            Combined stdout/stderr text

        Raises:
            CommandError: On launch failure or non-zero exit; the combined
                output is attached for diagnostics
        """
        self._logger.debug("Running command", command=command)

        try:
            result = subprocess.run(
                [self.shell, "-c", command],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            self._logger.debug("Command error", command=command, error=str(e))
            raise CommandError(command, output=str(e)) from e

        output = result.stdout or ""
        if log_output:
            self._logger.debug("Command output", command=command, output=output)

        if result.returncode != 0:
            self._logger.debug(
                "Command error",
                command=command,
                returncode=result.returncode,
            )
            raise CommandError(command, output=output, returncode=result.returncode)

        return output
