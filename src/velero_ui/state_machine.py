"""
Operation wizard state machine.

Sequences the operator's decisions for a Velero backup or restore:

    choose operation -> [restore: choose backup] -> choose context
    -> choose namespaces -> [decide resources -> choose resources]
    -> enter name -> execute

Each confirmed step populates the next one through an ItemSource. The
execute step dispatches the operation and waits for it with a
CompletionPoller. The machine does no rendering; a driver feeds it
toggle/confirm/quit events and reads back the step, items and selections.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from .core.config import CommandSettings, DEFAULT_RESOURCE_PREFIXES, Settings
from .core.logging import get_logger
from .errors import EmptySelectionError, WizardError
from .executor import CommandExecutor, TemplateValue, render_command
from .models import (
    OPERATION_ITEMS,
    YES_NO_ITEMS,
    OperationKind,
    OperationRecord,
    Outcome,
    SelectableItem,
    Step,
)
from .poller import CompletionPoller
from .selection import SelectionSet
from .sources import ItemSource


@dataclass
class WizardSession:
    """
    Mutable state of one wizard run.

    Slots for steps not yet reached stay unset; slots of confirmed steps
    are not changed again.
    """

    step: Step = Step.CHOOSE_OPERATION
    items: list[SelectableItem] = field(default_factory=list)
    operation: Optional[SelectableItem] = None
    backup: Optional[SelectableItem] = None
    context: Optional[SelectableItem] = None
    namespaces: SelectionSet = field(default_factory=SelectionSet)
    specific_resources: Optional[SelectableItem] = None
    resources: SelectionSet = field(default_factory=SelectionSet)
    name: Optional[str] = None
    dispatch_output: str = ""
    error: Optional[Exception] = None
    outcome: Outcome = Outcome.PENDING

    @property
    def kind(self) -> Optional[OperationKind]:
        if self.operation is None:
            return None
        return OperationKind(self.operation.title.lower())


class OperationWizard:
    """Drives a WizardSession through the backup/restore flow."""

    def __init__(
        self,
        source: ItemSource,
        poller: CompletionPoller,
        commands: Optional[CommandSettings] = None,
        resource_selection: bool = True,
        resource_prefixes: Optional[Sequence[str]] = None,
        logger: Optional[Any] = None,
    ):
        """
        Initialize the wizard at the operation step.

        Args:
            source: Item source used to populate each step
            poller: Poller used after dispatching the operation
            commands: Command templates
            resource_selection: Offer the specific-resources sub-steps
            resource_prefixes: Resource types offered for selection
            logger: Optional structlog logger
        """
        self.source = source
        self.poller = poller
        self.commands = commands or CommandSettings()
        self.resource_selection = resource_selection
        self.resource_prefixes = list(resource_prefixes or DEFAULT_RESOURCE_PREFIXES)
        self._logger = logger or get_logger(__name__)
        self.session = WizardSession(items=list(OPERATION_ITEMS))

        self._confirm_handlers: dict[Step, Callable[[Optional[int], Optional[str]], None]] = {
            Step.CHOOSE_OPERATION: self._confirm_operation,
            Step.CHOOSE_BACKUP: self._confirm_backup,
            Step.CHOOSE_CONTEXT: self._confirm_context,
            Step.CHOOSE_NAMESPACES: self._confirm_namespaces,
            Step.DECIDE_RESOURCES: self._confirm_resource_decision,
            Step.CHOOSE_RESOURCES: self._confirm_resources,
            Step.ENTER_NAME: self._confirm_name,
            Step.EXECUTE: self._confirm_execute,
        }

    @classmethod
    def from_settings(cls, settings: Settings, logger: Optional[Any] = None) -> "OperationWizard":
        """Wire an executor, item source and poller from application settings."""
        logger = logger or get_logger(__name__)
        executor = CommandExecutor(shell=settings.wizard.shell, logger=logger)
        poller = CompletionPoller(
            executor,
            settings.commands.describe,
            interval=settings.wizard.poll_interval,
            timeout=settings.wizard.poll_timeout,
            logger=logger,
        )
        return cls(
            ItemSource(executor, logger=logger),
            poller,
            commands=settings.commands,
            resource_selection=settings.wizard.resource_selection,
            resource_prefixes=settings.wizard.resource_prefixes,
            logger=logger,
        )

    # ------------------------------------------------------------------
    # State exposed to the presentation layer
    # ------------------------------------------------------------------

    @property
    def step(self) -> Step:
        return self.session.step

    @property
    def items(self) -> list[SelectableItem]:
        return list(self.session.items)

    @property
    def error(self) -> Optional[Exception]:
        return self.session.error

    @property
    def outcome(self) -> Outcome:
        return self.session.outcome

    @property
    def finished(self) -> bool:
        return self.session.outcome is not Outcome.PENDING

    @property
    def selection(self) -> Optional[SelectionSet]:
        """Selection set of the active multi-select step, if any."""
        if self.session.step is Step.CHOOSE_NAMESPACES:
            return self.session.namespaces
        if self.session.step is Step.CHOOSE_RESOURCES:
            return self.session.resources
        return None

    def summary(self) -> list[tuple[str, str]]:
        """Confirmed choices so far as (label, value) pairs."""
        s = self.session
        rows = []
        if s.operation:
            rows.append(("Operation", s.operation.title))
        if s.backup:
            rows.append(("Backup", s.backup.title))
        if s.context:
            rows.append(("Context", s.context.title))
        if s.namespaces:
            rows.append(("Namespaces", s.namespaces.join(", ")))
        if s.resources:
            rows.append(("Resources", s.resources.join(", ")))
        if s.name is not None:
            rows.append(("Name", s.name))
        return rows

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def toggle(self, index: int) -> None:
        """Toggle the item at index in the active multi-select step."""
        selection = self.selection
        if self.finished or selection is None:
            return
        item = selection.toggle_at(self.session.items, index)
        if item is None:
            return
        if item in selection:
            self._logger.debug("Selected item", step=self.step.value, item=item.title)
        else:
            self._logger.debug("Deselected item", step=self.step.value, item=item.title)

    def confirm(self, index: Optional[int] = None, text: Optional[str] = None) -> None:
        """
        Confirm the active step.

        Args:
            index: Cursor position for single-choice steps
            text: Entered text for the name step
        """
        if self.finished:
            return
        handler = self._confirm_handlers.get(self.session.step)
        if handler is None:
            return
        try:
            handler(index, text)
        except EmptySelectionError as e:
            self.session.error = e
            self._logger.debug("Rejected confirmation", step=self.step.value, error=str(e))
        except WizardError as e:
            if self.session.outcome is Outcome.QUIT:
                return
            self._fail(e)

    def quit(self) -> None:
        """End the session immediately, discarding all progress."""
        self._logger.info("Wizard exited by user", step=self.step.value)
        self.poller.cancel()
        self.session = WizardSession(step=Step.TERMINAL, outcome=Outcome.QUIT)

    # ------------------------------------------------------------------
    # Operation record and dispatch command
    # ------------------------------------------------------------------

    def operation_record(self) -> OperationRecord:
        s = self.session
        return OperationRecord(
            kind=s.kind,
            context=s.context.title if s.context else "",
            name=s.name or "",
            namespaces=s.namespaces.titles(),
            resources=s.resources.titles(),
            backup=s.backup.title if s.backup else None,
        )

    def dispatch_command(self, record: OperationRecord) -> str:
        """Render the create command for an operation record."""
        if record.kind is OperationKind.RESTORE:
            if record.resources:
                template = self.commands.create_restore_with_resources
            else:
                template = self.commands.create_restore
        elif record.resources:
            template = self.commands.create_backup_with_resources
        else:
            template = self.commands.create_backup
        return self._render(template, **record.template_fields())

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    def _confirm_operation(self, index: Optional[int], text: Optional[str]) -> None:
        self.session.operation = self._pick(index, "operation")
        self._logger.debug("Selected operation", operation=self.session.operation.title)
        if self.session.kind is OperationKind.BACKUP:
            self._advance(Step.CHOOSE_CONTEXT, self._fetch_contexts)
        else:
            self._advance(Step.CHOOSE_BACKUP, self._fetch_backups)

    def _confirm_backup(self, index: Optional[int], text: Optional[str]) -> None:
        self.session.backup = self._pick(index, "backup")
        self._logger.debug("Selected backup", backup=self.session.backup.title)
        self._advance(Step.CHOOSE_CONTEXT, self._fetch_contexts)

    def _confirm_context(self, index: Optional[int], text: Optional[str]) -> None:
        self.session.context = self._pick(index, "context")
        self._logger.debug("Selected context", context=self.session.context.title)
        self._advance(Step.CHOOSE_NAMESPACES, self._fetch_namespaces)

    def _confirm_namespaces(self, index: Optional[int], text: Optional[str]) -> None:
        if not self.session.namespaces:
            raise EmptySelectionError("namespace")
        self.session.namespaces.freeze()
        self._logger.debug("Selected namespaces", namespaces=self.session.namespaces.titles())
        if self.resource_selection:
            self._advance(Step.DECIDE_RESOURCES, lambda: list(YES_NO_ITEMS))
        else:
            self._advance(Step.ENTER_NAME, list)

    def _confirm_resource_decision(self, index: Optional[int], text: Optional[str]) -> None:
        decision = self._pick(index, "answer")
        self.session.specific_resources = decision
        self._logger.debug("Specific resources", answer=decision.title)
        if decision.title == "Yes":
            self._advance(Step.CHOOSE_RESOURCES, self._fetch_resources)
        else:
            self._advance(Step.ENTER_NAME, list)

    def _confirm_resources(self, index: Optional[int], text: Optional[str]) -> None:
        if not self.session.resources:
            raise EmptySelectionError("resource")
        self.session.resources.freeze()
        self._logger.debug("Selected resources", resources=self.session.resources.titles())
        self._advance(Step.ENTER_NAME, list)

    def _confirm_name(self, index: Optional[int], text: Optional[str]) -> None:
        self.session.name = text or ""
        self._logger.debug("Entered name", name=self.session.name)
        self._advance(Step.EXECUTE, list)

    def _confirm_execute(self, index: Optional[int], text: Optional[str]) -> None:
        record = self.operation_record()
        command = self.dispatch_command(record)
        self._logger.info("Dispatching operation", kind=record.kind.value, command=command)

        self.session.dispatch_output = self.source.executor.run(command, log_output=True)
        self.poller.await_completion(
            record.kind,
            record.poll_name,
            context=record.context,
            namespaces=record.namespaces,
            backup=record.backup or "",
        )

        self.session.step = Step.TERMINAL
        self.session.items = []
        self.session.outcome = Outcome.SUCCEEDED
        self._logger.info("Operation completed successfully", kind=record.kind.value, name=record.poll_name)

    # ------------------------------------------------------------------
    # Item fetching
    # ------------------------------------------------------------------

    def _fetch_contexts(self) -> list[SelectableItem]:
        return self.source.lines(self._render(self.commands.list_contexts))

    def _fetch_namespaces(self) -> list[SelectableItem]:
        return self.source.lines(self._render(self.commands.list_namespaces))

    def _fetch_backups(self) -> list[SelectableItem]:
        command = self._render(self.commands.list_backups)
        if self.commands.backup_list_format == "lines":
            return self.source.lines(command)
        return self.source.structured(command, self.commands.backup_name_field)

    def _fetch_resources(self) -> list[SelectableItem]:
        command = self._render(self.commands.list_resources, separator=" ")
        return self.source.resources(command, self.resource_prefixes)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pick(self, index: Optional[int], what: str) -> SelectableItem:
        """The item under the cursor of a single-choice step."""
        items = self.session.items
        position = 0 if index is None else index
        if position < 0 or position >= len(items):
            raise EmptySelectionError(what)
        return items[position]

    def _advance(self, step: Step, fetch: Callable[[], list[SelectableItem]]) -> None:
        """Move to step and populate it; fetch errors propagate as fatal."""
        self._logger.debug("Entering step", step=step.value)
        self.session.step = step
        self.session.error = None
        self.session.items = []
        self.session.items = fetch()

    def _render(self, template: str, separator: str = ",", **fields: TemplateValue) -> str:
        """Render a template from the session's choices plus explicit fields."""
        s = self.session
        values: dict[str, TemplateValue] = {
            "kind": s.kind.value if s.kind else "",
            "context": s.context.title if s.context else "",
            "namespaces": s.namespaces.titles(),
            "backup": s.backup.title if s.backup else "",
            "name": s.name or "",
        }
        values.update(fields)
        return render_command(template, separator=separator, **values)

    def _fail(self, error: Exception) -> None:
        """Record a fatal error and end the session."""
        self.session.error = error
        self.session.outcome = Outcome.FAILED
        self._logger.error("Wizard failed", step=self.step.value, error=str(error))
