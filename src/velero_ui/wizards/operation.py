"""
Interactive terminal driver for the operation wizard.

Renders each step as a numbered list and feeds the operator's answers to
OperationWizard as confirm/toggle/quit events.
"""

from typing import Optional

import typer
from rich.columns import Columns
from rich.markup import escape

from .. import ui
from ..errors import CommandError
from ..models import Outcome, Step
from ..state_machine import OperationWizard
from ..ui import Colors, Icons, console

STEP_TITLES = {
    Step.CHOOSE_OPERATION: "Select Operation",
    Step.CHOOSE_BACKUP: "Select Backup",
    Step.CHOOSE_CONTEXT: "Select Context",
    Step.CHOOSE_NAMESPACES: "Select Namespaces",
    Step.DECIDE_RESOURCES: "Select Specific Resources?",
    Step.CHOOSE_RESOURCES: "Select Resources",
    Step.ENTER_NAME: "Enter Name",
}

SELECTION_TITLES = {
    Step.CHOOSE_NAMESPACES: "Selected Namespaces",
    Step.CHOOSE_RESOURCES: "Selected Resources",
}

SINGLE_HINT = "Enter a number to confirm, 'q' or Ctrl+C to quit"
MULTI_HINT = "Enter a number to toggle, Enter to confirm, 'q' or Ctrl+C to quit"
NAME_HINT = "Press Enter to confirm, 'q' or Ctrl+C to quit"


def _get_choice(prompt: str = "Select") -> str:
    """Get user choice with graceful handling."""
    try:
        return typer.prompt(prompt, default="", show_default=False).strip().lower()
    except (KeyboardInterrupt, EOFError, typer.Abort):
        return "q"


def _parse_index(choice: str, count: int) -> Optional[int]:
    """Zero-based index for a 1-based numeric choice, None if invalid."""
    try:
        idx = int(choice) - 1
    except ValueError:
        console.print("  [red]Invalid selection[/red]")
        return None
    if 0 <= idx < count:
        return idx
    if count:
        console.print(f"  [red]Please enter a number between 1 and {count}[/red]")
    else:
        console.print("  [red]Nothing to select[/red]")
    return None


def render_step(wizard: OperationWizard) -> None:
    """Print the active step: title, items, selection so far and last error."""
    step = wizard.step
    selection = wizard.selection
    hint = MULTI_HINT if selection is not None else SINGLE_HINT
    if step is Step.ENTER_NAME:
        hint = NAME_HINT

    console.print()
    console.print(ui.step_header(STEP_TITLES.get(step, step.value), hint))
    console.print()

    lines = []
    for i, item in enumerate(wizard.items, 1):
        line = f"  [cyan]{i}.[/cyan] {escape(item.title)}"
        if selection is not None:
            if item in selection:
                line = f"  [{Colors.SELECTED}]{Icons.SELECTED}[/{Colors.SELECTED}]" + line
            else:
                line = f"  [dim]{Icons.PENDING}[/dim]" + line
        if item.description:
            line += f" [dim]{escape(item.description)}[/dim]"
        lines.append(line)

    if step is not Step.ENTER_NAME and not lines:
        lines.append("  [yellow]No items found[/yellow]")

    if selection is not None:
        console.print(Columns([
            "\n".join(lines),
            ui.selected_panel(SELECTION_TITLES[step], [escape(t) for t in selection.titles()]),
        ], padding=(0, 4)))
    elif lines:
        console.print("\n".join(lines))

    if wizard.error is not None:
        console.print()
        ui.error(escape(str(wizard.error)))


def render_outcome(wizard: OperationWizard) -> None:
    """Print the final result of the session."""
    outcome = wizard.outcome
    console.print()

    if outcome is Outcome.QUIT:
        ui.info("Cancelled")
        return

    if outcome is Outcome.SUCCEEDED:
        record = wizard.operation_record()
        console.print(ui.summary_panel(
            f"{record.kind.label} Complete",
            [(label, escape(value)) for label, value in wizard.summary()],
            success=True,
        ))
        return

    error = wizard.error
    console.print(ui.summary_panel(
        "Operation Failed",
        [(label, escape(value)) for label, value in wizard.summary()],
        success=False,
        note=escape(str(error)) if error else None,
    ))
    if isinstance(error, CommandError) and error.output.strip():
        ui.muted(escape(error.output.strip()))


def run_operation_wizard(wizard: OperationWizard) -> Outcome:
    """
    Run the wizard interactively until it finishes.

    Args:
        wizard: A freshly constructed OperationWizard

    Returns:
        The session outcome
    """
    console.print(ui.header(
        "Velero-UI",
        "Back up or restore Kubernetes namespaces with Velero.",
    ))

    try:
        while not wizard.finished:
            step = wizard.step

            if step is Step.EXECUTE:
                record = wizard.operation_record()
                with console.status(
                    f"[cyan]Running {record.kind.value} '{escape(record.poll_name)}'...[/cyan]"
                ):
                    wizard.confirm()
                continue

            render_step(wizard)

            if step is Step.ENTER_NAME:
                name = typer.prompt("  Name", default="", show_default=False)
                if name.strip().lower() == "q":
                    wizard.quit()
                else:
                    wizard.confirm(text=name)
                continue

            if wizard.selection is not None:
                choice = _get_choice("Toggle")
                if choice == "":
                    wizard.confirm()
                elif choice == "q":
                    wizard.quit()
                else:
                    idx = _parse_index(choice, len(wizard.items))
                    if idx is not None:
                        wizard.toggle(idx)
                continue

            choice = _get_choice("Select")
            if choice == "q":
                wizard.quit()
            elif choice:
                idx = _parse_index(choice, len(wizard.items))
                if idx is not None:
                    wizard.confirm(index=idx)

    except (KeyboardInterrupt, EOFError, typer.Abort):
        wizard.quit()

    render_outcome(wizard)
    return wizard.outcome
