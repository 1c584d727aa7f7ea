"""
Wizard Runner

Terminal host for a wizard flow. Renders steps with rich, turns the
answers into field-change events and navigation intents, and leaves
every rule to the WizardController.
"""

import asyncio
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..config.models import FieldConfig, FieldKind
from .controller import WizardController
from .fields import FileHandle
from .navigator import NavigationOutcome
from .review import StepStatus, describe_file, display_value, progress_percent


class NavigationAction(str, Enum):
    """Possible navigation actions."""
    CONTINUE = "continue"
    BACK = "back"
    JUMP = "jump"
    QUIT = "quit"


def parse_selection(text: str, options: List[str]) -> List[str]:
    """
    Parse a comma separated list of option numbers or names.

    Unknown entries are skipped.

    >>> parse_selection("1, Asia", ["Europe", "Asia"])
    ['Europe', 'Asia']
    """
    picked = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if part.isdigit():
            idx = int(part) - 1
            if 0 <= idx < len(options):
                picked.append(options[idx])
            continue
        for option in options:
            if option.lower() == part.lower():
                picked.append(option)
                break
    return picked


class TerminalRunner:
    """
    Runs one flow interactively in the terminal.

    Drafts are autosaved while answering and flushed on quit, so a
    later run offers to resume.
    """

    def __init__(self, controller: WizardController, console: Optional[Console] = None):
        """
        Initialize the runner.

        Args:
            controller: Controller owning the session
            console: Rich console for output
        """
        self.controller = controller
        self.flow = controller.flow
        self.console = console or Console()

    def run(self) -> bool:
        """
        Run the wizard until it is submitted or the user quits.

        Returns:
            True if the flow was submitted
        """
        return asyncio.run(self._run())

    async def _run(self) -> bool:
        self.console.print(Panel.fit(f"[bold]{self.flow.title}[/bold]", border_style="blue"))

        if self.controller.resumed and not self.handle_resume():
            return False

        while True:
            session = self.controller.session
            step = self.controller.step

            self.show_progress()
            self._show_step_header()

            for spec in step.fields:
                self.prompt_field(spec)

            if self.controller.is_last_step:
                self.show_review()

            action = self.show_navigation_prompt(session.current_step)

            if action == NavigationAction.QUIT:
                if self.confirm_quit():
                    self.controller.flush_draft()
                    self.console.print(
                        f"\n[yellow]Progress saved. Run 'formwizard run {self.flow.name}' to continue.[/yellow]"
                    )
                    return False
                continue

            if action == NavigationAction.BACK:
                self.controller.retreat()
                continue

            if action == NavigationAction.JUMP:
                self._jump()
                continue

            outcome = await self._advance()
            if outcome == NavigationOutcome.BLOCKED:
                self._show_errors()
            elif outcome == NavigationOutcome.SUBMIT:
                error = self.controller.session.submission_error
                if error:
                    self.console.print(f"\n[red]{error}[/red]")
                    self.console.print("[dim]Your answers are kept. Continue to retry.[/dim]")
                elif self.controller.session.errors:
                    self._show_errors()
                else:
                    self._show_completion()
                    return True

    async def _advance(self) -> NavigationOutcome:
        if not self.controller.is_last_step:
            return await self.controller.advance()
        with self.console.status("Submitting..."):
            return await self.controller.advance()

    # ------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------

    def prompt_field(self, spec: FieldConfig) -> None:
        """Ask for one field, offering the current value as default."""
        value = self.controller.form_data.get(spec.name)
        label = f"{spec.label}{' *' if spec.rule else ''}"

        if spec.kind == FieldKind.BOOLEAN:
            answer = Confirm.ask(label, default=bool(value), console=self.console)
            self.controller.update_field(spec.name, answer, FieldKind.BOOLEAN)

        elif spec.kind == FieldKind.SELECT:
            self.console.print(f"\n[bold]{label}[/bold]")
            for i, option in enumerate(spec.options, 1):
                self.console.print(f"  [{i}] {option}")
            answer = Prompt.ask("Choice", default=value or "", console=self.console)
            picked = parse_selection(answer, spec.options)
            if picked:
                self.controller.update_field(spec.name, picked[0], FieldKind.SELECT)
            elif answer != value:
                self.controller.update_field(spec.name, "", FieldKind.SELECT)

        elif spec.kind == FieldKind.MULTISELECT:
            self.console.print(f"\n[bold]{label}[/bold] [dim](numbers to toggle, comma separated)[/dim]")
            for i, option in enumerate(spec.options, 1):
                mark = "[green]x[/green]" if option in value else " "
                self.console.print(f"  [{i}] [{mark}] {option}")
            answer = Prompt.ask("Toggle", default="", console=self.console)
            for option in parse_selection(answer, spec.options):
                self.controller.toggle_multi_value(spec.name, option)

        elif spec.kind in (FieldKind.FILE, FieldKind.FILES):
            self._prompt_files(spec, label)

        else:
            answer = Prompt.ask(label, default=value or "", console=self.console)
            if answer != value:
                self.controller.update_field(spec.name, answer, FieldKind.TEXT)

        error = self.controller.session.error_for(spec.name)
        if error:
            self.console.print(f"  [red]{error}[/red]")

    def _prompt_files(self, spec: FieldConfig, label: str) -> None:
        current = self.controller.form_data.get(spec.name)
        if current:
            self.console.print(f"[dim]Current: {display_value(spec, current)}[/dim]")
        answer = Prompt.ask(f"{label} (path{'s, comma separated' if spec.kind == FieldKind.FILES else ''})",
                            default="", console=self.console)
        if not answer.strip():
            return

        handles = []
        for part in answer.split(","):
            path = Path(part.strip()).expanduser()
            if not path.is_file():
                self.console.print(f"  [red]No such file: {path}[/red]")
                continue
            handles.append(FileHandle.from_path(path))

        if handles:
            self.controller.update_field(spec.name, handles, spec.kind)
            for handle in handles[:1] if spec.kind == FieldKind.FILE else handles:
                self.console.print(f"  [green]+[/green] {describe_file(handle)}")

    def show_navigation_prompt(self, step_number: int) -> NavigationAction:
        """
        Show navigation prompt and get user choice.

        Args:
            step_number: Current step number

        Returns:
            The chosen navigation action
        """
        last = step_number == self.flow.last_index
        options = ["[Enter] Submit" if last else "[Enter] Continue"]
        if step_number > 0:
            options.append("[B] Back")
            options.append("[J] Jump")
        options.append("[Q] Quit")

        self.console.print()
        self.console.print("  ".join(options), style="dim", markup=False)

        while True:
            choice = Prompt.ask("", default="", console=self.console).strip().lower()

            if choice == "" or choice == "c":
                return NavigationAction.CONTINUE
            elif choice == "b" and step_number > 0:
                return NavigationAction.BACK
            elif choice == "j" and step_number > 0:
                return NavigationAction.JUMP
            elif choice == "q":
                return NavigationAction.QUIT
            else:
                self.console.print("[yellow]Invalid choice. Please try again.[/yellow]")

    def _jump(self) -> None:
        completed = [p for p in self.controller.progress() if p.clickable]
        for p in completed:
            self.console.print(f"  [{p.index + 1}] {p.label}")
        answer = Prompt.ask("Go to step", default=str(completed[-1].index + 1) if completed else "",
                            console=self.console)
        if not answer.isdigit() or self.controller.jump_to(int(answer) - 1) == NavigationOutcome.IGNORED:
            self.console.print("[yellow]You can only go back to a step you have completed.[/yellow]")

    def handle_resume(self) -> bool:
        """
        Offer to resume a saved draft.

        Returns:
            False if the user chose to quit
        """
        defaults = self.flow.defaults()
        form_data = self.controller.form_data
        filled = sum(1 for name, value in form_data.items() if value != defaults.get(name))
        self.console.print()
        self.console.print("[bold yellow]Saved draft found![/bold yellow]")
        self.console.print(f"  Fields filled: [cyan]{filled}[/cyan] of [cyan]{len(self.flow.fields)}[/cyan]")
        self.console.print("  [dim]Uploaded files are not kept in drafts.[/dim]")
        self.console.print()

        choice = Prompt.ask(
            "Would you like to [bold]R[/bold]esume, start [bold]F[/bold]resh, or [bold]Q[/bold]uit?",
            choices=["r", "f", "q"],
            default="r",
            console=self.console,
        ).lower()

        if choice == "q":
            return False
        if choice == "f":
            self.controller.start_fresh()
        return True

    def confirm_quit(self) -> bool:
        """
        Confirm the user wants to quit.

        Returns:
            True if user confirms quit
        """
        self.console.print()
        self.console.print("[yellow]Your progress will be saved and can be resumed later.[/yellow]")
        return Confirm.ask("Are you sure you want to quit?", default=False, console=self.console)

    # ------------------------------------------------------------
    # Display
    # ------------------------------------------------------------

    def show_progress(self) -> None:
        """Show wizard progress bar and step trail."""
        bar_length = 30
        percentage = progress_percent(self.flow, self.controller.session)
        completed_length = int(percentage / 100 * bar_length)
        remaining_length = bar_length - completed_length - 1

        bar = (
            "[green]" + "=" * completed_length + "[/green]"
            + "[cyan]>[/cyan]"
            + "[dim]" + "-" * remaining_length + "[/dim]"
        )

        icons = {
            StepStatus.COMPLETED: "[green]✓[/green]",
            StepStatus.ACTIVE: "[cyan]→[/cyan]",
            StepStatus.ERROR: "[red]![/red]",
            StepStatus.LOADING: "[yellow]…[/yellow]",
            StepStatus.PENDING: "[dim]○[/dim]",
        }
        trail = "  ".join(f"{icons[p.status]} {p.label}" for p in self.controller.progress())

        self.console.print()
        self.console.print(f"Progress: [{bar}] {percentage}%   [dim]{self.controller.save_status.value}[/dim]")
        self.console.print(trail)

    def _show_step_header(self) -> None:
        step = self.controller.step
        self.console.print()
        self.console.rule(
            f"[bold]Step {step.index + 1} of {self.flow.step_count}: {step.label}[/bold]",
            style="cyan",
        )
        if step.description:
            self.console.print(f"[dim]{step.description}[/dim]")
        self.console.print()

    def _show_errors(self) -> None:
        self.console.print()
        for name, message in self.controller.visible_errors().items():
            self.console.print(f"  [red]• {self.flow.field(name).label}: {message}[/red]")

    def show_review(self) -> None:
        """Display the collected data as a table."""
        table = Table(title="Review Your Details", show_header=True, header_style="bold cyan")
        table.add_column("Field", style="dim")
        table.add_column("Value")
        for entry in self.controller.review():
            table.add_row(entry.label, entry.display)
        self.console.print(table)

    def _show_completion(self) -> None:
        self.console.print()
        self.console.print(Panel.fit(
            f"[bold green]{self.flow.title} Complete![/bold green]",
            title="✓ Success",
            border_style="green",
        ))
