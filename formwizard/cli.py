"""
Command-line interface for the onboarding form wizard.

Provides commands for running a flow in the terminal, inspecting flow
definitions, validating collected data, and managing saved drafts.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import ConfigError, ConfigLoader
from .config.defaults import get_default_settings
from .logging_config import setup_logging
from .wizard.controller import WizardController
from .wizard.errors import PersistenceError, WizardError
from .wizard.persistence import DraftPersistence, FileStore, decode_draft
from .wizard.runner import TerminalRunner
from .wizard.scheduler import ThreadScheduler
from .wizard.state import initialize
from .wizard.steps import Flow, validate_all
from .wizard.review import display_value

console = Console()


def _load(ctx: click.Context) -> ConfigLoader:
    loader: ConfigLoader = ctx.obj["loader"]
    return loader


def _flow(ctx: click.Context, name: str) -> Flow:
    try:
        return Flow(_load(ctx).get_flow(name))
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _draft_store(ctx: click.Context) -> FileStore:
    draft_dir = _load(ctx).settings.autosave.draft_dir
    return FileStore(Path(draft_dir) if draft_dir else None)


def _export_value(value: Any) -> Any:
    """Make a form value YAML friendly (files become their names)."""
    if isinstance(value, frozenset):
        return sorted(value)
    if isinstance(value, tuple):
        return [getattr(v, "name", v) for v in value]
    if hasattr(value, "name") and hasattr(value, "size"):
        return value.name
    return value


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="formwizard")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    envvar="FORMWIZARD_CONFIG",
    default=None,
    help="Settings file or configuration directory",
)
@click.pass_context
def cli(ctx, config_path: Optional[str]):
    """
    Onboarding Form Wizard

    Run buyer and seller onboarding flows step by step, with
    validation, autosaved drafts and a final review.
    """
    ctx.ensure_object(dict)
    loader = ConfigLoader(config_path)
    if config_path:
        try:
            loader.load()
        except ConfigError as e:
            console.print(f"[red]Configuration error:[/red] {e}")
            sys.exit(1)
    ctx.obj["loader"] = loader
    setup_logging(loader.settings.logging)


# ============================================================
# RUN Command
# ============================================================

@cli.command()
@click.argument("flow_name")
@click.option("--output", "-o", type=click.Path(), default=None, help="Write submitted data to this YAML file")
@click.option("--fresh", is_flag=True, help="Ignore and delete any saved draft")
@click.pass_context
def run(ctx, flow_name: str, output: Optional[str], fresh: bool):
    """Run a flow interactively."""
    flow = _flow(ctx, flow_name)
    settings = _load(ctx).settings

    def on_complete(form_data: Dict[str, Any]) -> None:
        if output:
            data = {name: _export_value(value) for name, value in form_data.items()}
            with open(output, "w") as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
            console.print(f"[green]Submitted data written to {output}[/green]")

    controller = WizardController.from_settings(
        flow,
        settings,
        scheduler=ThreadScheduler(),
        on_complete=on_complete,
    )
    if fresh:
        controller.start_fresh()

    try:
        completed = TerminalRunner(controller, console).run()
    except KeyboardInterrupt:
        controller.flush_draft()
        console.print("\n[yellow]Wizard cancelled. Draft saved.[/yellow]")
        sys.exit(130)

    if not completed:
        sys.exit(1)


# ============================================================
# FLOWS / STEPS Commands
# ============================================================

@cli.command("flows")
@click.pass_context
def list_flows(ctx):
    """List available flows."""
    table = Table(title="Flows", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Steps", justify="right")
    table.add_column("Fields", justify="right")
    table.add_column("Draft Key", style="dim")

    for name, config in _load(ctx).flows.items():
        flow = Flow(config)
        table.add_row(name, flow.title, str(flow.step_count), str(len(flow.fields)), flow.storage_key)

    console.print(table)


@cli.command("steps")
@click.argument("flow_name")
@click.pass_context
def list_steps(ctx, flow_name: str):
    """Show the steps and fields of a flow."""
    flow = _flow(ctx, flow_name)

    table = Table(title=flow.title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Field", style="cyan")
    table.add_column("Kind")
    table.add_column("Rule", style="dim")

    for step in flow.steps:
        if not step.fields:
            table.add_row(str(step.index + 1), step.label, "-", "", "")
        for i, spec in enumerate(step.fields):
            table.add_row(
                str(step.index + 1) if i == 0 else "",
                step.label if i == 0 else "",
                spec.name,
                spec.kind.value,
                spec.rule.value if spec.rule else "",
            )

    console.print(table)


# ============================================================
# CHECK Command
# ============================================================

@cli.command()
@click.argument("flow_name")
@click.argument("data_file", type=click.Path(exists=True))
@click.pass_context
def check(ctx, flow_name: str, data_file: str):
    """Validate a YAML file of answers against every step of a flow."""
    flow = _flow(ctx, flow_name)

    with open(data_file, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        console.print(f"[red]Expected a mapping in {data_file}[/red]")
        sys.exit(1)

    file_fields = flow.file_fields
    skipped = [name for name in data if name in file_fields]
    values = {name: value for name, value in data.items() if name not in skipped}
    try:
        session = initialize(flow, values)
    except WizardError as e:
        console.print(f"[red]Invalid answers in {data_file}:[/red] {e}")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Step")
    table.add_column("Status")
    table.add_column("Details")

    all_errors = validate_all(flow, session.form_data)
    failed = False
    for step in flow.steps:
        errors = {
            name: all_errors[name]
            for name in step.field_names
            if name in all_errors and name not in file_fields
        }
        if errors:
            failed = True
            table.add_row(step.label, "[red]FAIL[/red]", "; ".join(f"{k}: {v}" for k, v in errors.items()))
        else:
            table.add_row(step.label, "[green]PASS[/green]", "")

    console.print(table)
    if skipped:
        console.print(f"[dim]File fields cannot be checked from YAML: {', '.join(skipped)}[/dim]")
    if failed:
        sys.exit(1)


# ============================================================
# DRAFT Commands
# ============================================================

@cli.group()
def draft():
    """Inspect or delete saved drafts."""
    pass


@draft.command("show")
@click.argument("flow_name")
@click.pass_context
def draft_show(ctx, flow_name: str):
    """Show the saved draft of a flow."""
    flow = _flow(ctx, flow_name)
    store = _draft_store(ctx)

    try:
        raw = store.get(flow.storage_key)
        if raw is None:
            console.print(f"[yellow]No saved draft for {flow_name}.[/yellow]")
            return
        values = decode_draft(flow, raw)
    except PersistenceError as e:
        console.print(f"[red]Cannot read draft:[/red] {e}")
        sys.exit(1)

    table = Table(title=f"Draft: {flow.storage_key}", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="dim")
    table.add_column("Value")
    for spec in flow.fields:
        if spec.name in values:
            table.add_row(spec.label, display_value(spec, values[spec.name]))
    console.print(table)
    console.print(f"[dim]{store.path_for(flow.storage_key)}[/dim]")


@draft.command("clear")
@click.argument("flow_name")
@click.pass_context
def draft_clear(ctx, flow_name: str):
    """Delete the saved draft of a flow."""
    flow = _flow(ctx, flow_name)
    drafts = DraftPersistence(flow, _draft_store(ctx), ThreadScheduler())
    if not drafts.has_draft():
        console.print(f"[yellow]No saved draft for {flow_name}.[/yellow]")
        return
    drafts.discard()
    console.print(f"[green]Draft for {flow_name} deleted.[/green]")


# ============================================================
# INIT Command
# ============================================================

@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="./config",
    help="Output directory for the settings file",
)
def init(output: str):
    """Write a settings.yaml template."""
    output_path = Path(output)
    settings_file = output_path / "settings.yaml"

    if settings_file.exists():
        if not click.confirm(f"{settings_file} exists. Overwrite?"):
            console.print("[red]Aborted.[/red]")
            return

    loader = ConfigLoader.from_dict(settings=get_default_settings())
    written = loader.save(output_path)
    (output_path / ConfigLoader.FLOWS_DIRNAME).mkdir(exist_ok=True)

    console.print(f"[green]Settings written to {written}[/green]")
    console.print(f"[dim]Put custom flow definitions in {output_path / ConfigLoader.FLOWS_DIRNAME}/[/dim]")


# ============================================================
# Entry Point
# ============================================================

def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
