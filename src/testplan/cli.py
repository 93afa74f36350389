"""Command-line interface for TestPlan."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from testplan import __version__
from testplan.config import PlanConfig, TestPlanConfig, create_example_config, get_default_config
from testplan.logging_utils import configure_logging


console = Console()


def print_banner() -> None:
    """Print the TestPlan banner."""
    console.print(
        Panel.fit(
            "[bold blue]TestPlan[/bold blue] - Test Plan Generator",
            subtitle=f"v{__version__}",
        )
    )


@click.group()
@click.version_option(version=__version__, prog_name="testplan")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: testplan.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """TestPlan - expand test declarations into a plan of runs.

    Multiplies each test by its generator fixture values and repeat count,
    and tags every run with the worker it can share.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    configure_logging(verbose)


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="testplan.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
@click.pass_context
def init(ctx: click.Context, output: str, force: bool) -> None:
    """Initialize a new TestPlan configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {output_path}"
        )
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
        console.print("\nNext steps:")
        console.print("  1. Point 'declarations' at your declaration file")
        console.print("  2. Run [bold]testplan generate[/bold] to see the plan")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


def _load_config(ctx: click.Context) -> tuple[TestPlanConfig, Path]:
    """Load the configuration, falling back to defaults when none exists."""
    config_path = ctx.obj.get("config_path")
    if config_path:
        try:
            return TestPlanConfig.from_file(config_path), Path(config_path).parent
        except FileNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)

    try:
        return TestPlanConfig.find_and_load(), Path.cwd()
    except FileNotFoundError:
        return get_default_config(), Path.cwd()


def _generate(
    ctx: click.Context,
    declarations: Optional[str],
    grep: Optional[str],
    repeat_each: Optional[int],
):
    from testplan.core.fixtures import UnknownFixtureError
    from testplan.core.generator import generate_tests
    from testplan.loader import DeclarationError, load_declarations

    config, base_dir = _load_config(ctx)

    overrides = {}
    if grep is not None:
        overrides["grep"] = grep
    if repeat_each is not None:
        overrides["repeat_each"] = repeat_each
    try:
        plan_config = PlanConfig.model_validate({**config.plan.model_dump(), **overrides})
    except ValueError as e:
        console.print(f"[red]Invalid options:[/red] {escape(str(e))}")
        sys.exit(1)

    path = Path(declarations) if declarations else config.get_declarations_path(base_dir)
    try:
        suites, registry = load_declarations(path)
        return generate_tests(suites, plan_config, registry)
    except (FileNotFoundError, DeclarationError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    except UnknownFixtureError as e:
        console.print(f"[red]Error generating plan:[/red] {escape(str(e))}")
        sys.exit(1)


@main.command()
@click.argument("declarations", required=False, type=click.Path())
@click.option("--grep", "-g", help="Only include tests matching this pattern (e.g. /login/i)")
@click.option("--repeat-each", type=int, help="Number of runs per test configuration")
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_context
def generate(
    ctx: click.Context,
    declarations: Optional[str],
    grep: Optional[str],
    repeat_each: Optional[int],
    as_json: bool,
) -> None:
    """Generate the run plan for a declaration file."""
    from testplan.core.generator import iter_runs

    root = _generate(ctx, declarations, grep, repeat_each)
    runs = list(iter_runs(root))

    if as_json:
        click.echo(json.dumps([run.to_dict() for run in runs], indent=2, default=str))
        return

    print_banner()
    if not runs:
        console.print("[yellow]No runs generated[/yellow]")
        return

    table = Table(title="Test Plan")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Test")
    table.add_column("Configuration", style="dim")
    table.add_column("Worker", style="magenta")

    for run in runs:
        table.add_row(
            str(run.test.ordinal),
            escape(run.test.full_title()),
            run.configuration_string,
            run.affinity_hash[:8],
        )

    console.print(table)
    tests = {id(run.test) for run in runs}
    console.print(f"\n[bold]{len(runs)}[/bold] runs from [bold]{len(tests)}[/bold] tests")


@main.command()
@click.argument("declarations", required=False, type=click.Path())
@click.option("--grep", "-g", help="Only include tests matching this pattern (e.g. /login/i)")
@click.option("--repeat-each", type=int, help="Number of runs per test configuration")
@click.pass_context
def workers(
    ctx: click.Context,
    declarations: Optional[str],
    grep: Optional[str],
    repeat_each: Optional[int],
) -> None:
    """Show generated runs grouped by worker key."""
    from testplan.core.generator import group_by_worker

    print_banner()
    root = _generate(ctx, declarations, grep, repeat_each)
    groups = group_by_worker(root)

    if not groups:
        console.print("[yellow]No runs generated[/yellow]")
        return

    table = Table(title="Worker Groups")
    table.add_column("Worker", style="magenta")
    table.add_column("Configuration", style="dim")
    table.add_column("Runs", justify="right")
    table.add_column("Tests")

    for key, runs in groups.items():
        affinity, _, configuration = key.partition("@")
        titles = [escape(run.test.full_title()) for run in runs]
        shown = ", ".join(titles[:3])
        if len(titles) > 3:
            shown += f" ... and {len(titles) - 3} more"
        table.add_row(affinity[:8], configuration, str(len(runs)), shown)

    console.print(table)


if __name__ == "__main__":
    main()
