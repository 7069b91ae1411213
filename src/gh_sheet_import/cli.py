"""
Command-line interface for gh-sheet-import.

This module provides the Typer-based CLI for importing workbook rows as
GitHub issues and adding them to a project.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .exceptions import ProjectNotFoundError, SheetImportError
from .github_client import DEFAULT_API_URL, GitHubClient
from .models import ImportConfig, Project, Repository
from .updater import ProjectUpdater, run_import, validate_repo

# Create Typer app
app = typer.Typer(
    name="gh-sheet-import",
    help="Create GitHub issues from an Excel workbook and add them to a project",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
error_console = Console(stderr=True)


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


TokenOption = Annotated[
    str,
    typer.Option(
        "--token",
        help="GitHub token with repo and project scopes (or set GITHUB_TOKEN)",
        envvar="GITHUB_TOKEN",
        show_default=False,
    ),
]
ApiUrlOption = Annotated[
    str,
    typer.Option(
        "--api-url",
        help="GraphQL endpoint, for GitHub Enterprise",
        envvar="GITHUB_GRAPHQL_URL",
    ),
]
TimeoutOption = Annotated[
    int,
    typer.Option(
        "--timeout",
        help="API timeout in seconds",
        min=10,
        max=300,
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "-v",
        "--verbose",
        help="Enable verbose output",
    ),
]


def setup_logging(
    level: LogLevel,
    verbose: bool = False,
    log_console: Console = error_console,
) -> None:
    """Configure logging with Rich handler writing to ``log_console``."""
    log_level = getattr(logging, level.value.upper())

    if verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=log_console, show_time=False, show_path=False)],
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gh-sheet-import version {__version__}")
        raise typer.Exit


def _report_error(e: SheetImportError) -> None:
    error_console.print(f"[red]Error:[/red] {e.message}")
    if e.hint:
        error_console.print(f"[dim]Hint: {e.hint}[/dim]")


@app.command("import")
def import_issues(
    workbook: Annotated[
        Path,
        typer.Argument(
            help="Excel workbook: row 1 header, column A title, column B body",
            show_default=False,
        ),
    ],
    project_name: Annotated[
        str,
        typer.Argument(
            help="Name of the project to add the issues to",
            show_default=False,
        ),
    ],
    repo: Annotated[
        str,
        typer.Argument(
            help="Repository in owner/repo format",
            show_default=False,
        ),
    ],
    token: TokenOption,
    api_url: ApiUrlOption = DEFAULT_API_URL,
    sheet: Annotated[
        str | None,
        typer.Option(
            "--sheet",
            help="Worksheet name (default: first worksheet)",
        ),
    ] = None,
    no_copy: Annotated[
        bool,
        typer.Option(
            "--no-copy",
            help="Read the workbook in place instead of from a temporary copy",
        ),
    ] = False,
    timeout: TimeoutOption = 60,
    verbose: VerboseOption = False,
    log_level: Annotated[
        LogLevel,
        typer.Option(
            "--log-level",
            help="Set log level",
        ),
    ] = LogLevel.INFO,
    _version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    Create one issue per workbook row and add each to a project.

    Rows that fail are reported and skipped; the rest are still imported.

    Examples:

        gh-sheet-import import issues.xlsx "Kanban" octocat/hello-world

        gh-sheet-import import backlog.xlsx Roadmap acme/api --sheet Sprint1
    """
    # Row errors are reported on stdout alongside the status lines.
    setup_logging(log_level, verbose, console)

    try:
        validate_repo(repo)
        if not workbook.is_file():
            error_console.print(f"[red]Error:[/red] File not found: {workbook}")
            raise typer.Exit(1)

        config = ImportConfig(
            repo=repo,
            workbook=str(workbook),
            project_name=project_name,
            sheet=sheet,
            copy_workbook=not no_copy,
        )
        console.print(
            f"Importing [bold]{workbook}[/bold] -> [bold]{repo}[/bold] "
            f"project [bold]{project_name}[/bold]"
        )

        client = GitHubClient(token=token, api_url=api_url, timeout=timeout)
        result = run_import(config, client)

        if result is None:
            console.print(f"[yellow]Project '{project_name}' not found; nothing imported[/yellow]")
            return

        console.print("Finished.")

    except SheetImportError as e:
        _report_error(e)
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130) from None


@app.command()
def check(
    project_name: Annotated[
        str,
        typer.Argument(help="Name of the project to look up", show_default=False),
    ],
    repo: Annotated[
        str,
        typer.Argument(help="Repository in owner/repo format", show_default=False),
    ],
    token: TokenOption,
    api_url: ApiUrlOption = DEFAULT_API_URL,
    timeout: TimeoutOption = 30,
    verbose: VerboseOption = False,
) -> None:
    """
    Check that the repository and project can be resolved.

    Nothing is created; this only runs the two lookups an import starts with.
    """
    setup_logging(LogLevel.INFO, verbose)

    async def _lookup(updater: ProjectUpdater) -> tuple[str | None, str | None]:
        try:
            repository_id = await updater.resolve_repository_id()
            if repository_id is None:
                return None, None
            return repository_id, await updater.resolve_project_id(project_name)
        finally:
            await updater.client.close()

    with console.status(f"Checking {repo}..."):
        try:
            owner, name = validate_repo(repo)
            client = GitHubClient(token=token, api_url=api_url, timeout=timeout)
            updater = ProjectUpdater(client=client, owner=owner, repo=name)
            repository_id, project_id = asyncio.run(_lookup(updater))

            if repository_id is None:
                error_console.print(f"[red]✗[/red] Repository '{repo}' not found")
                raise typer.Exit(1)
            if project_id is None:
                _report_error(ProjectNotFoundError(project_name))
                raise typer.Exit(1)

        except SheetImportError as e:
            error_console.print(f"[red]✗[/red] {e.message}")
            if e.hint:
                error_console.print(f"  [dim]Hint: {e.hint}[/dim]")
            raise typer.Exit(1) from None

    repository = Repository(id=repository_id, owner=owner, name=name)
    project = Project(id=project_id, name=project_name)

    table = Table(title="Resolved identifiers")
    table.add_column("Object")
    table.add_column("Name")
    table.add_column("ID", style="dim")
    table.add_row("Repository", repository.full_name, repository.id)
    table.add_row("Project", project.name, project.id)
    console.print(table)

    console.print("\n[green]All checks passed![/green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
