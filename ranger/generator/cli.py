"""Command-line interface."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt
from typing_extensions import Annotated

from ..utils.config import load_settings
from .errors import RangerError
from .models import GenerateRequest
from .transaction import generate
from .variables import collect_overrides

logger = logging.getLogger(__name__)
err_console = Console(stderr=True)

app = typer.Typer(
    name="ranger",
    add_completion=False,
    help="Scaffold projects from template folders and git repositories.",
)
generate_app = typer.Typer(help="Generate a project from a template source.")
app.add_typer(generate_app, name="generate")

OutOpt = Annotated[Path, typer.Option("--out", "-o", help="Output directory.")]
VarOpt = Annotated[
    Optional[List[str]],
    typer.Option(
        "--var",
        "-v",
        help="Template variable KEY=VALUE (dotted keys nest). Repeatable; wins over --varfile.",
        metavar="KEY=VALUE",
    ),
]
VarfileOpt = Annotated[
    Optional[Path],
    typer.Option("--varfile", help="File of newline-separated KEY=VALUE variables."),
]
InteractiveOpt = Annotated[
    bool, typer.Option("--interactive", "-i", help="Prompt for every declared variable.")
]
ForceOpt = Annotated[bool, typer.Option("--force", help="Replace an existing output directory.")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", help="Enable verbose logging.")]


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def ask(name: str, description: Optional[str], current: Optional[str]) -> str:
    label = f"{name} [dim]({description})[/]" if description else name
    return Prompt.ask(label, default=current, console=err_console) or ""


def _run(request_args: dict, varfile: Optional[Path], var: Optional[List[str]], interactive: bool) -> None:
    try:
        overrides = collect_overrides(varfile, var or [])
        request = GenerateRequest(overrides=overrides, **request_args)
        result = generate(request, ask=ask if interactive else None)
    except RangerError as e:
        err_console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)
    print(f"[green]✅ Generated {len(result.files)} file(s) in {result.out}[/]")


@generate_app.command("local")
def generate_local(
    out: OutOpt,
    folder: Annotated[Path, typer.Option("--folder", "-f", help="Template folder.")],
    var: VarOpt = None,
    varfile: VarfileOpt = None,
    interactive: InteractiveOpt = False,
    force: ForceOpt = False,
    verbose: VerboseOpt = False,
) -> None:
    """Generate from a local template folder."""
    setup_logging(verbose)
    _run({"out": out, "folder": folder, "force": force}, varfile, var, interactive)


@generate_app.command("git")
def generate_git(
    out: OutOpt,
    repo: Annotated[Optional[str], typer.Option("--repo", "-r", help="Git repository URL.")] = None,
    branch: Annotated[Optional[str], typer.Option("--branch", "-b", help="Branch or tag.")] = None,
    folder: Annotated[
        Optional[Path], typer.Option("--folder", "-f", help="Template folder inside the repository.")
    ] = None,
    var: VarOpt = None,
    varfile: VarfileOpt = None,
    interactive: InteractiveOpt = False,
    force: ForceOpt = False,
    verbose: VerboseOpt = False,
) -> None:
    """Generate from a shallow clone of a git repository."""
    setup_logging(verbose)
    try:
        settings = load_settings()
    except RangerError as e:
        err_console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)
    request_args = {
        "out": out,
        "repo": repo or settings.repo,
        "branch": branch or settings.branch,
        "folder": folder if folder is not None else settings.folder,
        "force": force,
    }
    _run(request_args, varfile, var, interactive)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
