"""CLI entry point for mise-nix.

Each hook prints its result on stdout; progress and errors go to stderr.

Examples:
    mise-nix parse nixos/nixpkgs#hello
    mise-nix list-versions hello
    mise-nix install github:owner/repo#pkg v1.2.0 ~/.local/share/mise/installs/x
    mise-nix exec-env ./flake#default local ./install --json
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from mise_nix import __version__
from mise_nix.exceptions import MiseNixError
from mise_nix.flake import get_versions, parse_reference
from mise_nix.hooks import Backend
from mise_nix.output import error

app = typer.Typer(
    name="mise-nix",
    help="Nix flake backend for mise.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"mise-nix {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """Nix flake backend for mise."""


@app.command()
def parse(
    reference: Annotated[str, typer.Argument(help="Flake reference to parse.")],
) -> None:
    """Show how a flake reference is normalized."""
    try:
        parsed = parse_reference(reference)
    except MiseNixError as e:
        error(str(e))
        raise typer.Exit(1)

    typer.echo(f"kind:       {parsed.kind.value}")
    typer.echo(f"locator:    {parsed.locator}")
    typer.echo(f"attribute:  {parsed.attribute}")
    typer.echo(f"normalized: {parsed.normalized}")
    typer.echo(f"local:      {str(parsed.is_local).lower()}")
    typer.echo(f"versions:   {', '.join(get_versions(parsed))}")


@app.command("list-versions")
def list_versions(
    tool: Annotated[str, typer.Argument(help="Tool name or flake reference.")],
    requested_version: Annotated[
        Optional[str],
        typer.Option("--version", "-v", help="Version requested for the tool."),
    ] = None,
) -> None:
    """List installable versions of a tool, oldest first."""
    try:
        versions = Backend().list_versions(tool, requested_version)
    except MiseNixError as e:
        error(str(e))
        raise typer.Exit(1)

    for version in versions:
        typer.echo(version)


@app.command()
def install(
    tool: Annotated[str, typer.Argument(help="Tool name or flake reference.")],
    version: Annotated[str, typer.Argument(help="Version, 'latest', or a flake reference.")],
    install_path: Annotated[Path, typer.Argument(help="Install directory to link.")],
) -> None:
    """Build a tool and link the install path to the result."""
    try:
        outcome = Backend().install(tool, version, install_path)
    except MiseNixError as e:
        error(str(e))
        raise typer.Exit(1)

    typer.echo(outcome.primary)


@app.command("exec-env")
def exec_env(
    tool: Annotated[str, typer.Argument(help="Tool name or flake reference.")],
    version: Annotated[str, typer.Argument(help="Installed version.")],
    install_path: Annotated[Path, typer.Argument(help="Install directory.")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the environment as a JSON object."),
    ] = False,
) -> None:
    """Print the environment needed to run a tool."""
    try:
        env = Backend().exec_env(tool, version, install_path)
    except MiseNixError as e:
        error(str(e))
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(env))
        return
    for key, value in env.items():
        typer.echo(f"{key}={value}")


@app.command()
def build(
    reference: Annotated[str, typer.Argument(help="Flake reference to build.")],
    version: Annotated[
        Optional[str],
        typer.Option("--version", "-v", help="Tag, branch or commit to pin."),
    ] = None,
) -> None:
    """Build a flake reference and print its output paths."""
    try:
        outcome = Backend().builder.build(reference, version)
    except MiseNixError as e:
        error(str(e))
        raise typer.Exit(1)

    for path in outcome.outputs:
        typer.echo(path)


if __name__ == "__main__":
    app()
