"""Typer CLI: serve the plugin, or run detection and commands locally."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from glide_go.core.config import get_settings
from glide_go.core.logging import configure_structlog
from glide_go.plugin.config import load_plugin_config
from glide_go.plugin.errors import ConfigInvalidError
from glide_go.plugin.schemas import ContextRequest, ExecuteRequest
from glide_go.plugin.shell import GoPlugin

app = typer.Typer(
    name="glide-plugin-go",
    help="Go framework detector and command provider for Glide",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Human-readable debug logs on stderr")
    ] = False,
) -> None:
    configure_structlog(debug=verbose)


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Bind port")] = None,
    detection_only: Annotated[
        bool, typer.Option("--detection-only", help="Serve without the command catalogue")
    ] = False,
) -> None:
    """Start the plugin server for the host."""
    import uvicorn

    from glide_go.main import create_app

    settings = get_settings()
    if detection_only:
        settings = settings.model_copy(update={"detection_only": True})

    try:
        fastapi_app = create_app(settings)
        uvicorn.run(
            fastapi_app,
            host=host or settings.host,
            port=port or settings.port,
            log_config=None,
        )
    except ConfigInvalidError as exc:
        typer.echo(f"Plugin error: {exc}", err=True)
        raise typer.Exit(1) from exc
    except OSError as exc:
        typer.echo(f"Plugin error: failed to bind: {exc}", err=True)
        raise typer.Exit(1) from exc
    except SystemExit as exc:
        # uvicorn exits with status 1 when the socket cannot be bound
        if exc.code:
            typer.echo("Plugin error: server failed to start", err=True)
            raise typer.Exit(1) from exc


@app.command()
def detect(
    path: Annotated[Path, typer.Argument(help="Project root to inspect")] = Path("."),
    config: Annotated[
        Optional[Path], typer.Option("--config", "-c", help=".glide.yml to read plugins.go from")
    ] = None,
    no_workspace: Annotated[
        bool, typer.Option("--no-workspace", help="Skip go.work detection")
    ] = False,
    no_tools: Annotated[
        bool, typer.Option("--no-tools", help="Skip dev tooling detection")
    ] = False,
) -> None:
    """Detect a Go project and print the host response as JSON."""
    plugin = GoPlugin()
    try:
        base = load_plugin_config(config) if config else plugin.config
    except ConfigInvalidError as exc:
        typer.echo(f"Invalid config: {exc}", err=True)
        raise typer.Exit(1) from exc

    plugin.configure(
        {
            "enable_workspace": base.enable_workspace and not no_workspace,
            "enable_tools": base.enable_tools and not no_tools,
        }
    )
    response = plugin.detect_context(ContextRequest(project_root=str(path.resolve())))
    typer.echo(response.model_dump_json(indent=2))
    if not response.detected:
        raise typer.Exit(1)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "allow_interspersed_args": False,
        "ignore_unknown_options": True,
    },
)
def run(
    name: Annotated[str, typer.Argument(help="Catalogue command, e.g. test:race")],
    args: Annotated[
        Optional[list[str]], typer.Argument(help="Extra arguments appended verbatim")
    ] = None,
    work_dir: Annotated[
        str, typer.Option("--work-dir", "-C", help="Working directory for the command")
    ] = "",
    env: Annotated[
        Optional[list[str]], typer.Option("--env", "-e", help="KEY=VALUE overlay, repeatable")
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", help="Cancel after this many seconds")
    ] = None,
) -> None:
    """Run a catalogue command and exit with its status.

    Options go before NAME. Everything after NAME is appended to the command
    verbatim, e.g. `run -C ./svc test -race -timeout 30s`.
    """
    overlay: dict[str, str] = {}
    for item in env or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            typer.echo(f"Invalid --env value {item!r}; expected KEY=VALUE", err=True)
            raise typer.Exit(2)
        overlay[key] = value

    request = ExecuteRequest(
        name=name, args=args or [], work_dir=work_dir, env=overlay, timeout=timeout
    )
    response = asyncio.run(GoPlugin().execute(request))

    sys.stdout.buffer.write(response.stdout)
    sys.stdout.flush()
    if response.error:
        typer.echo(f"Error: {response.error}", err=True)
    raise typer.Exit(response.exit_code)


@app.command(name="commands")
def list_commands() -> None:
    """List the Go command catalogue."""
    for info in GoPlugin().list_commands():
        typer.echo(f"{info.name:<14} {info.category:<13} {info.description}")


@app.command()
def metadata() -> None:
    """Print the plugin metadata and capabilities as JSON."""
    plugin = GoPlugin()
    payload = plugin.metadata().model_dump(mode="json")
    payload["capabilities"] = plugin.capabilities()
    typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()
