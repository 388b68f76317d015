"""CLI for jobstore."""

import json
import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import load_store_config
from .errors import StoreError
from .storage import make_adapter
from .storage.fs import FilesystemAdapter
from .utils import humanize_size


app = typer.Typer(help="""\
Filesystem blob storage for job results and execution artifacts.
Put, get, stream, list and delete objects under a base directory.""")

console = Console()


def _fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]✗[/red] {escape(str(message))}")
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (default: ./jobstore.yaml)"),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir", "-b", help="Override the base directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging (operation timings)"),
):
    """Record global options; the adapter is built when a command needs it."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    ctx.obj = {"config": config, "base_dir": base_dir, "adapter": None}


def _adapter(ctx: typer.Context) -> FilesystemAdapter:
    """Load configuration and build the adapter on first use."""
    state = ctx.obj
    if state["adapter"] is None:
        try:
            store_config = load_store_config(state["config"])
            if state["base_dir"] is not None:
                store_config.base_directory = state["base_dir"]
            state["adapter"] = make_adapter(store_config)
        except (StoreError, NotImplementedError, OSError) as e:
            _fail(e)
    return state["adapter"]


@app.command()
def init(ctx: typer.Context):
    """Create the configured directories under the base directory."""
    adapter = _adapter(ctx)
    try:
        adapter.bootstrap()
    except (StoreError, OSError) as e:
        _fail(e)

    table = Table(title=f"Directories in {escape(str(adapter.base_directory))}")
    table.add_column("Name", style="cyan")
    table.add_column("Path")
    for name, rel in sorted(adapter.directories.items()):
        table.add_row(name, escape(rel))
    console.print(table)
    console.print("[green]✓[/green] Store initialized")


@app.command()
def put(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Object path relative to the base directory"),
    value: Optional[str] = typer.Argument(None, help="JSON value (plain text is stored as a string)"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read the value from a file"),
    raw: bool = typer.Option(False, "--raw", help="Store the file bytes as-is instead of JSON"),
):
    """Store a JSON value or a file."""
    adapter = _adapter(ctx)

    if (value is None) == (file is None):
        _fail("Provide exactly one of VALUE or --file")
    if raw and file is None:
        _fail("--raw requires --file")

    try:
        if raw:
            with file.open("rb") as f:
                ref = adapter.put_stream(path, f)
        else:
            text = file.read_text() if file is not None else value
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                data = text
            ref = adapter.put(path, data)
    except (StoreError, ValueError, OSError) as e:
        _fail(e)

    console.print(f"[green]✓[/green] Stored {escape(ref.path)}")


@app.command()
def get(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Object path"),
):
    """Print a JSON value."""
    adapter = _adapter(ctx)
    try:
        data = adapter.get(path)
    except FileNotFoundError:
        _fail(f"Object not found: {path}")
    except (StoreError, ValueError, OSError) as e:
        _fail(e)
    console.print_json(data=data)


@app.command()
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Object path"),
    start: Optional[int] = typer.Option(None, "--start", help="First byte (negative: from the end)"),
    end: Optional[int] = typer.Option(None, "--end", help="One past the last byte"),
):
    """Write raw object bytes to stdout, optionally a byte range."""
    adapter = _adapter(ctx)
    out = sys.stdout.buffer
    try:
        if start is None and end is None:
            with adapter.get_stream(path) as stream:
                shutil.copyfileobj(stream, out)
        else:
            out.write(adapter.seek(path, start or 0, end))
    except FileNotFoundError:
        _fail(f"Object not found: {path}")
    except (StoreError, ValueError, OSError) as e:
        _fail(e)
    out.flush()


@app.command("ls")
def list_objects(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Directory to list (default: everything)"),
):
    """Recursively list objects."""
    adapter = _adapter(ctx)
    try:
        refs = adapter.list(path)
        infos = [adapter.get_metadata(ref) for ref in refs]
    except FileNotFoundError:
        _fail(f"Directory not found: {path}")
    except (StoreError, ValueError, OSError) as e:
        _fail(e)

    if not infos:
        console.print("[dim]No objects[/dim]")
        return

    table = Table()
    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    total = 0
    for info in infos:
        total += info.size
        table.add_row(escape(info.path), humanize_size(info.size), info.modified.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(table)
    console.print(f"{len(infos)} object{'s' if len(infos) != 1 else ''}, {humanize_size(total)}")


@app.command()
def prefixes(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Directory to inspect (default: base directory)"),
):
    """List immediate sub-directories."""
    adapter = _adapter(ctx)
    try:
        found = adapter.list_prefixes(path)
    except FileNotFoundError:
        _fail(f"Directory not found: {path}")
    except (StoreError, ValueError, OSError) as e:
        _fail(e)

    for prefix in found:
        console.print(f"{escape(prefix)}/")


@app.command()
def stat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Object path"),
):
    """Show object size and modification time."""
    adapter = _adapter(ctx)
    try:
        info = adapter.get_metadata(path)
    except FileNotFoundError:
        _fail(f"Object not found: {path}")
    except (StoreError, ValueError, OSError) as e:
        _fail(e)

    console.print(f"[bold]{escape(info.path)}[/bold]")
    console.print(f"  Size:     {info.size} bytes ({humanize_size(info.size)})")
    console.print(f"  Modified: {info.modified.isoformat()}")


@app.command()
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Object path or directory"),
):
    """Delete an object or a directory tree."""
    adapter = _adapter(ctx)
    try:
        existed = adapter.exists(path)
        adapter.delete(path)
    except (StoreError, ValueError, OSError) as e:
        _fail(e)

    if existed:
        console.print(f"[green]✓[/green] Deleted {escape(path)}")
    else:
        console.print(f"[dim]Nothing at {escape(path)}[/dim]")


if __name__ == "__main__":
    app()
