"""CLI entry point for wise."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from wise.config import WiseConfig, load_config
from wise.config.loader import DEFAULT_CONFIG_TEMPLATE
from wise.core import Wise
from wise.errors import WiseError
from wise.log import configure_logging
from wise.sync import CopyResult, ignore_filter

app = typer.Typer(
    name="wise",
    help="Manifest-backed staleness checks and smart file copy.",
)

config_app = typer.Typer(help="Manage wise configuration.")
app.add_typer(config_app, name="config")

manifest_app = typer.Typer(help="Inspect and prune the file manifest.")
app.add_typer(manifest_app, name="manifest")

# Global state
_config: WiseConfig | None = None


def _get_config() -> WiseConfig:
    if _config is None:
        return load_config()
    return _config


def _open() -> Wise:
    return Wise.from_config(_get_config())


def _format_size(size: int) -> str:
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to wise.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(2)
    configure_logging(_config.log_level, _config.log_format)


# ---------------------------------------------------------------------------
# Change detection
# ---------------------------------------------------------------------------


@app.command()
def stale(
    target: Annotated[str, typer.Argument(help="Derived artifact")],
    sources: Annotated[list[str] | None, typer.Argument(help="Source files it is built from")] = None,
    hash: Annotated[bool, typer.Option("--hash", help="Also compare content digests")] = False,
    fail_on_stale: Annotated[bool, typer.Option("--fail-on-stale", help="Exit 1 if stale")] = False,
) -> None:
    """Report whether TARGET needs regenerating from SOURCES."""
    with _open() as wise:
        is_stale = wise.is_stale(target, sources or [], hash=hash)

    if is_stale:
        rprint(f"[red]stale[/red] {target}")
    else:
        rprint(f"[green]fresh[/green] {target}")
    if fail_on_stale and is_stale:
        raise typer.Exit(code=1)


@app.command()
def diff(
    first: Annotated[str, typer.Argument(help="First file")],
    second: Annotated[str, typer.Argument(help="Second file")],
    hash: Annotated[bool, typer.Option("--hash", help="Compare content digests")] = False,
) -> None:
    """Compare two files; exit 1 if they differ."""
    with _open() as wise:
        try:
            result = wise.diff(first, second, hash=hash)
        except WiseError as e:
            rprint(f"[red]error:[/red] {e}")
            raise typer.Exit(code=2)

    if result is None:
        rprint("[green]identical[/green]")
        return
    rprint(f"[yellow]different[/yellow] ({result.reason})")
    typer.echo(json.dumps(result.model_dump(exclude_none=True), indent=2))
    raise typer.Exit(code=1)


@app.command(name="stat")
def stat_cmd(
    path: Annotated[str, typer.Argument(help="File to observe")],
    hash: Annotated[bool, typer.Option("--hash", help="Compute the content digest")] = False,
) -> None:
    """Observe PATH and show how it changed since the last observation."""
    with _open() as wise:
        try:
            status = wise.stat(path, hash=hash)
        except FileNotFoundError as e:
            rprint(f"[red]{e}[/red]")
            raise typer.Exit(code=1)

    table = Table(title=status.path, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("size", _format_size(status.size))
    table.add_row("mtime", str(status.mtime))
    table.add_row("hash", status.hash or "-")
    table.add_row("changed", "yes" if status.changed else "no")
    if status.previous_size is not None:
        table.add_row("previous size", _format_size(status.previous_size))
        table.add_row("previous mtime", str(status.previous_mtime))
    rprint(table)


# ---------------------------------------------------------------------------
# Copy
# ---------------------------------------------------------------------------


@app.command()
def cp(
    src: Annotated[str, typer.Argument(help="Source file or directory")],
    dest: Annotated[str, typer.Argument(help="Destination path")],
    recursive: Annotated[bool, typer.Option("--recursive", "-r", help="Copy directories")] = False,
    hash: Annotated[bool | None, typer.Option("--hash/--no-hash", help="Compare content digests")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Copy even if up to date")] = False,
    preserve_timestamps: Annotated[
        bool | None,
        typer.Option("--preserve-timestamps/--no-preserve-timestamps"),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Glob of names (or SRC-relative paths) to skip"),
    ] = None,
    workers: Annotated[int | None, typer.Option("--workers", min=1, help="Parallel copies")] = None,
) -> None:
    """Copy SRC to DEST, skipping files that are already up to date."""
    cfg = _get_config()
    if workers is not None:
        cfg = cfg.model_copy(update={"sync": cfg.sync.model_copy(update={"max_workers": workers})})

    patterns = [*cfg.sync.ignore_patterns, *(exclude or [])]
    with Wise.from_config(cfg) as wise:
        try:
            outcome = wise.copy(
                src,
                dest,
                recursive=recursive,
                hash=cfg.sync.hash if hash is None else hash,
                force=force,
                preserve_timestamps=(
                    cfg.sync.preserve_timestamps
                    if preserve_timestamps is None
                    else preserve_timestamps
                ),
                filter=ignore_filter(patterns, root=src),
            )
        except (WiseError, OSError) as e:
            rprint(f"[red]error:[/red] {e}")
            raise typer.Exit(code=1)

    results: list[CopyResult] = outcome if isinstance(outcome, list) else [outcome]
    copied = sum(1 for r in results if r.copied)
    for r in results:
        if r.copied:
            rprint(f"[green]copied[/green] {r.src} -> {r.dest}")
    rprint(f"{copied} copied, {len(results) - copied} up to date")


# ---------------------------------------------------------------------------
# Manifest maintenance
# ---------------------------------------------------------------------------


@manifest_app.command("stats")
def manifest_stats() -> None:
    """Show manifest-wide totals."""
    with _open() as wise:
        stats = wise.stats()

    table = Table(title="Manifest")
    table.add_column("Entries", justify="right")
    table.add_column("Hashed", justify="right")
    table.add_column("Total size", justify="right")
    table.add_row(
        str(stats.total_entries),
        str(stats.entries_with_hash),
        _format_size(stats.total_size_bytes),
    )
    rprint(table)


@manifest_app.command("clean")
def manifest_clean(
    days: Annotated[
        int | None, typer.Option("--days", min=0, help="Retention window in days")
    ] = None,
) -> None:
    """Remove entries not observed within the retention window."""
    with _open() as wise:
        result = wise.clean_manifest(days)
    rprint(f"[green]Removed[/green] {result.deleted} entr{'y' if result.deleted == 1 else 'ies'}")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    import yaml

    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default wise.yaml in current directory."""
    target = Path("wise.yaml")
    if target.exists() and not force:
        rprint("[yellow]wise.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
