"""CLI interface for Treesmith."""

from __future__ import annotations

import json
import logging
import os
import sys

import click

from treesmith.core.analyzer import analyze as analyze_tree
from treesmith.core.codec import parse as parse_structure
from treesmith.core.codec import root_name_for, serialize
from treesmith.core.collector import Collector
from treesmith.core.comments import remove_comments
from treesmith.core.creator import create_structure
from treesmith.core.distributor import Distributor
from treesmith.core.fs_access import LocalFilesystem
from treesmith.core.scanner import build_full_tree
from treesmith.core.tree_ops import load_root, set_flag_all
from treesmith.models.results import Outcome
from treesmith.settings import Settings
from treesmith.utils import bytes_to_human


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _build_fs(settings: Settings) -> LocalFilesystem:
    return LocalFilesystem(ignore=settings.ignore_names, line_count_ceiling=settings.line_count_ceiling)


def _fail(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """Treesmith: folder structure diagrams, code collection and distribution."""
    _setup_logging(verbose)
    ctx.obj = Settings.instance()


# ── tree ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--exclude", "-x", multiple=True, help="Path (relative to PATH) to collapse as [excluded]")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def tree(settings: Settings, path: str, exclude: tuple[str, ...], as_json: bool) -> None:
    """Print the full structure diagram of a folder."""
    fs = _build_fs(settings)
    excluded = {os.path.join(path, p) for p in exclude}
    nodes = build_full_tree(fs, path, excluded)
    text = serialize(nodes, root_name_for(os.path.abspath(path)))

    if as_json:
        click.echo(json.dumps({"text": text, "tree": [n.to_dict() for n in nodes]}, indent=2))
        return
    click.echo(text, nl=False)


# ── parse ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def parse(source, as_json: bool) -> None:
    """Preview how a structure diagram is interpreted."""
    entries = parse_structure(source.read())

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        click.echo("No entries.")
        return

    for entry in entries:
        kind = click.style("file", fg="cyan") if entry.is_file else click.style("dir ", fg="yellow")
        click.echo(f"  {entry.level:>2}  {kind}  {entry.full_path}")


# ── create ───────────────────────────────────────────────────────────────

@main.command()
@click.argument("base", type=click.Path(file_okay=False))
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def create(settings: Settings, base: str, source) -> None:
    """Create the folders and empty files of a structure diagram under BASE."""
    result = create_structure(_build_fs(settings), base, source.read())

    for error in result.errors:
        click.echo(f"  {click.style('✗', fg='red')} {error}", err=True)

    if result.outcome is not Outcome.OK or result.failed:
        _fail(result.message)

    click.echo(f"{click.style('✓', fg='green')} {result.message}")
    if result.skipped:
        click.echo(f"  ({result.skipped} existing file(s) left untouched)")


# ── collect ──────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.argument("paths", nargs=-1, type=click.Path(exists=True))
@click.option("--relative/--basename", default=None, help="Header labels relative to ROOT or bare file names")
@click.option("--output", "-o", type=click.File("w", encoding="utf-8"), default="-", help="Write the blob here")
@click.pass_obj
def collect(settings: Settings, root: str, paths: tuple[str, ...], relative: bool | None, output) -> None:
    """Combine files (default: everything under ROOT) into one text blob."""
    if relative is None:
        relative = bool(settings.get("collect.relative_headers"))

    fs = _build_fs(settings)
    collector = Collector(fs, root=root if relative else None)
    if paths:
        result = collector.collect_paths(list(paths))
    else:
        nodes = set_flag_all(load_root(fs, root), "selected", True)
        result = collector.collect(nodes)

    if result.outcome is not Outcome.OK:
        _fail(result.message)

    output.write(result.text)
    for error in result.errors:
        click.echo(f"  {click.style('!', fg='yellow')} {error}", err=True)
    click.echo(f"{click.style('✓', fg='green')} {len(result.files)} file(s) combined", err=True)


# ── distribute ───────────────────────────────────────────────────────────

@main.command()
@click.argument("target", type=click.Path(file_okay=False))
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--dry-run", is_flag=True, help="Validate and list target files without writing")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def distribute(settings: Settings, target: str, source, dry_run: bool, as_json: bool) -> None:
    """Split a combined blob at file-path comments and write the files under TARGET."""
    distributor = Distributor(_build_fs(settings), extensions=settings.extensions)
    try:
        result = distributor.distribute(source.read(), target, dry_run=dry_run)
    except ValueError as e:
        _fail(f"{e} (check distribute.extensions)")

    if as_json:
        click.echo(
            json.dumps(
                {
                    "status": result.outcome.value,
                    "dry_run": result.dry_run,
                    "message": result.message,
                    "files": [b.path for b in result.blocks],
                    "written": result.written,
                    "problems": result.problems,
                    "error": result.error,
                },
                indent=2,
            )
        )
        if result.outcome is not Outcome.OK:
            sys.exit(1)
        return

    for problem in result.problems:
        click.echo(f"  {click.style('✗', fg='red')} {problem}", err=True)
    if result.outcome is not Outcome.OK:
        _fail(result.message)

    for block, full_path in zip(result.blocks, result.planned):
        marker = click.style("·", fg="bright_black") if dry_run else click.style("✓", fg="green")
        click.echo(f"  {marker} {block.path:40s} → {full_path}")
    click.echo(f"\n{result.message}")
    if dry_run:
        click.echo("(dry run, no files were written)")


# ── analyze ──────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--top", default=5, show_default=True, help="Number of largest files to list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def analyze(settings: Settings, path: str, top: int, as_json: bool) -> None:
    """Show file, size and line statistics for a project."""
    scan = _build_fs(settings).deep_scan(path)
    if not scan.success:
        _fail(f"Scan failed: {scan.error}")

    stats = analyze_tree(scan.tree)

    if as_json:
        click.echo(json.dumps(stats.to_dict(), indent=2))
        return

    click.echo(f"\n{click.style('📊', bold=True)} {root_name_for(os.path.abspath(path))}\n")
    click.echo(f"  Files:   {stats.files:,}")
    click.echo(f"  Folders: {stats.folders:,}")
    click.echo(f"  Size:    {click.style(bytes_to_human(stats.size), fg='green', bold=True)}")
    click.echo(f"  Lines:   {stats.lines:,}")

    if stats.extensions:
        click.echo("\n  By extension:")
        for ext, ext_stats in stats.by_size():
            click.echo(
                f"    {ext:12s} {ext_stats.files:>6,} files  "
                f"{bytes_to_human(ext_stats.size):>10s}  {ext_stats.lines:>9,} lines"
            )

    largest = stats.largest(top)
    if largest:
        click.echo("\n  Largest files:")
        for item in largest:
            click.echo(f"    {bytes_to_human(item.size):>10s}  {item.path}")
    click.echo()


# ── strip-comments ───────────────────────────────────────────────────────

@main.command("strip-comments")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def strip_comments(source) -> None:
    """Remove //, #, /* */ and <!-- --> comments and blank lines."""
    click.echo(remove_comments(source.read()))


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Read and change settings."""


@config.command("get")
@click.argument("key")
@click.pass_obj
def config_get(settings: Settings, key: str) -> None:
    """Print a setting by dot-notation key."""
    value = settings.get(key)
    if value is None:
        _fail(f"Setting '{key}' not found.")
    click.echo(json.dumps(value))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set(settings: Settings, key: str, value: str) -> None:
    """Set a setting; VALUE is parsed as JSON when possible."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    settings.set(key, parsed)
    click.echo(f"{key} = {json.dumps(parsed)}")
