"""filekit CLI: shell access to the filesystem helpers and config workflow.

Commands:
    filekit init                       write a default filekit.toml
    filekit exists PATH                print yes/no (exit 1 when absent)
    filekit read PATH                  print file content
    filekit write PATH [TEXT|-]        replace content (- reads stdin)
    filekit append PATH [TEXT|-]       append content
    filekit rm PATH                    remove file or directory tree
    filekit mkdir PATH                 create directories
    filekit read-or-create PATH        print content, creating the file if absent
    filekit config PATH                load or interactively create a JSON config
    filekit watch PATH                 print a line per coalesced change
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from filekit import fs
from filekit.config import ConfigResolver
from filekit.errors import ConfigError, FilekitError
from filekit.generators import EMPTY, Fixed
from filekit.orchestrator import read_or_create
from filekit.prompt import ConsolePrompter, Question, ScriptedPrompter
from filekit.settings import Settings, init_settings, load_settings
from filekit.watcher import watch as _watch

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger("filekit.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_settings(root: str | None) -> Settings:
    try:
        return load_settings(root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    try:
        return asyncio.run(coro)
    except FilekitError as exc:
        raise click.ClickException(str(exc)) from exc


def _settings(ctx: click.Context) -> Settings:
    return ctx.find_object(Settings) or Settings()


def _target(ctx: click.Context, path: str) -> Path:
    return _settings(ctx).resolve(Path(path).expanduser())


def _text_arg(text: str | None) -> str:
    if text == "-":
        return click.get_text_stream("stdin").read()
    return text or ""


def _parse_question(raw: str) -> Question:
    prop, sep, text = raw.partition("=")
    if not sep or not prop.strip():
        msg = f"expected PROP=QUESTION, got {raw!r}"
        raise click.BadParameter(msg, param_hint="--question")
    return Question(prop=prop.strip(), text=text.strip())


def _defaults_arg(raw: str | None) -> str | None:
    if raw is None or not raw.startswith("@"):
        return raw
    try:
        return Path(raw[1:]).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"cannot read defaults file {raw[1:]}: {exc.strerror or exc}"
        raise click.BadParameter(msg, param_hint="--defaults") from exc


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="filekit")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr")
@click.option("--config-dir", default=None, help="Where to look for filekit.toml (default: cwd, upward)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: str | None) -> None:
    """filekit: filesystem helpers and interactive JSON config files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
        force=True,
    )
    ctx.obj = _load_settings(config_dir)


@cli.command()
@click.option("--dir", "root", default=".", show_default=True, help="Directory to write filekit.toml into")
def init(root: str) -> None:
    """Write a default filekit.toml."""
    try:
        config_path = init_settings(Path(root).resolve())
    except FileExistsError:
        click.echo("filekit.toml already exists, skipping init")
        return
    click.echo(f"Created {config_path}")


# ---------------------------------------------------------------------------
# Primitive operations
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path")
@click.pass_context
def exists(ctx: click.Context, path: str) -> None:
    """Print yes if PATH exists, otherwise no (exit status 1)."""
    found = _run(fs.exists(_target(ctx, path)))
    click.echo("yes" if found else "no")
    if not found:
        ctx.exit(1)


@cli.command()
@click.argument("path")
@click.pass_context
def read(ctx: click.Context, path: str) -> None:
    """Print the content of PATH."""
    settings = _settings(ctx)
    click.echo(_run(fs.read(_target(ctx, path), encoding=settings.encoding)), nl=False)


@cli.command()
@click.argument("path")
@click.argument("text", required=False)
@click.pass_context
def write(ctx: click.Context, path: str, text: str | None) -> None:
    """Replace the content of PATH with TEXT (- reads stdin)."""
    settings = _settings(ctx)
    _run(fs.write(_target(ctx, path), _text_arg(text), encoding=settings.encoding))


@cli.command()
@click.argument("path")
@click.argument("text", required=False)
@click.pass_context
def append(ctx: click.Context, path: str, text: str | None) -> None:
    """Append TEXT to PATH (- reads stdin)."""
    settings = _settings(ctx)
    _run(fs.append(_target(ctx, path), _text_arg(text), encoding=settings.encoding))


@cli.command("rm")
@click.argument("path")
@click.pass_context
def rm(ctx: click.Context, path: str) -> None:
    """Remove a file or a directory tree. Missing targets are fine."""
    _run(fs.remove(_target(ctx, path)))


@cli.command()
@click.argument("path")
@click.pass_context
def mkdir(ctx: click.Context, path: str) -> None:
    """Create PATH and any missing parent directories."""
    click.echo(_run(fs.make_dirs(_target(ctx, path))))


@cli.command("read-or-create")
@click.argument("path")
@click.option("--text", default=None, help="Content to write if PATH does not exist (default: empty)")
@click.pass_context
def read_or_create_cmd(ctx: click.Context, path: str, text: str | None) -> None:
    """Print PATH's content, writing --text there first if it is absent."""
    settings = _settings(ctx)
    generator = Fixed(text) if text is not None else EMPTY
    click.echo(_run(read_or_create(_target(ctx, path), generator, encoding=settings.encoding)), nl=False)


# ---------------------------------------------------------------------------
# filekit config
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path")
@click.option("--defaults", default=None, help="Defaults as a JSON object, or @FILE to read them from a file")
@click.option("-q", "--question", "questions", multiple=True, metavar="PROP=QUESTION",
              help="Ask QUESTION and store the answer under PROP (repeatable, asked in order)")
@click.option("--answer", "answers", multiple=True,
              help="Answer a question non-interactively (repeatable, in question order)")
@click.pass_context
def config(
    ctx: click.Context,
    path: str,
    defaults: str | None,
    questions: tuple[str, ...],
    answers: tuple[str, ...],
) -> None:
    """Load the JSON config at PATH, or create it from defaults and prompts."""
    settings = _settings(ctx)
    asked = [_parse_question(q) for q in questions]
    prompter = ScriptedPrompter(answers) if answers else ConsolePrompter()
    resolver = ConfigResolver(settings, prompter)
    try:
        coro = resolver.resolve(_target(ctx, path), _defaults_arg(defaults), asked)
    except FilekitError as exc:
        raise click.ClickException(str(exc)) from exc
    result = _run(coro)
    click.echo(json.dumps(result, indent=settings.indent, ensure_ascii=False))


# ---------------------------------------------------------------------------
# filekit watch
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path")
@click.option("--window", "window_ms", type=int, default=None,
              help="Quiet window in milliseconds (default: debounce_ms from settings)")
@click.option("--backend", type=click.Choice(["auto", "inotify", "poll"]), default="auto", show_default=True)
@click.pass_context
def watch(ctx: click.Context, path: str, window_ms: int | None, backend: str) -> None:
    """Print a line each time PATH changes, until interrupted."""
    settings = _settings(ctx)
    window = (window_ms / 1000.0) if window_ms is not None else settings.debounce_window
    target = _target(ctx, path)

    async def _forever() -> None:
        handle = _watch(
            target,
            lambda p: click.echo(f"changed {p}"),
            window=window,
            poll_interval=settings.poll_interval,
            backend=backend,
        )
        async with handle:
            await asyncio.Event().wait()

    try:
        _run(_forever())
    except KeyboardInterrupt:
        logger.debug("watch interrupted")
