from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from config.settings import AppConfig
from core.commands import TimerCommands
from core.errors import PersistenceError, TimerNotFound, WatchSetupError
from core.tail import TailLoop
from core.timing.clock import format_elapsed
from persistence.state_store import StateStore

NAME_DEFAULT = "main"

EXIT_NOT_FOUND = 1
EXIT_FAILURE = 2
EXIT_INTERRUPTED = 130

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Track time with named timers.")
logger = logging.getLogger("peperone")


def _check_name(value: str) -> str:
    if not value:
        raise typer.BadParameter("timer name must not be empty")
    return value


def _store(ctx: typer.Context) -> StateStore:
    cfg: AppConfig = ctx.obj
    return StateStore(cfg.state_file, settle=cfg.settle_seconds)


def _commands(ctx: typer.Context) -> TimerCommands:
    return TimerCommands(_store(ctx))


@contextmanager
def _reporting(quiet: bool = False) -> Iterator[None]:
    """Turn core errors into a message on stderr and an exit code."""

    try:
        yield
    except TimerNotFound as exc:
        if not quiet:
            typer.echo(f"[peperone] {exc}", err=True)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except (PersistenceError, WatchSetupError) as exc:
        logger.debug("fatal error", exc_info=True)
        typer.echo(f"[peperone] {exc}", err=True)
        raise typer.Exit(code=EXIT_FAILURE)


@app.callback()
def main(
    ctx: typer.Context,
    state_file: Optional[Path] = typer.Option(
        None,
        "--state-file",
        envvar="PEPERONE_STATE_FILE",
        help="Timer snapshot file (default: <data dir>/timers.json)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Named timers that keep counting between invocations."""

    try:
        cfg = AppConfig.load(state_file=state_file, verbose=verbose)
    except ValueError as exc:
        typer.echo(f"[peperone] invalid configuration: {exc}", err=True)
        raise typer.Exit(code=EXIT_FAILURE)

    logging.basicConfig(level=cfg.log_level, format=LOG_FORMAT)
    logger.debug("using state file %s", cfg.state_file)
    ctx.obj = cfg


@app.command("new")
def new(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
) -> None:
    """Create a timer and start it, replacing any timer with the same name."""

    with _reporting():
        _commands(ctx).create(name)
    typer.echo(f"Started new timer '{name}'")


@app.command("start")
def start(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
) -> None:
    """Start (or resume) a timer."""

    with _reporting():
        timer = _commands(ctx).start(name)
    typer.echo(f"Started timer '{name}' at {format_elapsed(timer.elapsed())}")


@app.command("stop")
def stop(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
) -> None:
    """Stop a timer, keeping its elapsed time."""

    with _reporting():
        timer = _commands(ctx).stop(name)
    typer.echo(f"Stopped timer '{name}' at {format_elapsed(timer.elapsed())}")


@app.command("toggle")
def toggle(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
) -> None:
    """Stop a running timer or start a stopped one."""

    with _reporting():
        timer = _commands(ctx).toggle(name)
    verb = "Started" if timer.is_running else "Stopped"
    typer.echo(f"{verb} timer '{name}' at {format_elapsed(timer.elapsed())}")


@app.command("remove")
def remove(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
) -> None:
    """Delete a timer."""

    with _reporting():
        _commands(ctx).remove(name)
    typer.echo(f"Removed timer '{name}'")


@app.command("list")
def list_timers(
    ctx: typer.Context,
    long: bool = typer.Option(False, "--long", "-l", help="Show elapsed time and state"),
) -> None:
    """List timer names."""

    commands = _commands(ctx)
    with _reporting():
        if not long:
            for name in commands.list():
                typer.echo(name)
            return
        for status in commands.statuses():
            state = "running" if status.running else "stopped"
            typer.echo(f"{status.name}\t{format_elapsed(status.elapsed)}\t{state}")


@app.command("show")
def show(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print errors"),
) -> None:
    """Print a timer's elapsed time."""

    with _reporting(quiet):
        status = _commands(ctx).show(name)
    typer.echo(format_elapsed(status.elapsed))


@app.command("tail")
def tail(
    ctx: typer.Context,
    name: str = typer.Argument(NAME_DEFAULT, help="Timer name", callback=_check_name),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print errors"),
    keep_going: bool = typer.Option(
        False, "--keep-going", "-k", help="Keep tailing while the timer does not exist"
    ),
) -> None:
    """Print a timer's elapsed time every second, following external changes."""

    store = _store(ctx)
    with _reporting(quiet):
        # Watch before the first load so no change slips in between.
        with store.watch() as feed:
            loop = TailLoop(name, store.load, feed, keep_going=keep_going, display=typer.echo)
            try:
                loop.run()
            except KeyboardInterrupt:
                raise typer.Exit(code=EXIT_INTERRUPTED)


# Short aliases, hidden from --help.
for _alias, _command in (
    ("s", start),
    ("t", toggle),
    ("rm", remove),
    ("r", remove),
    ("del", remove),
    ("ls", list_timers),
    ("l", list_timers),
    ("cat", show),
    ("info", show),
    ("view", show),
    ("status", show),
    ("follow", tail),
):
    app.command(_alias, hidden=True)(_command)


if __name__ == "__main__":
    app()
