"""Command-line interface for dimcalc."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import click

from dimcalc.config import Settings, load_settings
from dimcalc.core.quantity import Quantity
from dimcalc.core.utils import format_number, scale10
from dimcalc.errors import CalcError, UnitMismatchError
from dimcalc.expr.evaluator import evaluate
from dimcalc.expr.parser import parse_expression
from dimcalc.logging_config import setup_logging
from dimcalc.scope import Scope
from dimcalc.statement import render_document
from dimcalc.units.parser import parse_unit_expr

logger = logging.getLogger(__name__)


def _configure_logging(ctx: click.Context, settings: Settings) -> None:
    verbose = ctx.obj.get("verbose", False) if ctx.obj else False
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    setup_logging(level, ctx.obj.get("log_file") if ctx.obj else None)


def render_file(source: Path, output: Path, settings: Settings) -> None:
    """Render ``source`` to the LaTeX document ``output``."""
    text = source.read_text(encoding="utf-8")
    document = render_document(text, settings)
    output.write_text(document, encoding="utf-8")
    logger.info("Wrote %s", output)


def watch_file(
    source: Path,
    on_change: Callable[[], None],
    interval: float,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: Optional[int] = None,
) -> None:
    """Call ``on_change`` whenever the modification time of ``source`` changes.

    Polls every ``interval`` seconds; ``max_polls`` bounds the loop (``None``
    runs until interrupted).
    """
    last_mtime = source.stat().st_mtime
    polls = 0
    while max_polls is None or polls < max_polls:
        sleep(interval)
        polls += 1
        try:
            mtime = source.stat().st_mtime
        except FileNotFoundError:
            logger.warning("%s disappeared, waiting for it to come back", source)
            continue
        if mtime != last_mtime:
            last_mtime = mtime
            logger.info("%s changed, re-rendering", source)
            on_change()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write logs to this file.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_file: Optional[str]) -> None:
    """Unit-aware calculator that renders formulas as LaTeX."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["log_file"] = log_file


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output .tex file. [default: SOURCE with a .tex suffix]",
)
@click.option("--digits", type=click.IntRange(min=0), default=None, help="Decimals shown for results.")
@click.option(
    "--scientific/--no-scientific",
    default=None,
    help="Start in scientific notation.",
)
@click.option("--watch", is_flag=True, help="Re-render whenever SOURCE changes.")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between checks in watch mode.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML settings file (dimcalc.toml or pyproject.toml).",
)
@click.pass_context
def render(
    ctx: click.Context,
    source: Path,
    output: Optional[Path],
    digits: Optional[int],
    scientific: Optional[bool],
    watch: bool,
    interval: Optional[float],
    config_path: Optional[Path],
) -> None:
    """Render SOURCE to a LaTeX document."""
    try:
        settings = load_settings(config_path).merged(
            max_digits=digits,
            scientific_notation=scientific,
            poll_interval=interval,
        )
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    _configure_logging(ctx, settings)

    output = output or source.with_suffix(".tex")

    if not watch:
        try:
            render_file(source, output, settings)
        except CalcError as e:
            raise click.ClickException(str(e)) from e
        click.echo(f"Wrote {output}")
        return

    def rerender() -> None:
        try:
            render_file(source, output, settings)
        except (CalcError, OSError, UnicodeDecodeError) as e:
            logger.error("%s", e)
            click.echo(f"Error: {e}", err=True)
        else:
            click.echo(f"Wrote {output}")

    rerender()
    click.echo(f"Watching {source} (Ctrl+C to stop)")
    try:
        watch_file(source, rerender, settings.poll_interval)
    except KeyboardInterrupt:
        click.echo("Stopped watching.")


@cli.command("eval")
@click.argument("expression")
@click.option("--unit", "unit_text", default=None, help="Show the result in this unit, e.g. 'km/h'.")
@click.pass_context
def eval_cmd(ctx: click.Context, expression: str, unit_text: Optional[str]) -> None:
    """Evaluate EXPRESSION and print the result."""
    _configure_logging(ctx, Settings())
    try:
        value = evaluate(parse_expression(expression), Scope.with_constants())
        click.echo(format_in_unit(value, unit_text) if unit_text else str(value))
    except CalcError as e:
        raise click.ClickException(str(e)) from e


def format_in_unit(value: Quantity, unit_text: str) -> str:
    unit, _ = parse_unit_expr(unit_text)
    if unit.dim != value.dim:
        raise UnitMismatchError(
            f"Can't express '{value}' in '{unit_text}'"
        )
    number = scale10(
        value.mantissa * value.unit.multiplier / unit.multiplier,
        value.unit.dec_exp - unit.dec_exp,
    )
    return f"{format_number(number)} {unit_text.strip()}"


def main() -> None:  # pragma: no cover - console entry point
    cli()


__all__ = ["cli", "render_file", "watch_file", "format_in_unit", "main"]
