"""scoregen CLI entry point."""

import sys
from pathlib import Path

import click

from scoregen import __version__
from scoregen.engine import CsoundEngine, EngineError
from scoregen.midi_exporter import MidiExporter
from scoregen.orchestra import Orchestra, load_orchestra
from scoregen.score_strategy import STRATEGIES, StaticScore, StructuredScore, get_strategy
from scoregen.score_text import parse_score_text

MAX_COUNT = 1000

_strategy_argument = click.argument(
    "strategy",
    type=click.Choice(list(STRATEGIES), case_sensitive=False),
)
_count_option = click.option(
    "--count",
    "-n",
    type=click.IntRange(0, MAX_COUNT),
    default=None,
    help="Number of notes for the templated and structured strategies (default 13). Ignored by static.",
)
_seed_option = click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the structured strategy's random pitches; ignored by the others. Unseeded runs differ each time.",
)


def _note_ignored_options(strategy: str, count: int | None, seed: int | None) -> None:
    """Tell the user on stderr which options the chosen strategy does not use."""
    name = strategy.lower()
    ignored = []
    if count is not None and name == StaticScore.name:
        ignored.append("--count")
    if seed is not None and name != StructuredScore.name:
        ignored.append("--seed")
    if ignored:
        click.echo(f"  NOTE: {', '.join(ignored)} ignored by the '{name}' strategy.", err=True)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="scoregen")
def main() -> None:
    """scoregen: three ways to generate a Csound score, and a player for them."""


# ── score subcommand ───────────────────────────────────────────────────────────

@main.command()
@_strategy_argument
@_count_option
@_seed_option
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Write the score text to PATH instead of standard output.",
)
def score(strategy: str, count: int | None, seed: int | None, output: str | None) -> None:
    """
    Print the score text produced by STRATEGY.

    \b
    Examples:
      scoregen score static
      scoregen score templated --count 8
      scoregen score structured --seed 7 -o melody.sco
    """
    _note_ignored_options(strategy, count, seed)
    text = get_strategy(strategy, count=count, seed=seed).generate()

    if output is None:
        if text:
            click.echo(text, nl=not text.endswith("\n"))
        return

    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as exc:
        click.echo(f"  ERROR: Could not write score file: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {len(parse_score_text(text))} note(s) to '{output}'.")


# ── play subcommand ────────────────────────────────────────────────────────────

@main.command()
@_strategy_argument
@_count_option
@_seed_option
@click.option(
    "--option",
    "engine_option",
    default=CsoundEngine.DEFAULT_OPTION,
    show_default=True,
    metavar="FLAG",
    help="Single Csound command-line flag, e.g. -odac or -oout.wav.",
)
@click.option(
    "--orc",
    "orc_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    default=None,
    help="Use this orchestra file instead of the built-in instrument.",
)
@click.option(
    "--sr",
    "sample_rate",
    type=click.IntRange(8000, 192000),
    default=Orchestra.sample_rate,
    show_default=True,
    help="Sample rate of the built-in orchestra.",
)
@click.option(
    "--ksmps",
    type=click.IntRange(1, 4096),
    default=Orchestra.ksmps,
    show_default=True,
    help="Samples per control block of the built-in orchestra.",
)
def play(
    strategy: str,
    count: int | None,
    seed: int | None,
    engine_option: str,
    orc_path: str | None,
    sample_rate: int,
    ksmps: int,
) -> None:
    """
    Perform the score produced by STRATEGY with Csound.

    \b
    Examples:
      scoregen play static
      scoregen play structured --seed 3
      scoregen play templated --option -otemplated.wav
    """
    if orc_path is not None:
        orchestra = load_orchestra(orc_path)
    else:
        orchestra = Orchestra(sample_rate=sample_rate, ksmps=ksmps).render()
    _note_ignored_options(strategy, count, seed)
    text = get_strategy(strategy, count=count, seed=seed).generate()

    click.echo(f"scoregen v{__version__}")
    click.echo(f"  Strategy : {strategy.lower()}")
    click.echo(f"  Option   : {engine_option}")
    click.echo(f"  Notes    : {len(parse_score_text(text))}")
    click.echo()

    try:
        with CsoundEngine(option=engine_option) as engine:
            click.echo("[1/3] Compiling orchestra...")
            engine.compile_orchestra(orchestra)

            click.echo("[2/3] Reading score...")
            engine.read_score(text)

            click.echo("[3/3] Performing...")
            engine.start()
            blocks = engine.perform()
            engine.stop()
    except EngineError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    except (ImportError, OSError) as exc:
        click.echo(f"  ERROR: Csound is not available: {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo(f"Done!  Performed {blocks} block(s).")


# ── midi subcommand ────────────────────────────────────────────────────────────

@main.command()
@_strategy_argument
@_count_option
@_seed_option
@click.option(
    "--output",
    "-o",
    required=True,
    metavar="PATH",
    help="Destination MIDI file path.",
)
@click.option(
    "--tempo",
    type=click.IntRange(20, 300),
    default=MidiExporter.DEFAULT_TEMPO,
    show_default=True,
    help="Tempo in BPM. At 60, one beat equals one score second.",
)
def midi(strategy: str, count: int | None, seed: int | None, output: str, tempo: int) -> None:
    """
    Export the score produced by STRATEGY as a MIDI file, no Csound needed.

    \b
    Examples:
      scoregen midi structured --seed 7 -o melody.mid
    """
    _note_ignored_options(strategy, count, seed)
    events = parse_score_text(get_strategy(strategy, count=count, seed=seed).generate())

    click.echo(f"Writing {len(events)} note(s) → '{output}'...")
    try:
        MidiExporter(tempo=tempo).export(events, output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write MIDI file: {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not convert score: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Done!  Open '{output}' in any MIDI player.")
