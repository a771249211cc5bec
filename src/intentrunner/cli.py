#!/usr/bin/env python3
"""Intent Runner CLI - inspect nicknames and replay routines.

Usage:
    intentrunner list                       # List registered intents
    intentrunner nicknames                  # List saved nicknames
    intentrunner info morning               # Show what a nickname runs
    intentrunner invoke morning             # Replay a nickname
    intentrunner continue                   # Resume the paused routine
    intentrunner run nicknames.remove --slot name=morning
"""

import asyncio
import logging
import sys

import click

from .errors import UnknownNickname
from .executor import load_paused
from .registry import IntentRunner

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("intentrunner")


def _parse_slots(pairs: tuple[str, ...]) -> dict[str, str]:
    slots = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--slot")
        slots[key] = value
    return slots


def _report(outcome) -> None:
    if outcome.ok:
        logger.info("Done")
        return
    logger.error(outcome.display_message)
    sys.exit(1)


@click.group()
@click.pass_context
def cli(ctx):
    """Intent Runner - command dispatch and routines."""
    runner = IntentRunner()
    runner.load_builtins()
    ctx.obj = runner


@cli.command("list")
@click.pass_obj
def list_intents(runner: IntentRunner):
    """List all registered intents."""
    click.echo("Registered intents:")
    for name in runner.list_all():
        click.echo(f"  - {name}")


@cli.command()
@click.pass_obj
def nicknames(runner: IntentRunner):
    """List saved nicknames."""
    names = runner.nicknames.list_all()
    if not names:
        click.echo("No nicknames saved.")
        return

    click.echo("Nicknames:")
    for name in names:
        click.echo(f"  - {name}")


@cli.command()
@click.argument("nickname")
@click.pass_obj
def info(runner: IntentRunner, nickname: str):
    """Show what a nickname runs."""
    try:
        record = runner.nicknames.lookup(nickname)
    except UnknownNickname as e:
        logger.error(e.display_message)
        sys.exit(1)

    click.echo(f"Nickname: {nickname.lower()}")
    if not record.is_combined:
        click.echo(f"  Intent: {record.name}")
        click.echo(f"  Utterance: {record.utterance or '(none)'}")
        return
    click.echo(f"  Routine of {len(record.sub_invocations)} steps:")
    for index, step in enumerate(record.sub_invocations):
        click.echo(f"    {index}. {step.name}  {step.utterance}")


@cli.command()
@click.argument("nickname")
@click.pass_obj
def forget(runner: IntentRunner, nickname: str):
    """Remove a saved nickname."""
    outcome = asyncio.run(runner.invoke("nicknames.remove", {"name": nickname}))
    _report(outcome)


@cli.command()
@click.pass_obj
def paused(runner: IntentRunner):
    """Show the paused routine, if any."""
    state = load_paused(runner.store)
    if state is None:
        click.echo("No routine is paused.")
        return
    click.echo(f"Paused: {state.name} (next step {state.next_index})")


@cli.command()
@click.argument("intent")
@click.option("--slot", "slots", multiple=True, help="Slot value as key=value. Repeatable.")
@click.pass_obj
def run(runner: IntentRunner, intent: str, slots: tuple[str, ...]):
    """Dispatch an intent by name.

    INTENT is the registered intent name, e.g. 'nicknames.remove'.
    """
    outcome = asyncio.run(runner.invoke(intent, _parse_slots(slots), utterance=intent))
    _report(outcome)


@cli.command()
@click.argument("nickname")
@click.pass_obj
def invoke(runner: IntentRunner, nickname: str):
    """Replay a saved nickname."""
    logger.info(f"Invoking nickname: {nickname}")
    _report(asyncio.run(runner.invoke_nickname(nickname)))


@cli.command("continue")
@click.pass_obj
def continue_routine(runner: IntentRunner):
    """Resume the paused routine."""
    _report(asyncio.run(runner.invoke("nicknames.continue", utterance="continue")))


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
