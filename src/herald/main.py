"""herald entry point — replay a notification event script on simulated time."""

import argparse
import sys
from pathlib import Path

from rich.table import Table

from herald.audio.beeper import Beeper, NullAudio
from herald.collaborators.console import ConsoleSurface
from herald.collaborators.state import MutedConversations, StaticLockState
from herald.config import get_config
from herald.notifications.group import NotificationGroup
from herald.orchestrator import NotificationCenter
from herald.replay import ReplayError, ReplayStep, Replayer, load_script
from herald.scheduling.scheduler import VirtualScheduler
from herald.utils.logger import console, setup_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="herald",
        description="herald — notification grouping and heads-up lifecycle",
    )
    parser.add_argument(
        "script",
        type=Path,
        help="JSON event script to replay",
    )
    parser.add_argument(
        "--sound",
        action="store_true",
        help="Play channel sounds through the speakers",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the grouped notification list after the replay",
    )
    parser.add_argument(
        "--settle",
        type=int,
        default=None,
        metavar="MS",
        help="Simulated time to run after the last event (default: heads-up duration plus exit animation)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def _steps_table(steps: list[ReplayStep]) -> Table:
    table = Table(title="Heads-up timeline")
    table.add_column("t (ms)", justify="right")
    table.add_column("event")
    table.add_column("key")
    table.add_column("result")
    table.add_column("active heads-up")
    for step in steps:
        table.add_row(
            str(step.at_ms),
            step.kind,
            step.key or "",
            "" if step.result is None else str(step.result),
            ", ".join(step.heads_up) or "—",
        )
    return table


def _groups_table(groups: list[NotificationGroup]) -> Table:
    table = Table(title="Notification list")
    table.add_column("#", justify="right")
    table.add_column("group")
    table.add_column("header")
    table.add_column("children")
    table.add_column("summary")
    for index, group in enumerate(groups):
        presentation = group.presentation
        summary = ""
        if presentation is not None:
            summary = " / ".join(t for t in (presentation.title, presentation.summary_text) if t)
        table.add_row(
            str(index),
            group.group_key or "",
            group.header_item.key if group.header_item else "",
            ", ".join(c.key for c in group.children),
            summary,
        )
    return table


def main(argv: list[str] | None = None) -> int:
    """Synchronous entry point."""
    args = _parse_args(argv)

    config = get_config()
    setup_logging(verbose=args.verbose, log_level=config.log_level)

    try:
        script = load_script(args.script)
    except (OSError, ReplayError) as e:
        console.print(f"[bold red]Cannot load script:[/] {e}")
        return 1

    scheduler = VirtualScheduler()
    lock_state = StaticLockState()
    mute_state = MutedConversations()
    audio = (
        Beeper(volume=config.beep_volume, sample_rate=config.beep_sample_rate)
        if args.sound and config.beep_enabled else NullAudio()
    )
    surface = ConsoleSurface(
        console=console,
        scheduler=scheduler,
        enter_animation_ms=config.enter_animation_duration_ms,
        alpha_enter_animation_ms=config.alpha_enter_animation_duration_ms,
        exit_animation_ms=config.exit_animation_duration_ms,
    )
    center = NotificationCenter(
        config,
        surface=surface,
        scheduler=scheduler,
        audio=audio,
        lock_state=lock_state,
        mute_state=mute_state,
    )

    settle = args.settle
    if settle is None:
        settle = config.headsup_duration_ms + config.exit_animation_duration_ms
    steps = Replayer(center, scheduler, lock_state, mute_state).run(script, settle_ms=settle)

    console.print(_steps_table(steps))
    if args.list:
        console.print(_groups_table(center.groups()))

    center.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
