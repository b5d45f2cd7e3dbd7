"""
Idempotent registration of recurring jobs in the user crontab.

Each job we own is written as two lines:

    # dev-url-monitors:<event_name>
    <minute> <hour> * * * <command>

The marker comment is how is_scheduled / unschedule find the entry again, so
unrelated cron lines are never touched. Registering an event that is already
present and removing one that is absent are both no-ops.
"""

import logging
import subprocess
from datetime import datetime
from typing import List, Optional

logger = logging.getLogger(__name__)

MARKER_PREFIX = "# dev-url-monitors:"

INTERVALS = ("hourly", "twicedaily", "daily")


def _run_crontab_list() -> str:
    """Return current crontab as text (or empty string if none)."""
    try:
        res = subprocess.run(
            ["crontab", "-l"],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        # crontab command missing; treat as empty
        return ""

    if res.returncode != 0:
        # Common case: "no crontab for user"
        return ""
    return res.stdout or ""


def _install_crontab(new_cron: str) -> None:
    """Replace the user's crontab with new_cron."""
    subprocess.run(
        ["crontab", "-"],
        input=new_cron,
        text=True,
        check=True,
    )


def _marker(event_name: str) -> str:
    return f"{MARKER_PREFIX}{event_name}"


def cron_fields(interval: str, start_time: Optional[datetime] = None) -> str:
    """Five cron time fields for `interval`, anchored on start_time's clock time."""
    if interval not in INTERVALS:
        raise ValueError(f"Unknown interval {interval!r}; expected one of {INTERVALS}")
    start_time = start_time or datetime.now()
    minute, hour = start_time.minute, start_time.hour
    if interval == "hourly":
        return f"{minute} * * * *"
    if interval == "twicedaily":
        first, second = sorted((hour, (hour + 12) % 24))
        return f"{minute} {first},{second} * * *"
    return f"{minute} {hour} * * *"


def is_scheduled(event_name: str) -> bool:
    marker = _marker(event_name)
    return any(line.strip() == marker for line in _run_crontab_list().splitlines())


def schedule(
    event_name: str,
    command: str,
    interval: str = "daily",
    start_time: Optional[datetime] = None,
) -> bool:
    """Add the cron entry unless it already exists. Returns True if added."""
    fields = cron_fields(interval, start_time)
    current = _run_crontab_list()
    marker = _marker(event_name)
    if any(line.strip() == marker for line in current.splitlines()):
        logger.info(f"{event_name} already scheduled; nothing to do.")
        return False

    merged_lines: List[str] = current.splitlines()
    # Always add a blank line between existing and generated block
    if merged_lines and merged_lines[-1].strip():
        merged_lines.append("")
    merged_lines.append(marker)
    merged_lines.append(f"{fields} {command}")

    _install_crontab("\n".join(merged_lines).rstrip() + "\n")
    logger.info(f"Scheduled {event_name} ({interval}: {fields}).")
    return True


def unschedule(event_name: str, command: str) -> bool:
    """Remove the cron entry if present. Returns True if something was removed.

    The line after our marker is only dropped when it runs `command`; a
    hand-edited crontab keeps whatever unrelated job ended up there.
    """
    marker = _marker(event_name)
    lines = _run_crontab_list().splitlines()

    kept: List[str] = []
    removed = False
    after_marker = False
    for line in lines:
        if after_marker:
            after_marker = False
            if line.rstrip().endswith(command):
                continue
            logger.warning(f"Line after {marker!r} is not our job; leaving it: {line}")
        if line.strip() == marker:
            removed = True
            after_marker = True
            continue
        kept.append(line)

    if not removed:
        logger.info(f"{event_name} not scheduled; nothing to remove.")
        return False

    new_cron = "\n".join(kept).rstrip()
    _install_crontab(new_cron + "\n" if new_cron else "")
    logger.info(f"Unscheduled {event_name}.")
    return True
