#!/usr/bin/env python3
"""
register_cron.py
----------------

Install (or remove) the daily dev URL search in the user crontab without
clobbering unrelated jobs.

Behavior:
  1. Resolves the site's home URL; staging installs are never scheduled.
  2. Adds one tagged entry for `daily_dev_url_search_event` unless it is
     already present (re-running is safe).
  3. With --remove, deletes that entry if present. Removal is not gated so a
     site moved to staging can still be cleaned up.

Usage:
  cd <repo_root>
  python3 scripts/register_cron.py            # register
  python3 scripts/register_cron.py --print    # show the entry, change nothing
  python3 scripts/register_cron.py --remove   # unregister
"""

import argparse
import os
import sys
from typing import List, Optional

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import DEV_URL_SEARCH_EVENT  # noqa: E402
from modules import cron_scheduler  # noqa: E402
from modules.production_gate import is_production  # noqa: E402

JOB_SCRIPT = os.path.join("scheduled_processes", "emails", "daily", "dev_url_search_daily.py")
LOG_FILE = os.path.join("logs", "email_dev_url_search.log")


def job_command(repo_root: str) -> str:
    return f"cd {repo_root} && /usr/bin/python3 {JOB_SCRIPT} >> {LOG_FILE} 2>&1"


def _site_home_url() -> str:
    from modules import wp_site
    from modules.clickhouse_client import ClickHouseDatabase

    return wp_site.home_url(ClickHouseDatabase())


def register(repo_root: str, home_url: str, interval: str = "daily") -> bool:
    if not is_production(home_url):
        print(f"Non-production site ({home_url}); not scheduling {DEV_URL_SEARCH_EVENT}.")
        return False
    added = cron_scheduler.schedule(DEV_URL_SEARCH_EVENT, job_command(repo_root), interval=interval)
    if added:
        print(f"✅ Cron updated: {DEV_URL_SEARCH_EVENT} scheduled ({interval}).")
    else:
        print(f"{DEV_URL_SEARCH_EVENT} already scheduled; crontab unchanged.")
    return added


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Register the daily dev URL search in crontab")
    parser.add_argument("--remove", action="store_true", help="Remove the cron entry")
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the entry only")
    parser.add_argument("--interval", default="daily", choices=cron_scheduler.INTERVALS)
    args = parser.parse_args(argv)

    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    if args.print_only:
        print(f"# {DEV_URL_SEARCH_EVENT}")
        print(f"{cron_scheduler.cron_fields(args.interval)} {job_command(repo_root)}")
        print("# Note: Ensure the log directory exists:")
        print(f"#   mkdir -p {os.path.join(repo_root, 'logs')}")
        return

    if args.remove:
        if cron_scheduler.unschedule(DEV_URL_SEARCH_EVENT, job_command(repo_root)):
            print(f"✅ Removed {DEV_URL_SEARCH_EVENT} from crontab.")
        else:
            print(f"{DEV_URL_SEARCH_EVENT} was not scheduled.")
        return

    register(repo_root, _site_home_url(), interval=args.interval)


if __name__ == "__main__":
    main()
