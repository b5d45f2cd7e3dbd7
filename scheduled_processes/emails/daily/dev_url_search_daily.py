#!/usr/bin/env python3
"""
Daily email: dev URL references in the WordPress database.

Scans post content/excerpts/guids, postmeta values, options and Redirection
plugin items for links to the staging host (default patterns
`%.wpengine.com%` and `%.wpenginepowered.com%`) and emails the admin a
per-column summary:
  - total matching rows per (table, column)
  - up to DEV_URL_ROW_LIMIT rows each, with the dev URLs found and a snippet

Only runs on production: if the site's home URL itself is a staging host the
job exits without scanning. No email is sent when nothing matches.

Environment:
  - RESEND_API_KEY   (required to send email; loaded via get_secret)
  - ALERT_EMAIL      (recipient, defaults to wp_options.admin_email)
  - ALERT_FROM_EMAIL (optional, default 'Dev URL Monitors <alerts@resend.dev>')
  - SITE_HOME_URL    (optional, defaults to wp_options.home)
  - DEV_URL_PATTERNS, DEV_URL_ROW_LIMIT, DEV_URL_URLS_PER_ROW, DEV_URL_SNIPPET_LEN
"""

import argparse
import html
import logging
import os
import sys
from typing import List, Optional

# Make repo modules importable
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
if REPO_ROOT not in sys.path:
    sys.path.append(REPO_ROOT)

from modules import wp_site  # noqa: E402
from modules.clickhouse_client import ClickHouseDatabase  # noqa: E402
from modules.dev_url_scan import ScanReport, scan_tables  # noqa: E402
from modules.production_gate import is_production  # noqa: E402
from modules.resend_mailer import send_email  # noqa: E402
from modules.scan_config import ScanConfig, load_scan_config  # noqa: E402

SUBJECT = "[DEV URL DAILY] Daily Dev URL Search Results"
SECTION_SEPARATOR = "\n\n-----------------------------\n\n"


def format_email_text(report: ScanReport, site_url: str, run_date: str) -> str:
    lines: List[str] = [
        "Dev URL references found in the database",
        f"Site: {site_url}",
        f"Date (UTC): {run_date}",
        f"Total matches: {report.total}",
    ]
    body = "\n".join(lines) + "\n\n" + SECTION_SEPARATOR.join(s.format() for s in report.sections)

    if report.errors:
        errors = ["", "", "Errors", "------"] + report.errors
        body += "\n".join(errors)
    return body


def format_email_html(report: ScanReport, site_url: str, run_date: str) -> str:
    sections_html: List[str] = []
    for section in report.sections:
        title, count_line = section.header_lines()
        rows = "\n".join(row.format() for row in section.rows)
        sections_html.append(
            f"<h3 style='margin-bottom:2px;'>{html.escape(title)}</h3>"
            f"<p style='margin-top:0; color:#6b7280;'>{html.escape(count_line)}</p>"
            f"<pre style='white-space:pre-wrap; font-size:12px;'>{html.escape(rows)}</pre>"
        )

    errors_html = ""
    if report.errors:
        items = "".join(f"<li>{html.escape(e)}</li>" for e in report.errors)
        errors_html = f"<h3>Errors</h3><ul>{items}</ul>"

    return f"""<html>
  <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; font-size: 14px; color: #111827;">
    <h2 style="margin-bottom:4px;">Dev URL references found in the database</h2>
    <p style="margin-top:0; color:#6b7280;">
      Site: <b>{html.escape(site_url)}</b><br>
      Date (UTC): <b>{html.escape(run_date)}</b><br>
      Total matches: <b>{report.total}</b>
    </p>
    {'<hr>'.join(sections_html)}
    {errors_html}
  </body>
</html>"""


def notify(report: ScanReport, site_url: str, run_date: str, to_email: str) -> None:
    if not report.sections:
        return
    send_email(
        to_email,
        SUBJECT,
        format_email_text(report, site_url, run_date),
        format_email_html(report, site_url, run_date),
    )


def run(db, config: ScanConfig, force: bool = False, dry_run: bool = False) -> Optional[ScanReport]:
    """Gate, scan, and email. Returns None when the gate blocked the run."""
    site_url = wp_site.home_url(db)
    if not force and not is_production(site_url):
        print(f"Non-production site ({site_url}); skipping dev URL search.")
        return None

    report = scan_tables(db, config)
    if not report:
        print("No dev URL references found; no email sent.")
        return report

    run_date = wp_site.current_date()
    text_body = format_email_text(report, site_url, run_date)

    print("----- EMAIL BODY BEGIN -----")
    print(text_body)
    print("----- EMAIL BODY END -----")

    if dry_run:
        print("Dry run; email not sent.")
        return report

    notify(report, site_url, run_date, wp_site.admin_email(db))
    return report


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Daily dev URL reference search")
    parser.add_argument("--dry-run", action="store_true", help="Print the report, do not send email")
    parser.add_argument("--force", action="store_true", help="Run even if the site looks like staging")
    parser.add_argument(
        "--keep-going", action="store_true", help="Log and skip tables whose queries fail"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    print("[dev_url_search_daily] Starting...")
    config = load_scan_config(skip_failed_tables=args.keep_going)
    run(ClickHouseDatabase(), config, force=args.force, dry_run=args.dry_run)
    print("[dev_url_search_daily] Done.")


if __name__ == "__main__":
    main()
