"""
Email-related scheduled jobs.

Small, single-purpose scripts invoked via cron, for example:
  - daily/dev_url_search_daily.py

Each module defines a `main()` entrypoint and is runnable as a standalone
script.
"""
