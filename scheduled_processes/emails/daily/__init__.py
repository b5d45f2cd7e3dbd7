"""
Daily summary emails.

Jobs here:
  - dev_url_search_daily.py
      • daily scan of WordPress tables for links to the staging host
"""
