# @TASK P4-T4.1 - API package

"""Legal documents REST API package.

Sub-modules expose FastAPI routers for each domain:
- search: search and autocomplete
- documents: document detail and corpus statistics
- institutions: cached institution listing and cache refresh
"""
