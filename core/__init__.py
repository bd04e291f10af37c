# =============================================================================
# core/__init__.py
# =============================================================================
# The Cursor API access layer and everything that is pure Python around it.
#
#   transport.py   one authenticated request, 429 backoff
#   pagination.py  page 1..N aggregation with per-resource stop signals
#   analytics.py   query strings for /analytics/team/*
#   cursor_api.py  one method per resource
#   models.py      raw JSON → dataclasses
#   reports.py     compact summaries for the tools layer
#   config.py      environment → Settings
#   errors.py      exception hierarchy
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or dotenv.  Every
#   module here can be imported and tested with the standard library alone.
# =============================================================================
