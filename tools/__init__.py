# =============================================================================
# tools/__init__.py
# =============================================================================
# FastMCP tool wrappers around core/.
#
# Each tool:
#   1. Calls one or more CursorAPI methods from core/cursor_api.py
#   2. Summarizes the records with core/reports.py
#   3. Returns a dict (or list / short string) the agent can read
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build HTTP requests or retry (that's core/transport.py)
#   - They do NOT contain summarizing logic (that's core/reports.py)
#   - They do NOT know about Google ADK
# =============================================================================
