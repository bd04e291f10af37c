# =============================================================================
# agent/__init__.py
# =============================================================================
# The Google ADK agent that sits on top of the MCP tool server.
#
# ARCHITECTURAL ROLE:
#   agent/ → orchestration only (prompt + model + MCP connection)
#   tools/ → MCP wrappers only
#   core/  → the Cursor API client and the summaries
#
# The agent decides WHICH tools to call and HOW to explain the results.  It
# never talks to the Cursor API directly.
# =============================================================================
