# =============================================================================
# agent/usage_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the Google ADK agent that answers questions about a Cursor team's
#   usage and spend.  The agent has no API access of its own: every number it
#   reports comes from the MCP tools in tools/mcp_server.py.
#
#   ┌───────────────────────────┐   stdio (MCP)   ┌──────────────────────┐
#   │  ADK Agent                │ ──────────────▶ │  tools/mcp_server.py │
#   │  prompt + LiteLlm model   │                 │  (FastMCP)           │
#   └───────────────────────────┘                 └──────────┬───────────┘
#                                                            │
#                                                            ▼
#                                                 ┌──────────────────────┐
#                                                 │  core/ (CursorAPI)   │
#                                                 └──────────────────────┘
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess ("uv run python -m
#   tools.mcp_server") from the project root and talks to it over
#   stdin/stdout.  The current environment is forwarded so CURSOR_API_KEY
#   reaches the subprocess.
#
# MODEL:
#   Any LiteLlm model string works; the default routes GPT-4o through
#   OpenRouter (LiteLlm reads OPENROUTER_API_KEY from the environment).
#   Override with CURSOR_AGENT_MODEL.
# =============================================================================

import os
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_usage_analyst_prompt
from core.config import DEFAULT_AGENT_MODEL

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def create_agent(model: Optional[str] = None) -> Agent:
    """Create the Cursor usage analyst agent.

    Args:
        model: LiteLlm model string.  Defaults to CURSOR_AGENT_MODEL or
            openrouter/openai/gpt-4o.

    Returns:
        A configured Google ADK Agent instance.
    """
    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=PROJECT_ROOT,
            env=dict(os.environ),
        ),
    )

    model = model or os.environ.get("CURSOR_AGENT_MODEL") or DEFAULT_AGENT_MODEL

    return Agent(
        name="cursor_usage_analyst",
        model=LiteLlm(model=model),
        instruction=get_usage_analyst_prompt(),
        tools=[mcp_tools],
    )
