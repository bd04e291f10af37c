# =============================================================================
# main.py  —  Entry Point for the Cursor Usage Analyst Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env and checks the configuration (CURSOR_API_KEY is required)
#   2. Creates the Google ADK agent (agent/usage_agent.py)
#   3. Starts an interactive session
#   4. For every question, streams the agent's events and prints the tool
#      calls it makes and its final answer
#
# To expose the tools to a different MCP host (Claude Desktop, Cursor, ...)
# skip this file and run the tool server directly:
#   uv run python -m tools.mcp_server
# =============================================================================

import asyncio
import sys

from dotenv import load_dotenv

# Must happen BEFORE creating the agent: LiteLlm reads OPENROUTER_API_KEY
# and the tool server reads CURSOR_API_KEY from the environment.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.usage_agent import create_agent
from core.config import load_settings
from core.errors import ConfigurationError

APP_NAME = "cursor_usage_analyst"
USER_ID = "admin"


async def run_agent():
    """Run the Cursor usage analyst interactively."""
    print("=" * 70)
    print("  CURSOR USAGE ANALYST")
    print("  Powered by Google ADK + FastMCP")
    print("=" * 70)

    # Fail before starting the tool server subprocess.
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"\n❌ {exc}")
        sys.exit(1)

    print("\n🔧 Initializing agent...")
    agent = create_agent(settings.agent_model)

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask about your team's Cursor usage and spend.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text
                    if getattr(part, "function_call", None):
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
