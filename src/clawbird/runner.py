"""Command-line runner for a single tool call.

Usage:
  python -m clawbird.runner <tool-name> ['<json-params>']
  clawbird x_search_tweets '{"query": "#python"}'
  clawbird --list

Credentials come from the X_* environment variables. The tool's JSON
result is printed to stdout; the exit code is 1 when the result carries an
"error" key.
"""

import asyncio
import json
import logging
import sys

from clawbird.plugin import register
from clawbird.registry import ToolRegistry

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def run_tool(tool_name: str, params: dict) -> int:
    """Register the tools, run one, print its result, and return an exit code."""
    registry = ToolRegistry()
    context = register(registry)
    try:
        result = await registry.execute(tool_name, session_id="cli", params=params)
    finally:
        await context.aclose()

    text = result.content[0].text
    print(text)
    payload = json.loads(text)
    return 1 if isinstance(payload, dict) and "error" in payload else 0


def main() -> None:
    """CLI entrypoint — parse the tool name and JSON params, then run it."""
    args = sys.argv[1:]

    if not args or args[0] in ("-h", "--help"):
        print("Usage: python -m clawbird.runner <tool-name> ['<json-params>']")
        print("       python -m clawbird.runner --list")
        sys.exit(1)

    if args[0] == "--list":
        registry = ToolRegistry()
        register(registry)
        for name in registry.names():
            print(f"{name:24} {registry.tools[name].description}")
        return

    try:
        params = json.loads(args[1]) if len(args) >= 2 else {}
    except json.JSONDecodeError as e:
        logger.error(f"Params must be a JSON object: {e}")
        sys.exit(1)
    if not isinstance(params, dict):
        logger.error("Params must be a JSON object")
        sys.exit(1)

    sys.exit(asyncio.run(run_tool(args[0], params)))


if __name__ == "__main__":
    main()
