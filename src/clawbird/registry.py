"""In-process tool host: a name → Tool lookup table.

Agent hosts provide their own register_tool(); this one backs the CLI
runner and the tests, and doubles as the reference implementation of the
host side of the contract.
"""

from __future__ import annotations

from typing import Any, Protocol

from clawbird.models import ToolResult, err
from clawbird.tools.base import Tool


class ToolHost(Protocol):
    def register_tool(self, tool: Tool) -> None: ...


class ToolRegistry:
    """Collects registered tools by name and dispatches calls to them."""

    def __init__(self) -> None:
        self.tools: dict[str, Tool] = {}

    def register_tool(self, tool: Tool) -> None:
        if tool.name in self.tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self.tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self.tools.get(name)

    def names(self) -> list[str]:
        return sorted(self.tools)

    async def execute(
        self, name: str, session_id: str, params: dict[str, Any] | None = None
    ) -> ToolResult:
        """Route a call by tool name. Unknown tools return an error envelope."""
        tool = self.tools.get(name)
        if tool is None:
            return err(f"Tool '{name}' does not exist.", {"available": self.names()})
        return await tool.execute(session_id, params)
