"""Clawbird — X (Twitter) tools for autonomous agents.

Provides the tool definitions an agent host registers, plus the shared
request/response pipeline behind them: credential resolution, lazy API
clients, the authenticated-identity cache, rate-limit reporting, cost
accounting and the write-action audit log.
"""

from clawbird.plugin import register

__all__ = ["register"]
