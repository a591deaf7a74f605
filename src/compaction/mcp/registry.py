"""Tool registry.

Tool modules register their handlers on the module-level ``registry`` at
import time; ``create_mcp_server`` wires whatever is registered.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from compaction.mcp.context import AppContext

# (session, validated params) -> JSON-ready result
HandlerFn = Callable[["AppContext", Any], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class ToolSpec:
    """One tool: its MCP name, handler, description and params model."""

    name: str
    handler: HandlerFn
    description: str
    params_model: type[BaseModel]


class ToolRegistry:
    """Ordered name -> ToolSpec mapping filled by the ``register`` decorator."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        params_model: type[BaseModel],
    ) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator registering ``fn`` under ``name``.

        Usage:
            @registry.register("read_file", "Read and activate a file", ReadFileParams)
            async def read_file(ctx: AppContext, params: ReadFileParams) -> dict:
                ...

        Raises:
            ValueError: ``name`` is already registered to another handler
        """

        def decorator(fn: HandlerFn) -> HandlerFn:
            existing = self._tools.get(name)
            if existing is not None and existing.handler is not fn:
                raise ValueError(f"Tool already registered: {name}")
            self._tools[name] = ToolSpec(name=name, handler=fn, description=description, params_model=params_model)
            return fn

        return decorator

    def get_all(self) -> list[ToolSpec]:
        """Specs in registration order."""
        return list(self._tools.values())

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def clear(self) -> None:
        self._tools.clear()

    def __len__(self) -> int:
        return len(self._tools)


registry = ToolRegistry()
