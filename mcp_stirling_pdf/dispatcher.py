"""Tool registry and dispatch.

Maps MCP tool names to operations and wraps each result in a
``CallToolResult`` envelope.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import mcp.types as types

from .config import LOGGER_NAME
from .errors import UnknownOperationError
from .operations import OPERATIONS_BY_NAME, ApiClient, Operation, format_error, run_operation

logger = logging.getLogger(LOGGER_NAME)


def _text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


class Dispatcher:
    """Routes tool calls to operations backed by a single API client."""

    def __init__(self, client: ApiClient, operations: Optional[Iterable[Operation]] = None):
        self.client = client
        if operations is None:
            self._operations: Dict[str, Operation] = dict(OPERATIONS_BY_NAME)
        else:
            self._operations = {op.name: op for op in operations}

    def list_tools(self) -> List[types.Tool]:
        """List available tools with their JSON Schema arguments."""
        return [
            types.Tool(name=op.name, description=op.description, inputSchema=op.input_schema())
            for op in self._operations.values()
        ]

    def get_operation(self, name: str) -> Operation:
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)
        return operation

    async def invoke(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        """Run the named tool; never raises."""
        logger.debug(f"Tool call: {name}, arguments: {sorted((arguments or {}).keys())}")
        try:
            operation = self.get_operation(name)
            text = await run_operation(operation, arguments, self.client)
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}", exc_info=not isinstance(e, UnknownOperationError))
            return _text_result(format_error(e), is_error=True)
        return _text_result(text)
