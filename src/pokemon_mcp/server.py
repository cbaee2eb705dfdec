from __future__ import annotations

import logging
import sys
from typing import Any

import anyio
import anyio.to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from pokemon_common.errors import MissingArgumentsError, UnknownToolError
from pokemon_config.settings import init_runtime
from pokemon_mcp import __version__
from pokemon_mcp.tools import Dispatcher, build_registry


logger = logging.getLogger(__name__)

SERVER_NAME = "pokemon-mcp-server"


def tool_definitions(dispatcher: Dispatcher) -> list[types.Tool]:
    return [
        types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
        for spec in dispatcher.list_tools()
    ]


async def handle_call(dispatcher: Dispatcher, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
    """
    Run one tool call off the event loop (handlers block on requests/subprocess).

    The handler's envelope, success or error, becomes the CallToolResult.
    MissingArgumentsError / UnknownToolError are re-raised as McpError so the
    client receives a JSON-RPC error instead of a tool result.
    """
    try:
        response = await anyio.to_thread.run_sync(dispatcher.call, name, arguments)
    except MissingArgumentsError as e:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e
    except UnknownToolError as e:
        raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(e))) from e
    return types.CallToolResult.model_validate(response.to_dict())


def build_server(dispatcher: Dispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tool_definitions(dispatcher)

    # Registered directly: the SDK's call_tool() decorator validates input
    # against the schema and turns every exception into an isError result.
    async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await handle_call(dispatcher, req.params.name, req.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(dispatcher: Dispatcher | None = None) -> None:
    server = build_server(dispatcher or Dispatcher(build_registry()))
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s %s listening on stdio", SERVER_NAME, __version__)
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    # Entry points (console_scripts) call main() directly, so we must perform
    # runtime initialization here (dotenv + logging).
    init_runtime()
    try:
        anyio.run(serve)
    except KeyboardInterrupt:
        logger.info("%s stopped", SERVER_NAME)
    except Exception:
        logger.exception("%s terminated", SERVER_NAME)
        sys.exit(1)


if __name__ == "__main__":
    main()
