"""Expose ``generate_image`` through the Model Context Protocol over stdio."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import ContentBlock, Tool

from nano_banana import __version__
from nano_banana.exceptions import ToolExecutionError, UnknownToolError
from nano_banana.tool import TOOL_NAME, GenerateImageTool

logger = logging.getLogger(__name__)

SERVER_NAME = "nano-banana"

app: Server = Server(SERVER_NAME, version=__version__)
image_tool = GenerateImageTool()


@app.list_tools()
async def handle_list_tools() -> list[Tool]:
    return [image_tool.definition()]


@app.call_tool()
async def handle_call_tool(name: str, arguments: dict[str, Any]) -> tuple[list[ContentBlock], dict[str, Any]]:
    if name != TOOL_NAME:
        raise UnknownToolError(name)

    result = await image_tool.run(arguments)
    if result.isError:
        # The server turns raised errors into isError results
        text = "\n".join(block.text for block in result.content if block.type == "text")
        raise ToolExecutionError(text)
    return list(result.content), result.structuredContent or {}


async def main() -> None:
    """Serve until stdin closes."""
    logger.info("Starting %s MCP server on stdio", SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())


def serve() -> None:
    asyncio.run(main())
