from __future__ import annotations

import functools
import signal
import sys
from typing import Any, Callable

import anyio
import anyio.to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from modules.imaging.envelope import Failure, to_call_tool_result
from modules.imaging.generation import ImageGenerator
from modules.imaging.persistence import ImageSaver
from modules.imaging.tools import call_tool, list_tools
from services.api.config import get_settings


SERVER_NAME = "image-generation-server"
SERVER_VERSION = "1.0.0"
SERVER_INSTRUCTIONS = "A server that provides tools for generating and saving images using DALL-E 3"


class ToolCallError(Exception):
    """Raised from the call handler so the transport reports an error result."""


def mcp_tools() -> list[types.Tool]:
    return [types.Tool(name=t.name, title=t.title, description=t.description, inputSchema=t.input_schema) for t in list_tools()]


def run_tool(name: str, arguments: dict[str, Any] | None, *, generator: ImageGenerator, saver: ImageSaver) -> list[types.TextContent]:
    result = call_tool(name, arguments, generator=generator, saver=saver)
    if isinstance(result, Failure):
        raise ToolCallError(result.message)
    envelope = to_call_tool_result(result)
    return [types.TextContent(type="text", text=block["text"]) for block in envelope["content"]]


def build_server(
    *,
    generator_factory: Callable[[], ImageGenerator] | None = None,
    saver: ImageSaver | None = None,
) -> Server:
    settings = get_settings()
    make_generator = generator_factory or (lambda: ImageGenerator.from_settings(settings))
    image_saver = saver or ImageSaver(default_dir=settings.output_dir)
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return mcp_tools()

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        print(f"[mcp] call {name}", file=sys.stderr)
        # Adapters block on network and disk; keep them off the event loop
        return await anyio.to_thread.run_sync(
            functools.partial(run_tool, name, arguments, generator=make_generator(), saver=image_saver)
        )

    return server


async def serve(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        print("Server connected and ready to handle requests! Available tools:", file=sys.stderr)
        for t in list_tools():
            print(f"- {t.name}: {t.description or 'No description available'}", file=sys.stderr)
        await server.run(read_stream, write_stream, server.create_initialization_options())


def _shutdown(signum, frame) -> None:  # type: ignore[no-untyped-def]  # noqa: ARG001
    print("Shutting down server...", file=sys.stderr)
    raise SystemExit(0)


def main() -> int:
    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)
    print("Starting image generation server with image generation and saving capabilities...", file=sys.stderr)
    try:
        anyio.run(serve, build_server())
    except Exception as exc:  # noqa: BLE001
        print(f"Failed to start server: {exc}", file=sys.stderr)
        return 1
    return 0
