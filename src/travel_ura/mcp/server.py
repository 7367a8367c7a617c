"""MCP Server for URA travel queries.

This module implements a Model Context Protocol (MCP) server that exposes
the multi-stop common trip query as a tool.
"""

import asyncio
import json
import logging
from typing import Any

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import (
    TextContent,
    Tool,
)

from ..core.exceptions import UraError
from ..core.models import PredictionSet, UraConfig
from ..core.query import build_query, find_common_trips

logger = logging.getLogger(__name__)


class UraMCPServer:
    """MCP Server for URA travel query functionality."""

    def __init__(self, config: UraConfig | None = None) -> None:
        """Initialize the URA MCP Server.

        Args:
            config: Prediction source settings used for every query
        """
        self.server = Server("travel-ura")
        self.config = config or UraConfig()

        # Register handlers
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            return [
                Tool(
                    name="find_common_trips",
                    description="Find the buses predicted to visit all of the given stops, soonest first",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "stops": {
                                "type": "array",
                                "items": {"type": "string"},
                                "minItems": 1,
                                "description": "Stop point names in travel order",
                            },
                            "ordered": {
                                "type": "boolean",
                                "description": "If true, the bus must reach the stops in the given order",
                                "default": True,
                            },
                        },
                        "required": ["stops"],
                    },
                ),
            ]

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any]
        ) -> list[TextContent]:
            """Handle tool calls."""
            try:
                if name == "find_common_trips":
                    return await self._find_common_trips(arguments)
                else:
                    return [TextContent(type="text", text=f"Unknown tool: {name}")]

            except Exception as e:
                logger.error(f"Error in tool {name}: {e}")
                return [TextContent(type="text", text=f"Error: {str(e)}")]

    async def _find_common_trips(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Run a multi-stop query off the event loop."""
        stops = arguments.get("stops") or []
        ordered = arguments.get("ordered", True)

        try:
            query = build_query(stops, ordered=ordered)
            combined = await asyncio.to_thread(find_common_trips, query, self.config)
        except UraError as e:
            stop = f" ({e.stop_point_name})" if e.stop_point_name else ""
            return [TextContent(type="text", text=f"Query failed{stop}: {str(e)}")]

        if not combined.predictions:
            return [
                TextContent(
                    type="text",
                    text=f"No common trips found for {' → '.join(query.stops)}",
                )
            ]

        return [
            TextContent(type="text", text=self._summarize(combined, query.stops)),
            TextContent(
                type="text",
                text="JSON Data:\n"
                + json.dumps(
                    combined.model_dump(mode="json"), ensure_ascii=False, indent=2
                ),
            ),
        ]

    @staticmethod
    def _summarize(combined: PredictionSet, stops: list[str]) -> str:
        result_text = (
            f"**Found {len(combined)} trips visiting {' → '.join(stops)}** "
            f"(as of {combined.time:%H:%M}):\n\n"
        )
        for idx, p in enumerate(combined.predictions, 1):
            result_text += (
                f"{idx}. Line {p.line_name} to {p.destination_text} - "
                f"{combined.minutes_until(p)} min at {p.stop_point_name}\n"
            )
        return result_text


async def main() -> None:
    """Main entry point for the MCP server."""
    # Configure logging
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting URA Travel MCP Server")

    server_instance = UraMCPServer()

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP Server running with stdio transport")
        await server_instance.server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="travel-ura",
                server_version="0.1.0",
                capabilities=server_instance.server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main_sync() -> None:
    """Synchronous wrapper for the async main function - used as entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
