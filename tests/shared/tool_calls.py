"""Helpers for calling registered MCP tools in-process."""

from gravity_forms_mcp.server import mcp_server


async def call_tool_text(name: str, arguments: dict) -> str:
    """Call a registered tool and return its text content."""
    result = await mcp_server.call_tool(name, arguments)
    # Newer mcp releases return (content, structured_content)
    if isinstance(result, tuple):
        result = result[0]
    return result[0].text
