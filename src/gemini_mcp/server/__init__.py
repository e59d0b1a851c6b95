"""Request routing and the stdio serve loop."""

from gemini_mcp.server.router import RequestRouter
from gemini_mcp.server.app import MCPServer, build_server, run
from gemini_mcp.server.catalogs import PROMPTS, RESOURCES, Prompt, PromptArgument, Resource

__all__ = [
    "RequestRouter",
    "MCPServer",
    "build_server",
    "run",
    "PROMPTS",
    "RESOURCES",
    "Prompt",
    "PromptArgument",
    "Resource",
]
