"""Server capability declaration returned from ``initialize``."""

from dataclasses import dataclass, field
from typing import Any

from gemini_mcp import __version__

# Protocol version constants
PROTOCOL_VERSION = "2024-11-05"


@dataclass
class ServerInfo:
    """Information about this server sent during initialization."""

    name: str = "gemini-mcp"
    version: str = __version__

    def to_dict(self) -> dict[str, str]:
        """Convert to wire format."""
        return {"name": self.name, "version": self.version}


@dataclass
class ServerCapabilities:
    """
    Capabilities advertised to the client.

    Tools, resources and prompts are all offered; none of them emits
    list-changed notifications since every catalog is static.
    """

    tools: bool = True
    resources: bool = True
    prompts: bool = True
    experimental: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``capabilities`` object of the initialize result."""
        caps: dict[str, Any] = {}
        if self.tools:
            caps["tools"] = {}
        if self.resources:
            caps["resources"] = {}
        if self.prompts:
            caps["prompts"] = {}
        if self.experimental:
            caps["experimental"] = self.experimental
        return caps


@dataclass
class InitializeResult:
    """Static descriptor answered to every ``initialize`` request."""

    protocol_version: str = PROTOCOL_VERSION
    server_info: ServerInfo = field(default_factory=ServerInfo)
    capabilities: ServerCapabilities = field(default_factory=ServerCapabilities)

    def to_dict(self) -> dict[str, Any]:
        return {
            "protocolVersion": self.protocol_version,
            "serverInfo": self.server_info.to_dict(),
            "capabilities": self.capabilities.to_dict(),
        }
