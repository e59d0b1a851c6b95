"""Process entry point: ``gemini-mcp`` / ``python -m gemini_mcp``."""

import argparse
import asyncio
import logging
import sys

from gemini_mcp import __version__
from gemini_mcp.config import ConfigError, ServerConfig
from gemini_mcp.server.app import run
from gemini_mcp.transport.types import FramingMode

logger = logging.getLogger("gemini_mcp")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gemini-mcp",
        description="MCP server exposing Google Gemini tools over stdio.",
    )
    parser.add_argument(
        "--framing",
        choices=[m.value for m in FramingMode],
        help="Stdio message framing (default: line, or $GEMINI_MCP_FRAMING)",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for stderr output (default: INFO, or $GEMINI_MCP_LOG_LEVEL)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        config = ServerConfig.from_env(framing=args.framing, log_level=args.log_level)
    except ConfigError as e:
        # Logging is not configured yet; stdout belongs to the protocol
        print(f"gemini-mcp: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(stream=sys.stderr, level=config.log_level, format=LOG_FORMAT)
    logger.info(f"Starting gemini-mcp {__version__} ({config.framing.value} framing)")

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
