"""
Entry point: ``python -m github_mcp_server`` or ``github-mcp-server``.

Diagnostics go to stderr; stdout carries only protocol responses.
"""

import asyncio
import logging
import sys

from .server import ConfigurationError, ServerConfig, run_server


logger = logging.getLogger("github_mcp_server")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()

    try:
        config = ServerConfig.from_env()
    except ConfigurationError as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
