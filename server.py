#!/usr/bin/env python3
"""
FastMCP server for Rust crate READMEs.

This server provides tools to:
1. Fetch a crate README from crates.io (falling back to GitHub) with usage examples
2. Fetch crate metadata, dependencies and download statistics
3. Search the crates.io registry

Usage:
    python server.py [stdio|sse|http]
"""

import logging
import sys
from typing import Tuple

from dotenv import load_dotenv
from fastmcp import FastMCP

from crate_readme.cache import MemoryCache
from crate_readme.config import get_settings
from crate_readme.errors import ConfigurationError
from crate_readme.logger import setup_logging
from tools.package_tools import register_package_tools
from tools.readme_tools import register_readme_tools


def create_server() -> Tuple[FastMCP, logging.Logger]:
    """Build the server with all tools registered. Exits on invalid configuration."""
    load_dotenv()
    try:
        settings = get_settings()
    except ConfigurationError as e:
        print(f"Environment validation failed: {e.message}", file=sys.stderr)
        sys.exit(1)

    logger = setup_logging(settings.logs_dir, settings.log_level)

    mcp = FastMCP("Cargo README Server 🦀")
    cache = MemoryCache(default_ttl=settings.cache_ttl, max_size=settings.cache_max_size)

    register_readme_tools(mcp, settings, cache)
    register_package_tools(mcp, settings, cache)
    return mcp, logger


def main():
    mcp, logger = create_server()

    logger.info("Cargo README Server starting up")

    transport = sys.argv[1].lower() if len(sys.argv) > 1 else "stdio"

    if transport == "sse":
        logger.info("Running with SSE transport on http://127.0.0.1:8604")
        mcp.run(transport="sse", host="127.0.0.1", port=8604)
    elif transport == "http":
        logger.info("Running with HTTP transport on http://127.0.0.1:8604/mcp")
        mcp.run(transport="http", host="127.0.0.1", port=8604, path="/mcp")
    elif transport == "stdio":
        logger.info("Running with STDIO transport")
        mcp.run(transport="stdio")
    else:
        print("Usage: python server.py [stdio|sse|http]", file=sys.stderr)
        print("Default: stdio", file=sys.stderr)
        logger.info("Running with default STDIO transport")
        mcp.run()


if __name__ == "__main__":
    main()
