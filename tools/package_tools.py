#!/usr/bin/env python3
"""
MCP tools for crate metadata and search.

This module provides MCP tool wrappers around the core crates.io functionality.
"""

from typing import Any, Dict, Optional

from fastmcp import FastMCP, Context
from fastmcp.exceptions import ToolError

from crate_readme.cache import MemoryCache
from crate_readme.config import Settings
from crate_readme.core import get_package_info_impl, search_packages_impl
from crate_readme.crates_io import CratesIoClient
from crate_readme.errors import PackageReadmeError
from crate_readme.logger import setup_logging


def register_package_tools(mcp: FastMCP, settings: Settings, cache: MemoryCache):
    """Register crate info and search MCP tools."""
    logger = setup_logging(settings.logs_dir, settings.log_level)

    @mcp.tool
    async def get_package_info_from_cargo(package_name: str, ctx: Context, include_dependencies: bool = True, include_dev_dependencies: bool = False) -> Dict[str, Any]:
        """
        Get Rust crate basic information and dependencies from crates.io.

        Args:
            package_name: The name of the Rust crate
            include_dependencies: Whether to include dependencies (default: true)
            include_dev_dependencies: Whether to include development dependencies (default: false)

        Returns:
            Latest version, license, keywords, download statistics and dependencies
        """
        try:
            async with CratesIoClient(logger, settings.request_timeout) as crates:
                return await get_package_info_impl(
                    package_name, include_dependencies, include_dev_dependencies, crates, cache, logger, ctx
                )
        except PackageReadmeError as e:
            raise ToolError(f"{e.code}: {e.message}") from e

    @mcp.tool
    async def search_packages_from_cargo(query: str, ctx: Context, limit: int = 20, quality: Optional[float] = None, popularity: Optional[float] = None) -> Dict[str, Any]:
        """
        Search for Rust crates in the crates.io registry.

        Args:
            query: The search query
            limit: Maximum number of results to return (1-100, default: 20)
            quality: Minimum quality score (0-1)
            popularity: Minimum popularity score (0-1)

        Returns:
            Matching crates with scores
        """
        try:
            async with CratesIoClient(logger, settings.request_timeout) as crates:
                return await search_packages_impl(query, limit, quality, popularity, crates, cache, logger, ctx)
        except PackageReadmeError as e:
            raise ToolError(f"{e.code}: {e.message}") from e
