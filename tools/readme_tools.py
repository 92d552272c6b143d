#!/usr/bin/env python3
"""
MCP tools for crate README retrieval.

This module provides MCP tool wrappers around the core README functionality.
"""

from typing import Any, Dict

from fastmcp import FastMCP, Context
from fastmcp.exceptions import ToolError

from crate_readme.cache import MemoryCache
from crate_readme.config import Settings
from crate_readme.core import get_package_readme_impl
from crate_readme.crates_io import CratesIoClient
from crate_readme.errors import PackageReadmeError
from crate_readme.github import GitHubClient
from crate_readme.logger import setup_logging


def register_readme_tools(mcp: FastMCP, settings: Settings, cache: MemoryCache):
    """Register README related MCP tools."""
    logger = setup_logging(settings.logs_dir, settings.log_level)

    @mcp.tool
    async def get_readme_from_cargo(package_name: str, ctx: Context, version: str = "latest", include_examples: bool = True) -> Dict[str, Any]:
        """
        Get Rust crate README and usage examples from crates.io.

        Args:
            package_name: The name of the Rust crate
            version: The version of the crate (default: "latest")
            include_examples: Whether to include usage examples (default: true)

        Returns:
            README content, description, usage examples, installation snippets and basic crate info
        """
        try:
            async with CratesIoClient(logger, settings.request_timeout) as crates, \
                    GitHubClient(settings.github_token, logger, settings.request_timeout) as github:
                return await get_package_readme_impl(
                    package_name, version, include_examples, crates, github, cache, logger, ctx,
                    max_readme_chars=settings.max_readme_chars,
                )
        except PackageReadmeError as e:
            raise ToolError(f"{e.code}: {e.message}") from e
