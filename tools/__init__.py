"""
MCP tools for the Cargo README server.

This package contains MCP tool wrappers organized by functionality:
- readme_tools: README retrieval with usage examples
- package_tools: Crate metadata and registry search
"""
