"""
Core modules for the Cargo README MCP server.

This package contains the core business logic modules:
- logger: Logging infrastructure
- config: Environment-driven settings
- errors: Error taxonomy for registry lookups
- validators: Tool argument validation
- cache: In-memory TTL response cache
- sections, code_blocks, classifier, parser: README parsing pipeline
- html_to_markdown: Rendering crates.io README HTML as Markdown
- crates_io, github: Registry and fallback HTTP clients
- scoring: Search result scores
- core: Main business logic functions
"""
