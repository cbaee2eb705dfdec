"""MCP server exposing PokéAPI lookups (stats, sprites, info, cries) as tools.

Intended for use over the stdio transport: ``python -m pokemon_mcp.server``.
"""

__version__ = "1.0.0"
