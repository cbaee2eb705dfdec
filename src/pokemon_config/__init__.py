"""Runtime configuration (dotenv + environment) for the Pokémon MCP server."""
