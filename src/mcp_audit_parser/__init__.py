"""Linux audit log parsing, exposed as an MCP server and a CLI."""
