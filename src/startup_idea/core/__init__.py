"""Core business logic: normalization, prompting, parsing, payments and clients.

Nothing in here depends on FastMCP or the server process. The server module
wires these pieces to the MCP tool surface.
"""
