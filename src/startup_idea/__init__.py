"""Startup Idea MCP Server.

A paid MCP tool that reads the latest business news from an upstream paid MCP
server and turns it into a structured startup-opportunity report.
"""

__version__ = "1.0.0"
