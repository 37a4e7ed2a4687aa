"""x402 micropayments over MCP: networks, signers and the paying client."""
