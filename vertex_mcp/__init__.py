"""Vertex AI MCP server: Gemini tools over JSON-RPC."""
