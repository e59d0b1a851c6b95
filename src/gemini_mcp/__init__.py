"""
gemini-mcp: a Model Context Protocol server for Google Gemini.

Architecture:
    stdin bytes -> Framing.decode -> RequestRouter -> ToolRegistry
                                                    -> handler
                                                    -> ConversationStore
                                                    -> ModelGateway (Gemini REST)
    stdout bytes <- Framing.encode <- response envelope

Packages:
    transport     framing strategies and the stdio transport
    protocol      JSON-RPC envelopes, error codes, capabilities
    tools         tool descriptors, argument validation, handlers, model catalog
    conversation  per-session turn history
    provider      model gateway adapter for the Gemini API
    server        request router and the serve loop
"""

__version__ = "4.0.0"
