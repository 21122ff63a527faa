"""nano-banana: a Gemini image generation tool served over MCP."""

__version__ = "1.0.0"
