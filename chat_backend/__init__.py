"""In-memory chat backend with OpenAI-generated replies."""

__version__ = "1.0.0"
