"""Streaming chat proxy.

Forwards chat requests to an OpenAI-compatible completion API and re-streams
the model output as tagged reasoning/content segments.
"""

__version__ = "0.1.0"
