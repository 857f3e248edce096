"""
chatstream - Chat Completions Dialect Normalizer

Turns OpenAI-compatible chat completion events (streamed chunks or full
responses, including the quirks of Azure, Groq, OpenRouter and Mistral) into
a canonical sequence of message-part calls on a transmitter.
"""

__version__ = "1.0.0"
__author__ = "chatstream"
