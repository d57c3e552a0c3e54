"""Client library for the Coze bot platform API: bots, conversations, chat messages and audio."""

__version__ = "0.1.0"