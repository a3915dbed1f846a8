"""Chatpilot — chat assistant with reminders, image generation, and semantic memory."""

__version__ = "0.1.0"
