"""Gupshup module for sending SMS through the Gupshup HTTP API."""

from .client import GupshupClient, GupshupError, extract_message_id

__all__ = [
    "GupshupClient",
    "GupshupError",
    "extract_message_id",
]
