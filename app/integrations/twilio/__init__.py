"""Twilio module for placing voice calls and sending SMS."""

from .client import get_twilio_client, create_call, send_sms, build_twiml_say

__all__ = [
    "get_twilio_client",
    "create_call",
    "send_sms",
    "build_twiml_say",
]
