"""Twilio REST client helpers.

Thin wrappers over ``twilio.rest.Client`` that apply the dispatch request
timeout and return the created resource SID. Errors are raised to the
caller (``TwilioRestException`` for API errors, ``requests`` exceptions for
transport failures) so providers can classify them.
"""

from xml.sax.saxutils import escape

from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from infrastructure.logging import get_module_logger

logger = get_module_logger()


def get_twilio_client(account_sid: str, auth_token: str, timeout: float) -> Client:
    """Create a Twilio client whose HTTP calls honour ``timeout`` seconds."""
    return Client(
        account_sid,
        auth_token,
        http_client=TwilioHttpClient(timeout=timeout),
    )


def build_twiml_say(text: str, repeat: int = 2) -> str:
    """Build TwiML that speaks ``text`` ``repeat`` times, then hangs up."""
    says = "".join(
        f'<Say voice="alice">{escape(text)}</Say><Pause length="1"/>'
        for _ in range(repeat)
    )
    return f"<Response>{says}<Hangup/></Response>"


def send_sms(client: Client, from_number: str, to_number: str, body: str) -> str:
    """Send an SMS and return the message SID."""
    message = client.messages.create(to=to_number, from_=from_number, body=body)
    logger.debug("twilio_sms_created", sid=message.sid, to_number=to_number)
    return message.sid


def create_call(client: Client, from_number: str, to_number: str, twiml: str) -> str:
    """Place a voice call speaking ``twiml`` and return the call SID."""
    call = client.calls.create(to=to_number, from_=from_number, twiml=twiml)
    logger.debug("twilio_call_created", sid=call.sid, to_number=to_number)
    return call.sid
