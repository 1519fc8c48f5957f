"""
Outbound Message Sender
========================
Delivers WhatsApp messages through the Twilio Messages REST API.

Every verdict, acknowledgment and error message leaves through send().
Delivery is attempted once: failures are logged and reported as False,
never raised and never retried. Without Twilio credentials the sender is
disabled and only logs what it would have sent.
"""

import logging

import requests

from guardian import config

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
SEND_TIMEOUT = 10


def _as_whatsapp(address: str) -> str:
    return address if address.startswith("whatsapp:") else f"whatsapp:{address}"


class MessageSender:

    def __init__(self, account_sid: str = "", auth_token: str = "", from_number: str = "",
                 http=requests):
        self.account_sid = account_sid or config.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or config.TWILIO_AUTH_TOKEN
        self.from_number = from_number or config.TWILIO_WHATSAPP_NUMBER
        self.http = http

        if not self.enabled:
            logger.warning("Twilio credentials not found — message delivery is disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, sender_id: str, text: str) -> bool:
        """
        Send text to sender_id as a new WhatsApp message.

        Args:
            sender_id: Recipient (e.g. 'whatsapp:+595981123456')
            text: Message body

        Returns:
            True if Twilio accepted the message, False otherwise
        """
        if not self.enabled:
            logger.error(f"[SENDER] Cannot send to {sender_id}: Twilio is not configured")
            return False

        try:
            response = self.http.post(
                TWILIO_MESSAGES_URL.format(sid=self.account_sid),
                data={
                    "From": _as_whatsapp(self.from_number),
                    "To": _as_whatsapp(sender_id),
                    "Body": text,
                },
                auth=(self.account_sid, self.auth_token),
                timeout=SEND_TIMEOUT,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.error(f"[SENDER] Timeout sending to {sender_id}")
            return False
        except requests.exceptions.RequestException as e:
            logger.error(f"[SENDER] Error sending to {sender_id}: {e}")
            return False

        logger.info(f"[SENDER] Message sent to {sender_id}")
        return True
