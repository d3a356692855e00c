# app/notifications.py
"""
Booking notifications over Twilio (WhatsApp or SMS).

Delivery is best effort: failures are logged and reported as ``False`` but
never raised, so a booking is never undone by a notification problem.
"""

import logging
import re
from typing import Literal, Optional

import httpx
from pydantic import BaseModel

from app import config

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01/Accounts"


class NotificationEvent(BaseModel):
    kind: Literal["created", "cancelled"]
    client_phone: str
    client_name: str
    date: str
    time: str
    service: str
    barber_name: Optional[str] = None
    barber_phone: Optional[str] = None


def format_phone(phone: str, channel: str = "whatsapp") -> str:
    """Normalize to E.164 (North American numbering assumed for bare numbers).

    Examples:
        >>> format_phone("809-203-3894", "sms")
        '+18092033894'
        >>> format_phone("18092033894")
        'whatsapp:+18092033894'
    """
    raw = (phone or "").strip()
    digits = re.sub(r"\D", "", raw)

    if raw.startswith("+") and 8 <= len(digits) <= 15:
        number = f"+{digits}"
    elif len(digits) == 10:
        number = f"+1{digits}"
    elif len(digits) == 11 and digits.startswith("1"):
        number = f"+{digits}"
    else:
        raise ValueError(f"Invalid phone number: {phone!r}")

    return f"whatsapp:{number}" if channel == "whatsapp" else number


def render_message(event: NotificationEvent, audience: Literal["client", "staff"]) -> str:
    with_barber = f" with {event.barber_name}" if event.barber_name else ""

    if audience == "client":
        if event.kind == "created":
            return (
                f"Hi {event.client_name}! Your appointment for {event.service}{with_barber} "
                f"is confirmed for {event.date} at {event.time}. See you soon!"
            )
        return f"Hi {event.client_name}, your appointment on {event.date} at {event.time} has been cancelled."

    if event.kind == "created":
        return (
            f"New appointment{with_barber}:\n"
            f"Date: {event.date}\n"
            f"Time: {event.time}\n"
            f"Client: {event.client_name}\n"
            f"Phone: {event.client_phone}\n"
            f"Service: {event.service}"
        )
    return (
        f"Appointment cancelled{with_barber}:\n"
        f"Date: {event.date}\n"
        f"Time: {event.time}\n"
        f"Client: {event.client_name}\n"
        "This time is now available."
    )


class NotificationDispatcher:
    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        channel: Optional[str] = None,
        shop_phone: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid if account_sid is not None else config.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token if auth_token is not None else config.TWILIO_AUTH_TOKEN
        self.from_number = from_number if from_number is not None else config.TWILIO_FROM_NUMBER
        self.channel = channel or config.NOTIFY_CHANNEL
        self.shop_phone = shop_phone if shop_phone is not None else config.SHOP_PHONE
        self.timeout = timeout or config.NOTIFY_TIMEOUT_SECONDS
        self.max_attempts = max_attempts or config.NOTIFY_MAX_ATTEMPTS
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def dispatch(self, event: NotificationEvent) -> bool:
        """Notify the client, the barber and the shop. True only if every send succeeded."""
        recipients = [(event.client_phone, "client")]
        if event.barber_phone:
            recipients.append((event.barber_phone, "staff"))
        if self.shop_phone and self.shop_phone != event.barber_phone:
            recipients.append((self.shop_phone, "staff"))

        ok = True
        for phone, audience in recipients:
            try:
                sent = await self.send_message(phone, render_message(event, audience))
            except Exception:
                logger.exception("Unexpected error sending %s notification to %s", event.kind, phone)
                sent = False
            ok = ok and sent
        return ok

    async def send_message(self, to_phone: str, body: str) -> bool:
        try:
            to = format_phone(to_phone, self.channel)
        except ValueError as e:
            logger.warning("Skipping notification: %s", e)
            return False

        if not self.enabled:
            logger.info("Twilio not configured, would send to %s: %s", to, body)
            return True

        sender = f"whatsapp:{self.from_number}" if self.channel == "whatsapp" else self.from_number
        data = {"To": to, "From": sender, "Body": body}
        url = f"{TWILIO_API_URL}/{self.account_sid}/Messages.json"

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            for attempt in range(1, self.max_attempts + 1):
                try:
                    response = await client.post(url, auth=(self.account_sid, self.auth_token), data=data)
                except httpx.TransportError as e:
                    logger.warning(
                        "Twilio request to %s failed (attempt %d/%d): %s", to, attempt, self.max_attempts, e
                    )
                    continue

                if response.status_code in (200, 201):
                    logger.info("Notification sent to %s (SID: %s)", to, response.json().get("sid"))
                    return True

                logger.error("Twilio rejected message to %s: %s %s", to, response.status_code, response.text)
                return False

        logger.error("Giving up on notification to %s after %d attempts", to, self.max_attempts)
        return False
