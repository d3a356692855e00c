"""Tests for notification formatting and Twilio delivery."""

import httpx
import pytest

from app.notifications import NotificationDispatcher, NotificationEvent, format_phone, render_message


def _event(**overrides) -> NotificationEvent:
    data = dict(
        kind="created",
        client_phone="809-555-0199",
        client_name="Ana",
        date="2030-01-02",
        time="9:00 AM",
        service="Haircut",
        barber_name="Carlos",
        barber_phone="8095550101",
    )
    data.update(overrides)
    return NotificationEvent(**data)


def _dispatcher(handler, **kwargs) -> NotificationDispatcher:
    params = dict(
        account_sid="AC123",
        auth_token="token",
        from_number="+18095550000",
        channel="whatsapp",
        shop_phone="",
        max_attempts=2,
        transport=httpx.MockTransport(handler),
    )
    params.update(kwargs)
    return NotificationDispatcher(**params)


class TestFormatPhone:
    def test_ten_digits_get_country_code(self):
        assert format_phone("(809) 555-0199", "sms") == "+18095550199"

    def test_eleven_digits_starting_with_one(self):
        assert format_phone("1 809 555 0199", "sms") == "+18095550199"

    def test_whatsapp_prefix(self):
        assert format_phone("8095550199") == "whatsapp:+18095550199"

    def test_e164_is_kept(self):
        assert format_phone("+34 612 345 678", "sms") == "+34612345678"

    @pytest.mark.parametrize("phone", ["", "12345", "555-0199", "28095550199"])
    def test_invalid(self, phone):
        with pytest.raises(ValueError):
            format_phone(phone)


class TestRenderMessage:
    def test_client_confirmation(self):
        text = render_message(_event(), "client")
        assert "Ana" in text
        assert "2030-01-02" in text
        assert "9:00 AM" in text
        assert "Carlos" in text

    def test_staff_cancellation_mentions_freed_slot(self):
        text = render_message(_event(kind="cancelled"), "staff")
        assert "cancelled" in text
        assert "now available" in text


class TestDispatcher:
    @pytest.mark.asyncio
    async def test_sends_to_client_and_barber(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"sid": f"SM{len(requests)}"})

        ok = await _dispatcher(handler).dispatch(_event())

        assert ok is True
        assert len(requests) == 2
        assert requests[0].url.path == "/2010-04-01/Accounts/AC123/Messages.json"
        body = requests[0].content.decode()
        assert "To=whatsapp%3A%2B18095550199" in body
        assert "From=whatsapp%3A%2B18095550000" in body

    @pytest.mark.asyncio
    async def test_shop_phone_gets_a_copy(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"sid": "SM1"})

        await _dispatcher(handler, shop_phone="8092033894").dispatch(_event(barber_phone=None))
        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_rejection_is_reported_not_raised(self):
        def handler(request):
            return httpx.Response(400, json={"message": "bad number"})

        assert await _dispatcher(handler).dispatch(_event()) is False

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(201, json={"sid": "SM1"})

        ok = await _dispatcher(handler).dispatch(_event(barber_phone=None))
        assert ok is True
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        ok = await _dispatcher(handler, max_attempts=3).dispatch(_event(barber_phone=None))
        assert ok is False
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_invalid_recipient_is_skipped(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"sid": "SM1"})

        ok = await _dispatcher(handler).dispatch(_event(client_phone="123"))
        assert ok is False
        assert len(requests) == 1  # the barber still gets notified

    @pytest.mark.asyncio
    async def test_without_credentials_only_logs(self):
        def handler(request):
            raise AssertionError("no request expected")

        dispatcher = _dispatcher(handler, account_sid="", auth_token="", from_number="")
        assert dispatcher.enabled is False
        assert await dispatcher.dispatch(_event()) is True
